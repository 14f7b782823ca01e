"""File opening that checks open modes and fails loudly on any open error."""

from __future__ import annotations

import enum
from typing import IO

__all__ = [
    "StrictFileError",
    "OpenMode",
    "mode_to_string",
    "check_mode",
    "open_input",
    "open_output",
]


class StrictFileError(Exception):
    """Raised when a file cannot be opened or the requested mode is inconsistent."""


class OpenMode(enum.Flag):
    """Open mode flags for files."""

    NONE = 0
    IN = enum.auto()
    OUT = enum.auto()
    APP = enum.auto()
    ATE = enum.auto()
    TRUNC = enum.auto()
    BINARY = enum.auto()


_MODE_NAMES = (
    (OpenMode.IN, "in"),
    (OpenMode.OUT, "out"),
    (OpenMode.APP, "app"),
    (OpenMode.ATE, "ate"),
    (OpenMode.TRUNC, "trunc"),
    (OpenMode.BINARY, "binary"),
)


def mode_to_string(mode: OpenMode) -> str:
    """Render a mode as its flag names joined by '|', or 'none' if empty."""
    return "|".join(name for flag, name in _MODE_NAMES if mode & flag) or "none"


def check_mode(filename: str, mode: OpenMode) -> None:
    """Raise StrictFileError if the combination of flags makes no sense."""
    prefix = f"strict_fstream: open('{filename}'): mode error: "
    if mode & OpenMode.TRUNC and not mode & OpenMode.OUT:
        raise StrictFileError(prefix + "trunc and not out")
    if mode & OpenMode.APP and not mode & OpenMode.OUT:
        raise StrictFileError(prefix + "app and not out")
    if mode & OpenMode.TRUNC and mode & OpenMode.APP:
        raise StrictFileError(prefix + "trunc and app")


def _failure(filename: str, mode: OpenMode, what: str, exc: OSError) -> StrictFileError:
    reason = exc.strerror or str(exc)
    return StrictFileError(
        f"strict_fstream: open('{filename}',{mode_to_string(mode)}): {what} failed: {reason}"
    )


def _open(filename: str, pymode: str, mode: OpenMode) -> IO:
    if mode & OpenMode.BINARY:
        return open(filename, pymode + "b")
    return open(filename, pymode, encoding="utf-8", errors="surrogateescape", newline="")


def open_input(filename: str, mode: OpenMode = OpenMode.IN) -> IO:
    """Open a file for reading, checking that it opens and can be read from."""
    mode |= OpenMode.IN
    check_mode(filename, mode)
    try:
        f = _open(filename, "r", mode)
    except OSError as exc:
        raise _failure(filename, mode, "open", exc) from exc
    try:
        getattr(f, "buffer", f).peek(1)
    except OSError as exc:
        f.close()
        raise _failure(filename, mode, "peek", exc) from exc
    return f


def open_output(filename: str, mode: OpenMode = OpenMode.OUT) -> IO:
    """Open a file for writing, checking the mode and that the open succeeds."""
    mode |= OpenMode.OUT
    check_mode(filename, mode)
    if mode & OpenMode.APP:
        pymode = "a+" if mode & OpenMode.IN else "a"
    elif mode & OpenMode.IN:
        pymode = "w+" if mode & OpenMode.TRUNC else "r+"
    else:
        pymode = "w"
    try:
        f = _open(filename, pymode, mode)
    except OSError as exc:
        raise _failure(filename, mode, "open", exc) from exc
    if mode & OpenMode.ATE:
        f.seek(0, 2)
    return f