"""Shared helpers: reverse complements, logging, timing and small binary I/O utilities."""

from __future__ import annotations

import enum
import struct
import sys
import threading
import time
from typing import BinaryIO

_RC_TABLE = str.maketrans("ACGTacgt", "TGCAtgca")
_SIZE = struct.Struct("<q")


class LogLevel(enum.IntEnum):
    """Verbosity of log messages; lower values are more important."""

    SILENT = 0
    MAJOR = 1
    MINOR = 2
    DEBUG = 3


def get_rc(s: str) -> str:
    """Return the reverse complement of a DNA string.

    Case is preserved and characters outside ACGT are left unchanged.
    """
    return s[::-1].translate(_RC_TABLE)


def readlines(filename: str) -> list[str]:
    """Read all lines of a text file, without their trailing newlines."""
    with open(filename, encoding="utf-8", errors="surrogateescape", newline="") as f:
        text = f.read()
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def check_readable(filename: str) -> None:
    """Raise OSError if the file cannot be opened for reading."""
    with open(filename, "rb"):
        pass


def check_writable(filename: str) -> None:
    """Raise OSError if the file cannot be opened for appending. Creates it if missing."""
    with open(filename, "ab"):
        pass


def serialize_string(s: str, out: BinaryIO) -> int:
    """Write a length-prefixed string and return the number of bytes written."""
    data = s.encode("utf-8")
    out.write(_SIZE.pack(len(data)))
    out.write(data)
    return _SIZE.size + len(data)


def load_string(inp: BinaryIO) -> str:
    """Read a string written by serialize_string."""
    header = inp.read(_SIZE.size)
    if len(header) < _SIZE.size:
        raise EOFError("Unexpected end of stream while reading string length")
    (size,) = _SIZE.unpack(header)
    if size < 0:
        raise ValueError(f"Invalid string length {size}")
    data = inp.read(size)
    if len(data) < size:
        raise EOFError("Unexpected end of stream while reading string data")
    return data.decode("utf-8")


def cur_time_millis() -> int:
    """Milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def cur_time_micros() -> int:
    """Microseconds since the epoch."""
    return time.time_ns() // 1_000


_PROGRAM_START_MICROS = cur_time_micros()


def seconds_since_program_start() -> float:
    """Elapsed microseconds since module load, divided by 1000, as shown in log lines."""
    return (cur_time_micros() - _PROGRAM_START_MICROS) / 1000.0


def get_time_string() -> str:
    """Current local time in asctime format, without a trailing newline."""
    return time.asctime(time.localtime())


_log_level = LogLevel.MAJOR
_log_lock = threading.Lock()


def set_log_level(level: LogLevel) -> None:
    """Set the global log level."""
    global _log_level
    _log_level = LogLevel(level)


def get_log_level() -> LogLevel:
    """Return the global log level."""
    return _log_level


def write_log(message: str, level: LogLevel) -> None:
    """Print a timestamped message to stderr if level is within the global log level."""
    if level <= _log_level:
        with _log_lock:
            sys.stderr.write(
                f"{seconds_since_program_start():.4f} {get_time_string()} {message}\n"
            )
            sys.stderr.flush()


def check_true(condition: bool, error_message: str) -> None:
    """Raise RuntimeError with the given message if condition is false."""
    if not condition:
        raise RuntimeError(error_message)