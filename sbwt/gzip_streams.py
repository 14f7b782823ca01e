"""Gzip/zlib file streams. Input auto-detects compression and passes plain data through."""

from __future__ import annotations

import re
import zlib
from typing import IO

from .strict_files import OpenMode, open_input, open_output

__all__ = ["ZlibError", "is_compressed", "GzipInput", "GzipOutput"]

_BUFFER_SIZE = 1 << 20
_ZLIB_HEADER_SECOND_BYTES = (0x01, 0x9C, 0xDA)
_ERROR_NAMES = {
    -2: "Z_STREAM_ERROR",
    -3: "Z_DATA_ERROR",
    -4: "Z_MEM_ERROR",
    -5: "Z_BUF_ERROR",
    -6: "Z_VERSION_ERROR",
}


class ZlibError(Exception):
    """Raised when zlib fails to compress or decompress."""


def _zlib_error(exc: zlib.error) -> ZlibError:
    text = str(exc)
    match = re.match(r"Error (-?\d+)", text)
    if match:
        code = int(match.group(1))
        name = _ERROR_NAMES.get(code, f"[{code}]")
        return ZlibError(f"zlib: {name}: {text}")
    return ZlibError(f"zlib: {text}")


def is_compressed(header: bytes) -> bool:
    """Whether the first bytes of a stream are a gzip or zlib header."""
    if len(header) < 2:
        return False
    b0, b1 = header[0], header[1]
    return (b0 == 0x1F and b1 == 0x8B) or (b0 == 0x78 and b1 in _ZLIB_HEADER_SECOND_BYTES)


class GzipInput:
    """Reads a gzip or zlib file, or a plain file unchanged, as bytes."""

    def __init__(self, filename: str):
        self._raw: IO[bytes] | None = open_input(filename, OpenMode.BINARY)
        self._out = bytearray()
        self._eof = False
        self._detected = False
        self._is_text = False
        self._inflator = None

    def _fill(self) -> None:
        """Add more decoded data to the output buffer, or mark end of input."""
        if self._raw is None:
            raise ValueError("read from a closed stream")
        while True:
            chunk = self._raw.read(_BUFFER_SIZE)
            if not chunk:
                self._eof = True
                return
            if not self._detected:
                self._detected = True
                self._is_text = not is_compressed(chunk)
            if self._is_text:
                self._out += chunk
                return
            before = len(self._out)
            self._inflate(chunk)
            if len(self._out) > before:
                return

    def _inflate(self, data: bytes) -> None:
        while data:
            if self._inflator is None:
                self._inflator = zlib.decompressobj(15 + 32)
            try:
                self._out += self._inflator.decompress(data)
            except zlib.error as exc:
                raise _zlib_error(exc) from exc
            if self._inflator.eof:
                data = self._inflator.unused_data
                self._inflator = None
            else:
                data = b""

    def read(self, n: int = -1) -> bytes:
        """Read up to n bytes, or everything that remains if n is negative."""
        if n < 0:
            while not self._eof:
                self._fill()
            result = bytes(self._out)
            self._out.clear()
            return result
        while len(self._out) < n and not self._eof:
            self._fill()
        result = bytes(self._out[:n])
        del self._out[:n]
        return result

    def close(self) -> None:
        """Close the underlying file."""
        if self._raw is not None:
            self._raw.close()
            self._raw = None

    def __enter__(self) -> GzipInput:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class GzipOutput:
    """Writes a gzip-compressed file. The stream is finished when closed."""

    def __init__(self, filename: str, level: int = -1):
        if not -1 <= level <= 9:
            raise ZlibError(f"zlib: Z_STREAM_ERROR: invalid compression level {level}")
        self._raw: IO[bytes] | None = open_output(filename, OpenMode.BINARY)
        self._deflator = zlib.compressobj(level, zlib.DEFLATED, 15 + 16)

    def write(self, data: bytes) -> int:
        """Compress and write data; returns the number of input bytes taken."""
        if self._raw is None:
            raise ValueError("write to a closed stream")
        try:
            compressed = self._deflator.compress(bytes(data))
        except zlib.error as exc:
            raise _zlib_error(exc) from exc
        if compressed:
            self._raw.write(compressed)
        return len(data)

    def flush(self) -> None:
        """Always raises: flushing mid-stream is not supported; close the stream instead."""
        raise RuntimeError(
            "Error: zstr::ofstream flush() does not actully flush, so you should not call it. "
            "Manually flushing a zlib stream mid-stream is apparently bad practice and leads "
            "to bad performance. Instead, you should let the object go out of scope, which "
            "will close the stream, which will flush it."
        )

    def close(self) -> None:
        """Finish the compressed stream and close the file."""
        if self._raw is None:
            return
        try:
            try:
                tail = self._deflator.flush(zlib.Z_FINISH)
            except zlib.error as exc:
                raise _zlib_error(exc) from exc
            self._raw.write(tail)
        finally:
            self._raw.close()
            self._raw = None

    def __enter__(self) -> GzipOutput:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()