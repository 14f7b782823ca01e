"""Large-buffer file streams for reading and writing many small chunks efficiently.

Input files may be plain or gzip/zlib compressed; compression is detected
from the file contents. Output files are written plain or gzip compressed.
"""

from __future__ import annotations

from typing import IO, Iterator, Union

from .gzip_streams import GzipInput, GzipOutput
from .strict_files import StrictFileError

__all__ = ["BufferedInput", "BufferedOutput"]

DEFAULT_BUFFER_CAPACITY = 1 << 20


def _check_capacity(cap: int) -> int:
    if cap <= 0:
        raise ValueError(f"buffer capacity must be positive, got {cap}")
    return cap


class BufferedInput:
    """Reads a file through a large internal buffer."""

    def __init__(self, filename: str):
        self._filename = filename
        self._cap = DEFAULT_BUFFER_CAPACITY
        self._buf = b""
        self._pos = 0
        self._is_eof = False
        self._stream: GzipInput | None = None
        self._open()

    def _open(self) -> None:
        try:
            self._stream = GzipInput(self._filename)
        except (StrictFileError, OSError) as exc:
            raise OSError(f"Error opening file {self._filename}") from exc
        self._buf = b""
        self._pos = 0
        self._is_eof = False

    def _refill(self) -> bool:
        if self._stream is None:
            raise ValueError("read from a closed stream")
        self._buf = self._stream.read(self._cap)
        self._pos = 0
        if not self._buf:
            self._is_eof = True
            return False
        return True

    def get(self) -> bytes | None:
        """Read one byte, or return None once the end of the file is reached."""
        if self._is_eof:
            return None
        if self._pos == len(self._buf) and not self._refill():
            return None
        byte = self._buf[self._pos : self._pos + 1]
        self._pos += 1
        return byte

    def read(self, n: int) -> bytes:
        """Read up to n bytes; fewer are returned only at the end of the file."""
        if n < 0:
            raise ValueError(f"byte count must be non-negative, got {n}")
        parts: list[bytes] = []
        remaining = n
        while remaining > 0 and not self._is_eof:
            if self._pos == len(self._buf) and not self._refill():
                break
            chunk = self._buf[self._pos : self._pos + remaining]
            self._pos += len(chunk)
            remaining -= len(chunk)
            parts.append(chunk)
        return b"".join(parts)

    def getline(self) -> str | None:
        """Read the next line without its newline, or None if no characters remain."""
        line = bytearray()
        while True:
            if self._is_eof:
                break
            if self._pos == len(self._buf) and not self._refill():
                break
            end = self._buf.find(b"\n", self._pos)
            if end >= 0:
                line += self._buf[self._pos : end]
                self._pos = end + 1
                return line.decode("utf-8", errors="surrogateescape")
            line += self._buf[self._pos :]
            self._pos = len(self._buf)
        if not line:
            return None
        return line.decode("utf-8", errors="surrogateescape")

    def __iter__(self) -> Iterator[str]:
        while (line := self.getline()) is not None:
            yield line

    def eof(self) -> bool:
        """Whether a read has hit the end of the file."""
        return self._is_eof

    def set_buffer_capacity(self, cap: int) -> None:
        """Set how many bytes are fetched from the file at a time."""
        self._cap = _check_capacity(cap)

    def rewind_to_start(self) -> None:
        """Start reading again from the beginning of the file."""
        if self._stream is None:
            raise ValueError("rewind of a closed stream")
        self._stream.close()
        self._open()

    def close(self) -> None:
        """Close the underlying file."""
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def __enter__(self) -> BufferedInput:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class BufferedOutput:
    """Writes to a file through a large internal buffer, optionally gzip compressed."""

    def __init__(self, filename: str, compress: bool = False):
        self._cap = DEFAULT_BUFFER_CAPACITY
        self._buf = bytearray()
        self._stream: Union[IO[bytes], GzipOutput, None]
        try:
            self._stream = GzipOutput(filename) if compress else open(filename, "wb")
        except (StrictFileError, OSError) as exc:
            raise OSError(f"Error opening file {filename}") from exc

    def _write_out(self, data: bytes) -> None:
        if self._stream is None:
            raise ValueError("write to a closed stream")
        try:
            self._stream.write(data)
        except OSError as exc:
            raise OSError("Error writing to file") from exc

    def _empty_buffer(self) -> None:
        if self._buf:
            self._write_out(bytes(self._buf))
            self._buf.clear()

    def write(self, data: bytes) -> None:
        """Append data, passing full buffers on to the file."""
        if self._stream is None:
            raise ValueError("write to a closed stream")
        self._buf += data
        while len(self._buf) > self._cap:
            chunk = bytes(self._buf[: self._cap])
            del self._buf[: self._cap]
            self._write_out(chunk)

    def set_buffer_capacity(self, cap: int) -> None:
        """Set how many bytes are collected before they are passed on to the file."""
        self._cap = _check_capacity(cap)

    def flush(self) -> None:
        """Flush the internal buffer and the file.

        Compressed streams cannot be flushed mid-stream and raise RuntimeError.
        """
        self._empty_buffer()
        self._stream.flush()  # type: ignore[union-attr]

    def close(self) -> None:
        """Write out what is buffered and close the file."""
        if self._stream is None:
            return
        try:
            self._empty_buffer()
        finally:
            self._stream.close()
            self._stream = None

    def __enter__(self) -> BufferedOutput:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()