"""Bit-packable DNA k-mers ordered colexicographically."""

from __future__ import annotations

import functools
import struct
from typing import BinaryIO

MAX_KMER_LENGTH = 32
_LENGTH_LIMIT = 255
_ALPHABET = "ACGT"
_CODES = {c: i for i, c in enumerate(_ALPHABET)}
_ALPHABET_SET = frozenset(_ALPHABET)


def _n_blocks(max_len: int) -> int:
    return max_len // 32 + (max_len % 32 > 0)


@functools.total_ordering
class Kmer:
    """An immutable DNA k-mer of at most min(max_len, 255) characters.

    Comparison is strict colexicographic order. The binary form stores
    ceil(max_len / 32) little-endian 64-bit blocks of two-bit characters,
    the rightmost character in the most significant bits of block 0,
    followed by one byte holding the length.
    """

    __slots__ = ("_chars", "_max_len")

    def __init__(self, chars: str = "", max_len: int = MAX_KMER_LENGTH):
        if max_len < 1:
            raise ValueError(f"max_len must be positive, got {max_len}")
        limit = min(max_len, _LENGTH_LIMIT)
        if len(chars) > limit:
            raise ValueError(f"k-mer of length {len(chars)} exceeds limit {limit}")
        if not _ALPHABET_SET.issuperset(chars):
            raise ValueError(f"k-mer contains characters outside ACGT: {chars!r}")
        self._chars = chars
        self._max_len = max_len

    @property
    def k(self) -> int:
        return len(self._chars)

    @property
    def max_len(self) -> int:
        return self._max_len

    def _with(self, chars: str) -> Kmer:
        return Kmer(chars, self._max_len)

    def __len__(self) -> int:
        return len(self._chars)

    def __str__(self) -> str:
        return self._chars

    def __repr__(self) -> str:
        return f"Kmer({self._chars!r}, max_len={self._max_len})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Kmer):
            return NotImplemented
        return self._chars == other._chars and self._max_len == other._max_len

    def __hash__(self) -> int:
        return hash((self._chars, self._max_len))

    def __lt__(self, other: Kmer) -> bool:
        if not isinstance(other, Kmer):
            return NotImplemented
        return self._chars[::-1] < other._chars[::-1]

    def get(self, idx: int) -> str:
        """Character at idx from the start, or '\\0' past the end of the k-mer."""
        if idx < 0 or idx >= self._max_len:
            raise IndexError(f"index {idx} out of range for max length {self._max_len}")
        if idx >= len(self._chars):
            return "\0"
        return self._chars[idx]

    def with_char(self, idx: int, c: str) -> Kmer:
        """Return a copy with the character at idx replaced by c."""
        if not 0 <= idx < len(self._chars):
            raise IndexError(f"index {idx} out of range for k = {len(self._chars)}")
        if c not in _ALPHABET_SET or len(c) != 1:
            raise ValueError(f"invalid nucleotide {c!r}")
        return self._with(self._chars[:idx] + c + self._chars[idx + 1 :])

    def dropleft(self) -> Kmer:
        """Return the k-mer without its leftmost character."""
        if not self._chars:
            raise ValueError("cannot drop from an empty k-mer")
        return self._with(self._chars[1:])

    def dropright(self) -> Kmer:
        """Return the k-mer without its rightmost character."""
        if not self._chars:
            raise ValueError("cannot drop from an empty k-mer")
        return self._with(self._chars[:-1])

    def _check_room(self) -> None:
        if len(self._chars) >= min(self._max_len, _LENGTH_LIMIT):
            raise ValueError("k-mer is already at its maximum length")

    def appendleft(self, c: str) -> Kmer:
        """Return the k-mer with c added to the left."""
        self._check_room()
        return self._with(c + self._chars)

    def appendright(self, c: str) -> Kmer:
        """Return the k-mer with c added to the right."""
        self._check_room()
        return self._with(self._chars + c)

    def first(self) -> str:
        return self.get(0)

    def last(self) -> str:
        if not self._chars:
            raise IndexError("empty k-mer has no last character")
        return self._chars[-1]

    @classmethod
    def size_in_bytes(cls, max_len: int = MAX_KMER_LENGTH) -> int:
        """Size of the binary form for the given maximum length."""
        return 8 * _n_blocks(max_len) + 1

    def to_bytes(self) -> bytes:
        """Encode into the fixed-size binary form."""
        n = _n_blocks(self._max_len)
        reversed_chars = self._chars[::-1]
        blocks = []
        for start in range(0, n * 32, 32):
            value = 0
            for offset, ch in enumerate(reversed_chars[start : start + 32]):
                value |= _CODES[ch] << ((31 - offset) * 2)
            blocks.append(value)
        return struct.pack(f"<{n}QB", *blocks, len(self._chars))

    @classmethod
    def from_bytes(cls, data: bytes, max_len: int = MAX_KMER_LENGTH) -> Kmer:
        """Decode the binary form produced by to_bytes."""
        size = cls.size_in_bytes(max_len)
        if len(data) < size:
            raise ValueError(f"need {size} bytes, got {len(data)}")
        n = _n_blocks(max_len)
        *blocks, k = struct.unpack(f"<{n}QB", bytes(data[:size]))
        if k > min(max_len, _LENGTH_LIMIT):
            raise ValueError(f"stored length {k} exceeds limit for max length {max_len}")
        reversed_chars = "".join(
            _ALPHABET[(blocks[p // 32] >> ((31 - p % 32) * 2)) & 0x03] for p in range(k)
        )
        return cls(reversed_chars[::-1], max_len)

    def serialize(self, out: BinaryIO) -> None:
        """Write the binary form to a stream."""
        out.write(self.to_bytes())

    @classmethod
    def load(cls, inp: BinaryIO, max_len: int = MAX_KMER_LENGTH) -> Kmer:
        """Read a k-mer in binary form from a stream."""
        size = cls.size_in_bytes(max_len)
        data = inp.read(size)
        if len(data) < size:
            raise EOFError("Unexpected end of stream while reading k-mer")
        return cls.from_bytes(data, max_len)