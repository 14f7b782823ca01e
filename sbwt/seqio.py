"""Sequence file format detection and byte-level reverse complements."""

from __future__ import annotations

import enum
from dataclasses import dataclass

FASTA_SUFFIXES = (".fasta", ".fna", ".ffn", ".faa", ".frn", ".fa")
FASTQ_SUFFIXES = (".fastq", ".fq")

_RC_BYTES = bytes.maketrans(b"ACGTacgt", b"TGCAtgca")


class Format(enum.Enum):
    """Sequence file format."""

    FASTA = "fasta"
    FASTQ = "fastq"


@dataclass(frozen=True)
class FileFormat:
    """Detected format of a sequence file."""

    format: Format
    gzipped: bool
    extension: str


def figure_out_file_format(filename: str) -> FileFormat:
    """Detect FASTA/FASTQ and gzip compression from a file name.

    Raises ValueError if the extension is not recognised.
    """
    gzipped = filename.endswith(".gz")
    if gzipped:
        filename = filename[:-3]
    gz_suffix = ".gz" if gzipped else ""

    dot = filename.rfind(".")
    if dot >= 0:
        ending = filename[dot:]
        if ending in FASTA_SUFFIXES:
            return FileFormat(Format.FASTA, gzipped, ending + gz_suffix)
        if ending in FASTQ_SUFFIXES:
            return FileFormat(Format.FASTQ, gzipped, ending + gz_suffix)
    raise ValueError("Unknown file format: " + filename + gz_suffix)


def reverse_complement_bytes(buf: bytes | bytearray) -> bytes:
    """Return the reverse complement of a byte sequence of nucleotides."""
    return bytes(buf)[::-1].translate(_RC_BYTES)