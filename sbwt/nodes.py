"""Graph nodes with outgoing-edge labels and the on-disk steps that turn sorted
k-mers into the bit vectors of the spectral BWT."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import chain
from typing import Iterable, Iterator

from .globals import LogLevel, write_log
from .kmer import MAX_KMER_LENGTH, Kmer

__all__ = [
    "Node",
    "add_prefixes",
    "write_nodes",
    "read_nodes",
    "merge_node_streams",
    "write_nodes_and_dummies",
    "build_bit_vectors_from_sorted_streams",
]

_ACGT = "ACGT"
_FLAG_BITS = {"A": 1 << 0, "C": 1 << 1, "G": 1 << 2, "T": 1 << 3}


@dataclass(order=True)
class Node:
    """A k-mer together with the set of characters on its outgoing edges.

    Nodes order first by the colexicographic order of their k-mers, then by
    their edge flags.
    """

    kmer: Kmer = field(default_factory=Kmer)
    edge_flags: int = 0

    def set(self, c: str) -> None:
        """Mark an outgoing edge labelled c. Characters outside ACGT are ignored."""
        self.edge_flags |= _FLAG_BITS.get(c, 0)

    def has(self, c: str) -> bool:
        """Whether there is an outgoing edge labelled c."""
        return bool(self.edge_flags & _FLAG_BITS.get(c, 0))

    def __str__(self) -> str:
        return f"{self.kmer}: " + "".join("1" if self.has(c) else "0" for c in _ACGT)

    @classmethod
    def size_in_bytes(cls, max_len: int = MAX_KMER_LENGTH) -> int:
        """Size of the binary form: the k-mer followed by one flag byte."""
        return Kmer.size_in_bytes(max_len) + 1

    def to_bytes(self) -> bytes:
        """Encode into the fixed-size binary form."""
        return self.kmer.to_bytes() + bytes([self.edge_flags & 0xFF])

    @classmethod
    def from_bytes(cls, data: bytes, max_len: int = MAX_KMER_LENGTH) -> Node:
        """Decode the binary form produced by to_bytes."""
        size = cls.size_in_bytes(max_len)
        if len(data) < size:
            raise ValueError(f"need {size} bytes, got {len(data)}")
        kmer = Kmer.from_bytes(data[: size - 1], max_len)
        return cls(kmer, data[size - 1])


def add_prefixes(kmer: Kmer) -> list[Node]:
    """Dummy nodes for the proper prefixes of kmer, longest first.

    Each prefix carries an edge labelled with the character that follows it.
    """
    nodes = []
    prefix = kmer
    while prefix.k > 0:
        edge_char = prefix.last()
        prefix = prefix.dropright()
        node = Node(prefix)
        node.set(edge_char)
        nodes.append(node)
    return nodes


def write_nodes(path: str, nodes: Iterable[Node]) -> int:
    """Write nodes in binary form to a file and return how many were written."""
    count = 0
    with open(path, "wb") as out:
        for node in nodes:
            out.write(node.to_bytes())
            count += 1
    return count


def read_nodes(path: str, max_len: int = MAX_KMER_LENGTH) -> Iterator[Node]:
    """Yield the nodes stored in a file. A trailing partial record is ignored."""
    size = Node.size_in_bytes(max_len)
    with open(path, "rb") as inp:
        while True:
            data = inp.read(size)
            if len(data) < size:
                return
            yield Node.from_bytes(data, max_len)


_END = object()


def merge_node_streams(first: Iterable[Node], second: Iterable[Node]) -> Iterator[Node]:
    """Merge two sorted node streams into one sorted stream."""
    a, b = iter(first), iter(second)
    x, y = next(a, _END), next(b, _END)
    while x is not _END and y is not _END:
        if x < y:
            yield x
            x = next(a, _END)
        else:
            yield y
            y = next(b, _END)
    if x is not _END:
        yield x
        yield from a
    if y is not _END:
        yield y
        yield from b


def write_nodes_and_dummies(
    kmers: Iterable[Kmer], nodes_outfile: str, dummies_outfile: str
) -> tuple[int, int]:
    """Write a node for every k-mer and the dummy prefix nodes that are needed.

    The k-mers must be distinct and in colexicographic order. Nodes are
    written in input order; dummies are written unsorted. Returns the number
    of nodes and dummies written.
    """
    kmers = list(kmers)
    streams: dict[str, Iterator[Kmer]] = {}
    cur: dict[str, Kmer] = {}
    processed: set[str] = set()

    for c in _ACGT:
        write_log(f"Rewinding {c}", LogLevel.MAJOR)
        stream = iter(kmers)
        streams[c] = stream
        for x in stream:
            if x.last() == c:
                cur[c] = x
                break
        else:
            # No k-mer in the data ends in this character
            processed.add(c)

    n_nodes = 0
    n_dummies = 0
    write_log("Streaming", LogLevel.MAJOR)
    with open(nodes_outfile, "wb") as nodes_out, open(dummies_outfile, "wb") as dummies_out:

        def emit_dummies(z: Kmer) -> None:
            nonlocal n_dummies
            for dummy in add_prefixes(z):
                dummies_out.write(dummy.to_bytes())
                n_dummies += 1

        prev_x: Kmer | None = None
        for x in kmers:
            node = Node(x)
            if prev_x is None or x.dropleft() != prev_x.dropleft():
                for c in _ACGT:
                    if c in processed:
                        continue
                    y = x.dropleft().appendright(c)
                    z = cur[c]
                    while y > z:
                        emit_dummies(z)
                        nxt = next(streams[c], None)
                        if nxt is None:
                            processed.add(c)
                            break
                        z = nxt
                        cur[c] = z
                    if y == z:
                        node.set(c)
                        nxt = next(streams[c], None)
                        if nxt is None:
                            processed.add(c)
                            break
                        cur[c] = nxt
            nodes_out.write(node.to_bytes())
            n_nodes += 1
            prev_x = x

        for c in _ACGT:
            if c in processed:
                continue
            while cur[c].last() == c:
                emit_dummies(cur[c])
                nxt = next(streams[c], None)
                if nxt is None:
                    break
                cur[c] = nxt

    return n_nodes, n_dummies


def build_bit_vectors_from_sorted_streams(
    nodefile: str, dummyfile: str, k: int, max_len: int = MAX_KMER_LENGTH
) -> tuple[list[int], list[int], list[int], list[int], list[int]]:
    """Merge the node file and the sorted dummy file into SBWT bit vectors.

    Returns the A, C, G and T edge bit vectors and the suffix group start marks.
    Both streams are preceded by an empty node so that the root always exists,
    even when the graph is cyclic.
    """
    a_bits: list[int] = []
    c_bits: list[int] = []
    g_bits: list[int] = []
    t_bits: list[int] = []
    starts: list[int] = []
    rows = {"A": a_bits, "C": c_bits, "G": g_bits, "T": t_bits}

    def with_root(path: str) -> Iterator[Node]:
        return chain([Node(Kmer("", max_len))], read_nodes(path, max_len))

    def suffix_part(kmer: Kmer) -> Kmer:
        return kmer.dropleft() if kmer.k == k else kmer

    prev: Node | None = None
    for x in merge_node_streams(with_root(nodefile), with_root(dummyfile)):
        if prev is None or x.kmer != prev.kmer:
            for row in rows.values():
                row.append(0)
            is_start = prev is None or suffix_part(prev.kmer) != suffix_part(x.kmer)
            starts.append(int(is_start))
        for c, row in rows.items():
            if x.has(c):
                row[-1] = 1
        prev = x

    return a_bits, c_bits, g_bits, t_bits, starts