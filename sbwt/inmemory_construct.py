"""Reference in-memory construction of the SBWT bit vectors.

Not meant for large inputs; it serves as a reference for other
construction algorithms.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .globals import LogLevel, write_log
from .kmer import MAX_KMER_LENGTH, Kmer
from .nodes import Node, add_prefixes

__all__ = [
    "NodeBossParts",
    "get_char_ptr",
    "merge_equal_nodes",
    "get_nodes",
    "is_valid_kmer",
    "get_distinct_kmers",
    "build_streaming_support",
    "build_in_memory",
]

_ACGT = "ACGT"
_ACGT_SET = frozenset(_ACGT)


@dataclass
class NodeBossParts:
    """The bit vectors and counts that make up a constructed SBWT."""

    a_bits: list[int]
    c_bits: list[int]
    g_bits: list[int]
    t_bits: list[int]
    streaming_support: list[int] = field(default_factory=list)
    k: int = 0
    n_kmers: int = 0


def get_char_ptr(kmers: Sequence[Kmer], c: str) -> int:
    """Index of the first k-mer ending in c, or len(kmers) if there is none."""
    return next((i for i, x in enumerate(kmers) if x.last() == c), len(kmers))


def merge_equal_nodes(nodes: Iterable[Node]) -> list[Node]:
    """Merge consecutive nodes with equal k-mers, uniting their edges.

    The input must be sorted. Returns new node objects.
    """
    merged: list[Node] = []
    for node in nodes:
        if merged and merged[-1].kmer == node.kmer:
            merged[-1].edge_flags |= node.edge_flags
        else:
            merged.append(Node(node.kmer, node.edge_flags))
    return merged


def get_nodes(kmers: Sequence[Kmer]) -> list[Node]:
    """All nodes of the graph, including the root and dummy nodes, in colex order.

    The k-mers must be distinct and colex-sorted.
    """
    n = len(kmers)
    max_len = kmers[0].max_len if kmers else MAX_KMER_LENGTH
    char_ptrs = {c: get_char_ptr(kmers, c) for c in _ACGT}

    nodes = [Node(Kmer("", max_len))]  # Always have a root node

    prev: Kmer | None = None
    for x in kmers:
        node = Node(x)
        if prev is None or x.dropleft() != prev.dropleft():
            for c in _ACGT:
                if char_ptrs[c] == n:
                    continue
                y = x.dropleft().appendright(c)
                z = kmers[char_ptrs[c]]
                while y > z:
                    # z has no incoming edge: it needs dummy nodes
                    nodes.extend(add_prefixes(z))
                    char_ptrs[c] += 1
                    if char_ptrs[c] == n:
                        break
                    z = kmers[char_ptrs[c]]
                if y == z:
                    char_ptrs[c] += 1
                    node.set(c)
        nodes.append(node)
        prev = x

    for c in _ACGT:
        while char_ptrs[c] < n and kmers[char_ptrs[c]].last() == c:
            nodes.extend(add_prefixes(kmers[char_ptrs[c]]))
            char_ptrs[c] += 1

    nodes.sort()
    return merge_equal_nodes(nodes)


def is_valid_kmer(s: str) -> bool:
    """Whether s consists of the characters A, C, G and T only."""
    return _ACGT_SET.issuperset(s)


def get_distinct_kmers(sequences: Iterable[str], k: int) -> list[Kmer]:
    """Distinct valid k-mers of the sequences, in colex order."""
    write_log("Hashing distinct k-mers", LogLevel.MAJOR)
    max_len = max(k, MAX_KMER_LENGTH)
    distinct = {
        s[i : i + k]
        for s in sequences
        for i in range(len(s) - k + 1)
        if is_valid_kmer(s[i : i + k])
    }
    return sorted(Kmer(x, max_len) for x in distinct)


def build_streaming_support(nodes: Sequence[Node], k: int) -> list[int]:
    """Mark the nodes that start a new suffix group of length k-1."""

    def suffix_part(kmer: Kmer) -> Kmer:
        return kmer.dropleft() if kmer.k == k else kmer

    marks = [1] if nodes else []
    marks.extend(
        int(suffix_part(a.kmer) != suffix_part(b.kmer)) for a, b in zip(nodes, nodes[1:])
    )
    return marks


def build_in_memory(sequences: Iterable[str], k: int, streaming_support: bool) -> NodeBossParts:
    """Build the SBWT bit vectors of the k-mers of the given sequences."""
    kmers = get_distinct_kmers(sequences, k)

    write_log("Sorting nodes", LogLevel.MAJOR)
    nodes = get_nodes(kmers)

    write_log("Building SBWT", LogLevel.MAJOR)
    a_bits, c_bits, g_bits, t_bits = (
        [int(node.has(c)) for node in nodes] for c in _ACGT
    )
    support = build_streaming_support(nodes, k) if streaming_support else []
    return NodeBossParts(a_bits, c_bits, g_bits, t_bits, support, k, len(kmers))