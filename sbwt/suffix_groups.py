"""Suffix group marking and bit redistribution inside suffix groups of an SBWT."""

from __future__ import annotations

import math
from collections import Counter
from typing import Iterable, Sequence

__all__ = [
    "entropy",
    "push_bits_left",
    "spread_bits_after_push_left",
    "mark_suffix_groups",
    "compute_column_entropy",
]

_ACGT = "ACGT"

Rows = tuple[list[int], list[int], list[int], list[int]]


def _rows(a_bits, c_bits, g_bits, t_bits) -> Rows:
    rows = tuple([1 if b else 0 for b in row] for row in (a_bits, c_bits, g_bits, t_bits))
    if len({len(row) for row in rows}) != 1:
        raise ValueError("The four bit vectors must have the same length")
    return rows  # type: ignore[return-value]


def _marks(suffix_group_marks: Sequence[int], n: int) -> list[int]:
    marks = [1 if b else 0 for b in suffix_group_marks]
    if len(marks) != n:
        raise ValueError("Suffix group marks must have the same length as the bit vectors")
    return marks


def entropy(probabilities: Iterable[float]) -> float:
    """Shannon entropy in bits of a probability distribution."""
    return sum(p * math.log2(1.0 / p) for p in probabilities if p != 0 and p != 1)


def push_bits_left(a_bits, c_bits, g_bits, t_bits, suffix_group_marks) -> Rows:
    """Move every one-bit to the first column of its suffix group.

    Returns new A, C, G and T bit vectors; the inputs are left untouched.
    """
    rows = _rows(a_bits, c_bits, g_bits, t_bits)
    marks = _marks(suffix_group_marks, len(rows[0]))
    for i in range(len(marks) - 1, 0, -1):
        if not marks[i]:
            for row in rows:
                row[i - 1] |= row[i]
                row[i] = 0
    return rows


def spread_bits_after_push_left(a_bits, c_bits, g_bits, t_bits, suffix_group_marks) -> Rows:
    """Spread the bits of each suffix group over as many columns as possible.

    Assumes the bits have already been pushed to the left of their groups.
    Returns new A, C, G and T bit vectors.
    """
    rows = _rows(a_bits, c_bits, g_bits, t_bits)
    marks = _marks(suffix_group_marks, len(rows[0]))
    for i in range(len(marks) - 1):
        if marks[i + 1]:
            continue
        # Keep the topmost one-bit in place, move the rest one column right
        top = next((r for r, row in enumerate(rows) if row[i]), len(rows))
        for row in rows[top + 1 :]:
            row[i + 1] = row[i]
            row[i] = 0
    return rows


def mark_suffix_groups(a_bits, c_bits, g_bits, t_bits, k: int) -> list[int]:
    """Mark the first node of every suffix group of length k-1.

    Raises ValueError if the bit vectors do not describe a graph in which
    every node but the root has exactly one incoming edge.
    """
    rows = _rows(a_bits, c_bits, g_bits, t_bits)
    n_nodes = len(rows[0])

    last = ["$"]  # last[i] = incoming character of node i
    char_starts = []
    for ch, row in zip(_ACGT, rows):
        char_starts.append(len(last))
        last.extend(ch for bit in row if bit)

    if len(last) != n_nodes:
        raise ValueError(
            f"Inconsistent bit vectors: {len(last)} incoming labels for {n_nodes} nodes"
        )

    starts = [0] * n_nodes
    for _ in range(k - 1):
        for i, (prev, cur) in enumerate(zip([None] + last[:-1], last)):
            if prev is None or prev != cur:
                starts[i] = 1

        # Propagate the labels one step forward in the graph
        propagated = ["$"] * n_nodes
        pointers = list(char_starts)
        for i, label in enumerate(last):
            for r, row in enumerate(rows):
                if row[i]:
                    propagated[pointers[r]] = label
                    pointers[r] += 1
        last = propagated

    return starts


def compute_column_entropy(a_bits, c_bits, g_bits, t_bits) -> float:
    """Entropy of the distribution of distinct columns of the four bit vectors."""
    rows = _rows(a_bits, c_bits, g_bits, t_bits)
    n = len(rows[0])
    counts = Counter(zip(*rows))
    return entropy(count / n for count in counts.values())