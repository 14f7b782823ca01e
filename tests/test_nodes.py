import random

import pytest

from sbwt.kmer import Kmer
from sbwt.nodes import (
    Node,
    add_prefixes,
    build_bit_vectors_from_sorted_streams,
    merge_node_streams,
    read_nodes,
    write_nodes,
    write_nodes_and_dummies,
)


def _node(s, *edges):
    node = Node(Kmer(s))
    for c in edges:
        node.set(c)
    return node


def _build(tmp_path, kmer_strings, k):
    kmers = sorted({Kmer(s) for s in kmer_strings})
    nodes_file = str(tmp_path / "nodes.bin")
    dummies_file = str(tmp_path / "dummies.bin")
    sorted_file = str(tmp_path / "dummies_sorted.bin")
    counts = write_nodes_and_dummies(kmers, nodes_file, dummies_file)
    write_nodes(sorted_file, sorted(read_nodes(dummies_file)))
    bits = build_bit_vectors_from_sorted_streams(nodes_file, sorted_file, k)
    return kmers, counts, bits


def test_edge_flag_bits():
    for c, flag in zip("ACGT", (1, 2, 4, 8)):
        node = Node(Kmer("AC"))
        node.set(c)
        assert node.edge_flags == flag
        assert node.has(c)
        assert not any(node.has(o) for o in "ACGT" if o != c)


def test_unknown_character_ignored():
    node = Node(Kmer("A"))
    node.set("N")
    assert node.edge_flags == 0
    assert node.has("N") is False


def test_str():
    assert str(_node("AC", "G")) == "AC: 0010"


def test_size_and_flag_byte():
    assert Node.size_in_bytes(32) == Kmer.size_in_bytes(32) + 1
    node = _node("ACGT", "A", "T")
    data = node.to_bytes()
    assert len(data) == Node.size_in_bytes(32)
    assert data[-1] == node.edge_flags
    assert data[:-1] == Kmer("ACGT").to_bytes()


def test_bytes_round_trip():
    node = _node("GATTACA", "C", "G")
    assert Node.from_bytes(node.to_bytes()) == node
    long_node = Node(Kmer("ACGT" * 20, 100))
    long_node.set("T")
    assert Node.from_bytes(long_node.to_bytes(), 100) == long_node


def test_from_bytes_too_short():
    with pytest.raises(ValueError):
        Node.from_bytes(b"\x00\x01")


def test_ordering():
    assert _node("CA") < _node("AC")
    assert _node("AC") < _node("AC", "A")
    assert not (_node("AC", "A") < _node("AC", "A"))
    assert sorted([_node("GT"), _node("", "A"), _node("A")]) == [
        _node("", "A"),
        _node("A"),
        _node("GT"),
    ]


def test_add_prefixes():
    assert add_prefixes(Kmer("ACG")) == [
        _node("AC", "G"),
        _node("A", "C"),
        _node("", "A"),
    ]
    assert add_prefixes(Kmer("")) == []


def test_write_read_round_trip(tmp_path):
    path = str(tmp_path / "n.bin")
    nodes = [_node("A", "C"), _node("ACGT", "A", "G"), _node("")]
    assert write_nodes(path, nodes) == 3
    assert list(read_nodes(path)) == nodes


def test_read_ignores_partial_record(tmp_path):
    path = tmp_path / "n.bin"
    node = _node("TT", "A")
    path.write_bytes(node.to_bytes() + b"\x00\x00")
    assert list(read_nodes(str(path))) == [node]


def test_merge_streams():
    a = [_node(""), _node("AC"), _node("GT")]
    b = [_node("", "A"), _node("A", "C"), _node("CG")]
    merged = list(merge_node_streams(a, b))
    assert merged == sorted(a + b)
    assert list(merge_node_streams([], b)) == b
    assert list(merge_node_streams(a, [])) == a


def test_nodes_and_dummies_for_acgt(tmp_path):
    kmers = sorted(Kmer(s) for s in ("AC", "CG", "GT"))
    nodes_file = str(tmp_path / "nodes.bin")
    dummies_file = str(tmp_path / "dummies.bin")
    assert write_nodes_and_dummies(kmers, nodes_file, dummies_file) == (3, 2)
    assert list(read_nodes(nodes_file)) == [_node("AC", "G"), _node("CG", "T"), _node("GT")]
    assert sorted(read_nodes(dummies_file)) == [_node("", "A"), _node("A", "C")]


def test_bit_vectors_for_acgt(tmp_path):
    _, _, bits = _build(tmp_path, ["AC", "CG", "GT"], 2)
    assert bits == (
        [1, 0, 0, 0, 0],
        [0, 1, 0, 0, 0],
        [0, 0, 1, 0, 0],
        [0, 0, 0, 1, 0],
        [1, 1, 1, 1, 1],
    )


def test_cyclic_graph_keeps_root(tmp_path):
    _, counts, bits = _build(tmp_path, ["AA"], 2)
    assert counts == (1, 0)
    a, c, g, t, starts = bits
    assert a == [0, 1]
    assert c == g == t == [0, 0]
    assert starts[0] == 1


def test_random_graph_invariants(tmp_path):
    rng = random.Random(12514)
    k = 5
    strings = set()
    for _ in range(8):
        seq = "".join(rng.choice("ACGT") for _ in range(40))
        strings.update(seq[i : i + k] for i in range(len(seq) - k + 1))
    kmers, (n_nodes, _), bits = _build(tmp_path, strings, k)
    a, c, g, t, starts = bits
    n_columns = len(a)
    assert n_nodes == len(kmers)
    assert len(c) == len(g) == len(t) == len(starts) == n_columns
    assert n_columns >= len(kmers) + 1
    # Every node except the root has exactly one incoming edge.
    assert sum(a) + sum(c) + sum(g) + sum(t) == n_columns - 1
    assert starts[0] == 1