# sbwt

Building blocks for the spectral Burrows-Wheeler transform (SBWT) of a set of
DNA k-mers, in pure Python with no dependencies outside the standard library.

## What is in the package

- `sbwt.kmer` – `Kmer`, an immutable DNA k-mer ordered colexicographically,
  with `get`, `with_char`, `dropleft`, `dropright`, `appendleft`,
  `appendright`, `first`, `last`, and a fixed-size binary form
  (`size_in_bytes`, `to_bytes`, `from_bytes`, `serialize`, `load`).
- `sbwt.nodes` – `Node` (a k-mer with its outgoing edge flags),
  `add_prefixes` for dummy nodes, `write_nodes` / `read_nodes` for node files,
  `merge_node_streams` for merging sorted node streams,
  `write_nodes_and_dummies` and `build_bit_vectors_from_sorted_streams`,
  which together turn sorted k-mers into the SBWT bit vectors on disk.
- `sbwt.inmemory_construct` – `build_in_memory(sequences, k, streaming_support)`,
  a reference construction from a list of sequences that returns a
  `NodeBossParts`, plus the steps it is made of (`get_distinct_kmers`,
  `get_nodes`, `merge_equal_nodes`, `build_streaming_support`, ...).
- `sbwt.suffix_groups` – `mark_suffix_groups`, `push_bits_left`,
  `spread_bits_after_push_left`, `entropy` and `compute_column_entropy`.
- `sbwt.seqio` – `figure_out_file_format` for FASTA/FASTQ file names,
  optionally ending in `.gz`, and `reverse_complement_bytes`.
- `sbwt.buffered_streams` – `BufferedInput` (byte, block and line reads;
  gzip/zlib input detected from the contents) and `BufferedOutput` (plain or
  gzip output).
- `sbwt.gzip_streams` – `GzipInput`, `GzipOutput`, `is_compressed`, `ZlibError`.
- `sbwt.strict_files` – `open_input` / `open_output` with `OpenMode` flags,
  `check_mode`, `mode_to_string` and `StrictFileError`.
- `sbwt.bounded_queue` – `ParallelBoundedQueue`, a FIFO queue for producer
  and consumer threads whose `push` blocks while the total load is over a limit
  and whose `pop` blocks while it is empty.
- `sbwt.globals` – `get_rc`, logging with `LogLevel`, `set_log_level` and
  `write_log`, length-prefixed string serialization, and small file checks.

## Installation

```
pip install .
```

## Examples

```python
from sbwt.kmer import Kmer
from sbwt.globals import get_rc
from sbwt.inmemory_construct import build_in_memory

x = Kmer("ACGT", 32)
print(x.dropleft().appendright("A"))   # CGTA
print(get_rc("ACGTT"))                  # AACGT

parts = build_in_memory(["ACGTACGGT", "TTGCA"], 3, True)
print(parts.n_kmers, len(parts.a_bits))
```

`build_in_memory` returns a `NodeBossParts` holding the A, C, G and T bit
vectors as lists of 0/1, the suffix group marks (empty unless asked for),
`k` and the number of distinct k-mers.

The same bit vectors can be built through files on disk. The dummy node file
is written unsorted and must be sorted before the merge:

```python
from sbwt.inmemory_construct import get_distinct_kmers
from sbwt.nodes import (
    build_bit_vectors_from_sorted_streams,
    read_nodes,
    write_nodes,
    write_nodes_and_dummies,
)

kmers = get_distinct_kmers(["ACGTACGGT", "TTGCA"], 3)
write_nodes_and_dummies(kmers, "nodes.bin", "dummies.bin")
write_nodes("dummies-sorted.bin", sorted(read_nodes("dummies.bin")))
a, c, g, t, starts = build_bit_vectors_from_sorted_streams(
    "nodes.bin", "dummies-sorted.bin", 3
)
```

## What the package does not do

The package builds the SBWT bit vectors and the suffix group marks, but it
has no structure for rank queries over them and no k-mer search on the
result. It does not read FASTA or FASTQ records (`sbwt.seqio` only tells the
format from a file name), does not count k-mers in files, and has no command
line program.

## Tests

```
pip install .[test]
pytest
```