"""Spectral Burrows-Wheeler transform building blocks: DNA k-mers, graph nodes and bit vector construction."""

__version__ = "0.1.0"