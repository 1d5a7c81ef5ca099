"""K-mer composition distance between nucleotide sequences."""

from __future__ import annotations

import numpy as np

from referr.types import NUCLEOTIDES

DEFAULT_KMER_SIZE = 7

_CODES = np.full(256, 255, dtype=np.uint8)
for _code, _base in enumerate(NUCLEOTIDES):
    _CODES[ord(_base)] = _code
    _CODES[ord(_base.lower())] = _code


def encode(sequence: str) -> np.ndarray:
    """Map A/C/G/T to 0..3; anything else maps to 255."""
    return _CODES[np.frombuffer(sequence.encode("ascii"), dtype=np.uint8)]


def kmer_counts(sequence: str, k: int = DEFAULT_KMER_SIZE) -> np.ndarray:
    """Count vector of length ``4 ** k`` over all k-mers of ``sequence``.

    K-mers containing a non-ACGT residue are not counted.
    """
    if k < 1:
        raise ValueError(f"k must be positive, got {k}")
    counts = np.zeros(4**k, dtype=np.int32)
    codes = encode(sequence)
    if len(codes) < k:
        return counts

    windows = np.lib.stride_tricks.sliding_window_view(codes, k)
    valid = (windows < 4).all(axis=1)
    weights = 4 ** np.arange(k - 1, -1, -1, dtype=np.int64)
    index = windows[valid].astype(np.int64) @ weights
    counts += np.bincount(index, minlength=4**k).astype(np.int32)
    return counts


def distance_from_counts(
    counts_a: np.ndarray, len_a: int, counts_b: np.ndarray, len_b: int, k: int
) -> float:
    """Distance ``1 - shared / (min(len_a, len_b) - k + 1)``."""
    n_kmers = min(len_a, len_b) - k + 1
    if n_kmers <= 0:
        return 1.0
    shared = int(np.minimum(counts_a, counts_b).sum())
    return 1.0 - shared / n_kmers


def kmer_distance(seq_a: str, seq_b: str, k: int = DEFAULT_KMER_SIZE) -> float:
    """K-mer distance between two sequences (0 for identical k-mer content)."""
    return distance_from_counts(
        kmer_counts(seq_a, k), len(seq_a), kmer_counts(seq_b, k), len(seq_b), k
    )


def kmer_distances(
    query: str, ref_counts: np.ndarray, ref_lengths: np.ndarray, k: int
) -> np.ndarray:
    """Distances from ``query`` to every row of a stacked reference count matrix."""
    query_counts = kmer_counts(query, k)
    n_kmers = np.minimum(ref_lengths, len(query)) - k + 1
    shared = np.minimum(ref_counts, query_counts).sum(axis=1)
    with np.errstate(divide="ignore", invalid="ignore"):
        dist = 1.0 - shared / n_kmers
    return np.where(n_kmers > 0, dist, 1.0)


__all__ = [
    "DEFAULT_KMER_SIZE",
    "encode",
    "kmer_counts",
    "kmer_distance",
    "kmer_distances",
    "distance_from_counts",
]
