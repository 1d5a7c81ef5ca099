"""
Transition-count and error-probability tables.

Both tables share one layout: 16 rows, one per (reference base, observed base)
pair, and one column per phred quality score from 0 to ``max_quality``. Rows are
addressed through :class:`BasePair` rather than composite string keys.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np

from .sequence import NUCLEOTIDES

NUM_BASE_PAIRS = len(NUCLEOTIDES) ** 2
_BASE_INDEX = {base: i for i, base in enumerate(NUCLEOTIDES)}


class BasePair(enum.IntEnum):
    """Reference base -> observed base, indexed as ``4 * ref + obs``."""

    A2A = 0
    A2C = 1
    A2G = 2
    A2T = 3
    C2A = 4
    C2C = 5
    C2G = 6
    C2T = 7
    G2A = 8
    G2C = 9
    G2G = 10
    G2T = 11
    T2A = 12
    T2C = 13
    T2G = 14
    T2T = 15

    @classmethod
    def of(cls, ref_base: str, obs_base: str) -> "BasePair":
        try:
            return cls(4 * _BASE_INDEX[ref_base] + _BASE_INDEX[obs_base])
        except KeyError as exc:
            raise ValueError(
                f"Base pair must be drawn from {NUCLEOTIDES}, "
                f"got '{ref_base}' -> '{obs_base}'"
            ) from exc

    @property
    def ref_base(self) -> str:
        return NUCLEOTIDES[self.value // 4]

    @property
    def obs_base(self) -> str:
        return NUCLEOTIDES[self.value % 4]

    @property
    def is_identity(self) -> bool:
        return self.ref_base == self.obs_base

    @property
    def label(self) -> str:
        return f"{self.ref_base}2{self.obs_base}"


def substitutions() -> Iterator[BasePair]:
    """Yield the 12 non-identity base pairs in row order."""
    return (pair for pair in BasePair if not pair.is_identity)


def pairs_from(ref_base: str) -> Tuple[BasePair, ...]:
    """All four base pairs sharing a reference base."""
    return tuple(BasePair.of(ref_base, obs) for obs in NUCLEOTIDES)


def _check_shape(values: np.ndarray, context: str) -> None:
    if values.ndim != 2 or values.shape[0] != NUM_BASE_PAIRS:
        raise ValueError(
            f"{context} must have shape ({NUM_BASE_PAIRS}, n_qualities), "
            f"got {values.shape}"
        )
    if values.shape[1] < 1:
        raise ValueError(f"{context} needs at least one quality column.")


@dataclass(frozen=True, eq=False)
class TransitionMatrix:
    """Observed (reference base, observed base, quality) counts."""

    counts: np.ndarray

    def __post_init__(self) -> None:
        counts = np.asarray(self.counts, dtype=np.int64)
        _check_shape(counts, "Transition counts")
        if (counts < 0).any():
            raise ValueError("Transition counts must be non-negative.")
        object.__setattr__(self, "counts", counts)

    @property
    def max_quality(self) -> int:
        return self.counts.shape[1] - 1

    @property
    def qualities(self) -> np.ndarray:
        return np.arange(self.counts.shape[1])

    def count(self, ref_base: str, obs_base: str, quality: int) -> int:
        return int(self.counts[BasePair.of(ref_base, obs_base), quality])

    def totals(self, ref_base: str) -> np.ndarray:
        """Per-quality number of observations of ``ref_base``."""
        return self.counts[list(pairs_from(ref_base))].sum(axis=0)

    def add(self, other: "TransitionMatrix") -> "TransitionMatrix":
        if other.counts.shape != self.counts.shape:
            raise ValueError("Cannot add transition matrices of different shapes.")
        return TransitionMatrix(self.counts + other.counts)

    @property
    def total(self) -> int:
        return int(self.counts.sum())


@dataclass(frozen=True, eq=False)
class ErrorMatrix:
    """P(observed base | reference base, quality) for every base pair."""

    probabilities: np.ndarray

    def __post_init__(self) -> None:
        probs = np.asarray(self.probabilities, dtype=float)
        _check_shape(probs, "Error probabilities")
        if np.isnan(probs).any():
            raise ValueError("Error probabilities must not contain NaN.")
        if (probs < 0.0).any() or (probs > 1.0).any():
            raise ValueError("Error probabilities must lie within [0, 1].")
        object.__setattr__(self, "probabilities", probs)

    @property
    def max_quality(self) -> int:
        return self.probabilities.shape[1] - 1

    @property
    def qualities(self) -> np.ndarray:
        return np.arange(self.probabilities.shape[1])

    def probability(self, ref_base: str, obs_base: str, quality: int) -> float:
        if not 0 <= quality <= self.max_quality:
            raise ValueError(
                f"Quality {quality} outside the matrix range 0..{self.max_quality}"
            )
        return float(self.probabilities[BasePair.of(ref_base, obs_base), quality])

    def row(self, pair: BasePair) -> np.ndarray:
        return self.probabilities[pair]


__all__ = [
    "NUM_BASE_PAIRS",
    "BasePair",
    "substitutions",
    "pairs_from",
    "TransitionMatrix",
    "ErrorMatrix",
]
