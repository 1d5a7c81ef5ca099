"""Shared interfaces for pairwise alignment algorithms."""

from __future__ import annotations

from abc import ABC, abstractmethod

from referr.types import PairwiseAlignment


class PairwiseAligner(ABC):
    """Abstract base class for pairwise global alignment algorithms."""

    @abstractmethod
    def align(self, x_seq: str, y_seq: str) -> PairwiseAlignment:
        """Align an observed sequence ``y_seq`` against a reference ``x_seq``."""
        raise NotImplementedError


__all__ = ["PairwiseAligner"]
