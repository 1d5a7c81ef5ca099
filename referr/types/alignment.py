"""Alignment types."""

from dataclasses import dataclass
from typing import Iterator, Tuple

from .sequence import GAP


@dataclass(frozen=True)
class PairwiseAlignment:
    """Global alignment of a reference (x) against an observed sequence (y).

    Attributes:
        aligned_x: Reference residues with ``-`` gaps
        aligned_y: Observed residues with ``-`` gaps
        score: Alignment score under the aligner's scoring scheme
    """

    aligned_x: str
    aligned_y: str
    score: float

    def __post_init__(self):
        if len(self.aligned_x) != len(self.aligned_y):
            raise ValueError("Aligned sequences must share the same length.")
        if any(a == GAP and b == GAP for a, b in self.columns()):
            raise ValueError("Alignment contains an all-gap column.")

    def columns(self) -> Iterator[Tuple[str, str]]:
        return zip(self.aligned_x, self.aligned_y)

    def __str__(self) -> str:
        return f"{self.aligned_x}\n{self.aligned_y}"


__all__ = ["PairwiseAlignment"]
