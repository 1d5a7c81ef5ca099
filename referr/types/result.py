"""Result bundle of an error-model run."""

from dataclasses import dataclass
from typing import List

from .matrix import ErrorMatrix, TransitionMatrix
from .sequence import Dereplication, ReferenceSequence


@dataclass(frozen=True, eq=False)
class ErrorModelResult:
    """Filtered references, fitted error matrix and annotated dereplication."""

    references: List[ReferenceSequence]
    error_matrix: ErrorMatrix
    dereplication: Dereplication
    total_reads: int
    transitions: TransitionMatrix

    @property
    def best_references(self) -> List[str]:
        return list(self.dereplication.best_references or [])


__all__ = ["ErrorModelResult"]
