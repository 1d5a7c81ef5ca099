"""Types for the project."""

from .sequence import (
    NUCLEOTIDES,
    GAP,
    ReferenceSequence,
    ReadRecord,
    UniqueSequence,
    Dereplication,
    SampledRead,
)
from .matrix import BasePair, TransitionMatrix, ErrorMatrix
from .alignment import PairwiseAlignment
from .assignment import Assignment
from .parameters import ErrorModelConfig, TieMode
from .result import ErrorModelResult


__all__ = [
    "NUCLEOTIDES",
    "GAP",
    "ReferenceSequence",
    "ReadRecord",
    "UniqueSequence",
    "Dereplication",
    "SampledRead",
    "BasePair",
    "TransitionMatrix",
    "ErrorMatrix",
    "PairwiseAlignment",
    "Assignment",
    "ErrorModelConfig",
    "TieMode",
    "ErrorModelResult",
]
