"""Algorithms for the project."""

from .base import PairwiseAligner
from .needleman_wunsch import NeedlemanWunschAligner
from .reference_matcher import ReferenceMatcher
from .sampling import ReadSampler
from .transitions import TransitionTabulator
from .ambiguity import AmbiguityResolver


__all__ = [
    "PairwiseAligner",
    "NeedlemanWunschAligner",
    "ReferenceMatcher",
    "ReadSampler",
    "TransitionTabulator",
    "AmbiguityResolver",
    "dereplication",
    "error_model",
    "kmer",
    "smoothing",
]
