"""Likelihood-based resolution of unique sequences tied between references."""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from referr.algorithms.base import PairwiseAligner
from referr.algorithms.needleman_wunsch import NeedlemanWunschAligner
from referr.types import (
    GAP,
    NUCLEOTIDES,
    Assignment,
    Dereplication,
    ErrorMatrix,
    ReferenceSequence,
    UniqueSequence,
)

logger = logging.getLogger(__name__)


class AmbiguityResolver:
    """Pick, among tied candidates, the reference that best explains a unique.

    A candidate's likelihood is the product, over aligned substitution columns,
    of the error-matrix probability at the rounded mean quality of that
    position. Identity columns and columns with a gap on either side are not
    scored. The highest likelihood wins; equal likelihoods (including all zero)
    keep the first listed candidate.
    """

    def __init__(
        self, error_matrix: ErrorMatrix, aligner: Optional[PairwiseAligner] = None
    ) -> None:
        self.error_matrix = error_matrix
        self.aligner = aligner or NeedlemanWunschAligner()

    def scored_columns(
        self, unique: UniqueSequence, reference: ReferenceSequence
    ) -> List[Tuple[str, str, int]]:
        """(reference base, observed base, quality) for every substitution column."""
        alignment = self.aligner.align(reference.sequence, unique.sequence)
        max_quality = self.error_matrix.max_quality

        columns: List[Tuple[str, str, int]] = []
        obs_pos = -1
        for ref_base, obs_base in alignment.columns():
            if obs_base == GAP:
                continue
            obs_pos += 1
            if ref_base == GAP or ref_base == obs_base:
                continue
            if ref_base not in NUCLEOTIDES or obs_base not in NUCLEOTIDES:
                continue
            quality = int(np.rint(unique.quality_profile[obs_pos]))
            columns.append((ref_base, obs_base, min(max(quality, 0), max_quality)))
        return columns

    def likelihood(self, unique: UniqueSequence, reference: ReferenceSequence) -> float:
        return math.prod(
            self.error_matrix.probability(ref_base, obs_base, quality)
            for ref_base, obs_base, quality in self.scored_columns(unique, reference)
        )

    def choose(
        self, unique: UniqueSequence, candidates: Sequence[ReferenceSequence]
    ) -> ReferenceSequence:
        if not candidates:
            raise ValueError(f"Unique sequence {unique.index} has no candidates.")
        best = candidates[0]
        best_likelihood = self.likelihood(unique, best)
        for candidate in candidates[1:]:
            lam = self.likelihood(unique, candidate)
            if lam > best_likelihood:
                best, best_likelihood = candidate, lam
        if best_likelihood == 0.0:
            logger.debug(
                "All candidates of unique sequence %d have zero likelihood; "
                "keeping the first listed reference %s.",
                unique.index,
                best.identifier,
            )
        return best

    def resolve(
        self,
        assignment: Assignment,
        dereplication: Dereplication,
        references: Dict[str, ReferenceSequence],
    ) -> int:
        """Overwrite every tied entry of ``assignment``; return how many were resolved."""
        resolved = 0
        for index in list(assignment.unresolved()):
            candidates = [references[ref_id] for ref_id in assignment[index]]
            winner = self.choose(dereplication.uniques[index], candidates)
            assignment.resolve(index, winner.identifier)
            resolved += 1
        if resolved:
            logger.info(
                "Resolved %d tied unique sequences by transition probability.",
                resolved,
            )
        return resolved


__all__ = ["AmbiguityResolver"]
