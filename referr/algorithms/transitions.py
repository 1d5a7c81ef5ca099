"""
Tabulation of substitution counts from reads aligned to their references.

Each sampled read is aligned globally against its assigned reference. Columns
with a gap on either side are skipped, so insertions and deletions never enter
the substitution model. Every remaining column adds one count at
(reference base, observed base, quality of the read position). Identity pairs
are counted too; they provide the per-base totals used by the smoother.
"""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from referr.algorithms.base import PairwiseAligner
from referr.algorithms.kmer import encode
from referr.algorithms.needleman_wunsch import NeedlemanWunschAligner
from referr.types import GAP, PairwiseAlignment, SampledRead, TransitionMatrix
from referr.types.matrix import NUM_BASE_PAIRS

_GAP_BYTE = ord(GAP)


def _update_counts_from_alignment(
    alignment: PairwiseAlignment, quality: np.ndarray, counts: np.ndarray
) -> None:
    """Accumulate base-pair counts for one reference/read alignment."""
    ref = np.frombuffer(alignment.aligned_x.encode("ascii"), dtype=np.uint8)
    obs = np.frombuffer(alignment.aligned_y.encode("ascii"), dtype=np.uint8)

    obs_is_base = obs != _GAP_BYTE
    read_pos = np.cumsum(obs_is_base) - 1
    keep = obs_is_base & (ref != _GAP_BYTE)

    ref_codes = encode(alignment.aligned_x)[keep].astype(np.int64)
    obs_codes = encode(alignment.aligned_y)[keep].astype(np.int64)
    quals = quality[read_pos[keep]]

    valid = (ref_codes < 4) & (obs_codes < 4)
    ref_codes, obs_codes, quals = ref_codes[valid], obs_codes[valid], quals[valid]

    max_quality = counts.shape[1] - 1
    if quals.size and (quals.min() < 0 or quals.max() > max_quality):
        raise ValueError(
            f"Quality scores {int(quals.min())}..{int(quals.max())} fall outside "
            f"the encoded range 0..{max_quality}"
        )
    np.add.at(counts, (4 * ref_codes + obs_codes, quals), 1)


class TransitionTabulator:
    """Build a :class:`TransitionMatrix` from sampled reads."""

    def __init__(self, max_quality: int, aligner: Optional[PairwiseAligner] = None):
        if max_quality < 0:
            raise ValueError(f"max_quality must be non-negative, got {max_quality}")
        self.max_quality = max_quality
        self.aligner = aligner or NeedlemanWunschAligner()

    def tabulate(self, sampled_reads: Iterable[SampledRead]) -> TransitionMatrix:
        counts = np.zeros((NUM_BASE_PAIRS, self.max_quality + 1), dtype=np.int64)
        for read in sampled_reads:
            alignment = self.aligner.align(read.reference.sequence, read.sequence)
            _update_counts_from_alignment(alignment, np.asarray(read.quality), counts)
        return TransitionMatrix(counts)


__all__ = ["TransitionTabulator"]
