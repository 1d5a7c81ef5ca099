"""Random sampling of raw reads for transition statistics."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from referr.exceptions import SamplingSizeExceeded
from referr.types import Assignment, Dereplication, ReadRecord, ReferenceSequence, SampledRead

logger = logging.getLogger(__name__)


def check_sample_size(sample_size: int, total_reads: int) -> None:
    """Raise :class:`SamplingSizeExceeded` when more reads are requested than exist."""
    if sample_size > total_reads:
        raise SamplingSizeExceeded(requested=sample_size, available=total_reads)


class ReadSampler:
    """Draw raw reads uniformly without replacement and attach their reference.

    Reads whose unique sequence is still tied between several references are
    dropped; they cannot contribute to the matrix that will break their tie.
    """

    def __init__(self, sample_size: int, rng: Optional[np.random.Generator] = None):
        if sample_size < 1:
            raise ValueError(f"sample_size must be positive, got {sample_size}")
        self.sample_size = sample_size
        self.rng = rng if rng is not None else np.random.default_rng()

    def draw_indices(self, total_reads: int) -> np.ndarray:
        """Return ``sample_size`` distinct raw-read indices."""
        check_sample_size(self.sample_size, total_reads)
        return self.rng.choice(total_reads, size=self.sample_size, replace=False)

    def sample(
        self,
        reads: Sequence[ReadRecord],
        dereplication: Dereplication,
        assignment: Assignment,
        references: Dict[str, ReferenceSequence],
    ) -> List[SampledRead]:
        if len(dereplication.read_map) != len(reads):
            raise ValueError(
                f"Read map covers {len(dereplication.read_map)} reads, "
                f"but {len(reads)} reads were given."
            )

        sampled: List[SampledRead] = []
        dropped = 0
        for read_index in self.draw_indices(len(reads)):
            unique_index = int(dereplication.read_map[read_index])
            if not assignment.is_resolved_at(unique_index):
                dropped += 1
                continue
            read = reads[read_index]
            sampled.append(
                SampledRead(
                    read_index=int(read_index),
                    sequence=read.sequence,
                    quality=read.quality,
                    reference=references[assignment.best(unique_index)],
                )
            )

        if dropped:
            logger.info(
                "Dropped %d of %d sampled reads tied between references.",
                dropped,
                self.sample_size,
            )
        return sampled


__all__ = ["ReadSampler", "check_sample_size"]
