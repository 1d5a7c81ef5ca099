"""
Run configuration for error-model estimation.

The configuration covers sampling (how many raw reads feed the transition
matrix, and the seed used to draw them), parallelism of the reference-matching
phase, the phred encoding of the input reads, the k-mer size of the matching
distance, and the policy used when a unique sequence is equally close to
several references.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from referr.exceptions import ConfigurationError

PHRED_OFFSETS = (33, 64)


class TieMode(enum.IntEnum):
    """How to break exact k-mer distance ties between references."""

    ABUNDANCE = 1
    PROBABILITY = 2


@dataclass(frozen=True)
class ErrorModelConfig:
    """Options recognised by :func:`referr.algorithms.error_model.estimate_error_model`."""

    sample_size: int = 10000
    threads: int = 1
    phred_offset: int = 33
    max_quality: int = 42
    tie_mode: TieMode = TieMode.ABUNDANCE
    kmer_size: int = 7
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "tie_mode", TieMode(int(self.tie_mode)))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"tie_mode must be one of {[m.value for m in TieMode]}, "
                f"got {self.tie_mode!r}"
            ) from exc

        for name in ("sample_size", "threads", "kmer_size"):
            value = getattr(self, name)
            try:
                positive = int(value) >= 1
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(
                    f"{name} must be a positive integer, got {value!r}"
                ) from exc
            if not positive:
                raise ConfigurationError(f"{name} must be a positive integer, got {value}")
        if not isinstance(self.max_quality, int) or self.max_quality < 0:
            raise ConfigurationError(
                f"max_quality must be non-negative, got {self.max_quality}"
            )
        if self.phred_offset not in PHRED_OFFSETS:
            raise ConfigurationError(
                f"phred_offset must be one of {PHRED_OFFSETS}, got {self.phred_offset}"
            )

    @property
    def n_qualities(self) -> int:
        return self.max_quality + 1


__all__ = ["TieMode", "ErrorModelConfig", "PHRED_OFFSETS"]
