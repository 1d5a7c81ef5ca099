"""Sequence types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from referr.exceptions import DataIntegrityError

NUCLEOTIDES: Tuple[str, str, str, str] = ("A", "C", "G", "T")
GAP = "-"


def normalize_nucleotides(sequence: str, context: str) -> str:
    """Uppercase a sequence and reject anything outside A, C, G, T."""
    upper = sequence.upper()
    invalid = set(upper) - set(NUCLEOTIDES)
    if invalid:
        raise DataIntegrityError(
            f"{context} contains ambiguous or invalid residues: {sorted(invalid)}; "
            f"allowed: {list(NUCLEOTIDES)}"
        )
    return upper


@dataclass
class ReferenceSequence:
    """Known community member sequence with abundance bookkeeping.

    ``abundance`` counts raw reads identical to the reference. ``estimated_abundance``
    is owned by downstream post-processing and starts at zero.
    """

    identifier: str
    sequence: str
    abundance: int = 0
    estimated_abundance: float = 0.0

    def __post_init__(self) -> None:
        if not self.sequence:
            raise ValueError(f"Reference {self.identifier!r} has an empty sequence.")
        self.sequence = normalize_nucleotides(
            self.sequence, f"Reference {self.identifier!r}"
        )

    def __len__(self) -> int:
        return len(self.sequence)


@dataclass(frozen=True, eq=False)
class ReadRecord:
    """A single raw read with decoded phred qualities."""

    identifier: str
    sequence: str
    quality: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "sequence",
            normalize_nucleotides(self.sequence, f"Read {self.identifier!r}"),
        )
        quality = np.asarray(self.quality, dtype=np.int64)
        if quality.shape != (len(self.sequence),):
            raise ValueError(
                f"Read {self.identifier!r} has {len(self.sequence)} bases but "
                f"{quality.size} quality scores."
            )
        object.__setattr__(self, "quality", quality)

    def __len__(self) -> int:
        return len(self.sequence)


@dataclass(frozen=True, eq=False)
class UniqueSequence:
    """Distinct observed sequence with its multiplicity and mean quality profile."""

    index: int
    sequence: str
    count: int
    quality_profile: np.ndarray

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError("Unique sequences must be observed at least once.")
        if len(self.quality_profile) != len(self.sequence):
            raise ValueError(
                "Quality profile length must match the unique sequence length."
            )

    def __len__(self) -> int:
        return len(self.sequence)


@dataclass(frozen=True, eq=False)
class Dereplication:
    """Unique sequences plus the raw-read to unique-index map."""

    uniques: List[UniqueSequence]
    read_map: np.ndarray
    best_references: Optional[List[str]] = field(default=None)

    def __post_init__(self) -> None:
        if any(u.index != i for i, u in enumerate(self.uniques)):
            raise ValueError("Unique indices must match their position.")
        if len(self.read_map) and (
            self.read_map.min() < 0 or self.read_map.max() >= len(self.uniques)
        ):
            raise ValueError("Read map points outside the unique sequences.")

    @property
    def total_reads(self) -> int:
        """Number of raw reads the dereplication was built from."""
        return int(len(self.read_map))

    @property
    def sequences(self) -> List[str]:
        return [u.sequence for u in self.uniques]

    def index_of(self, sequence: str) -> Optional[int]:
        """Return the unique index of an exact sequence, or None."""
        lookup = getattr(self, "_lookup", None)
        if lookup is None:
            lookup = {u.sequence: u.index for u in self.uniques}
            object.__setattr__(self, "_lookup", lookup)
        return lookup.get(sequence)

    def with_best_references(self, best: Sequence[str]) -> "Dereplication":
        """Return a copy annotated with the final per-unique best reference."""
        if len(best) != len(self.uniques):
            raise ValueError(
                f"Expected {len(self.uniques)} best references, got {len(best)}."
            )
        return Dereplication(
            uniques=self.uniques, read_map=self.read_map, best_references=list(best)
        )


@dataclass(frozen=True, eq=False)
class SampledRead:
    """Raw read drawn for transition statistics, paired with its reference."""

    read_index: int
    sequence: str
    quality: np.ndarray
    reference: ReferenceSequence


__all__ = [
    "NUCLEOTIDES",
    "GAP",
    "normalize_nucleotides",
    "ReferenceSequence",
    "ReadRecord",
    "UniqueSequence",
    "Dereplication",
    "SampledRead",
]
