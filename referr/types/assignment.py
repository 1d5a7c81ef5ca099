"""Unique-sequence to reference assignment."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple


@dataclass
class Assignment:
    """Candidate reference identifiers for every unique sequence.

    An entry with one identifier is resolved. Entries with several identifiers are
    ties left open for likelihood-based resolution.
    """

    candidates: List[Tuple[str, ...]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.candidates = [tuple(entry) for entry in self.candidates]
        empty = [i for i, entry in enumerate(self.candidates) if not entry]
        if empty:
            raise ValueError(f"Unique sequences without candidates: {empty[:10]}")

    def __len__(self) -> int:
        return len(self.candidates)

    def __getitem__(self, index: int) -> Tuple[str, ...]:
        return self.candidates[index]

    def is_resolved_at(self, index: int) -> bool:
        return len(self.candidates[index]) == 1

    @property
    def is_resolved(self) -> bool:
        return all(len(entry) == 1 for entry in self.candidates)

    def unresolved(self) -> Iterator[int]:
        """Indices still holding more than one candidate."""
        return (i for i, entry in enumerate(self.candidates) if len(entry) > 1)

    def resolve(self, index: int, reference_id: str) -> None:
        if reference_id not in self.candidates[index]:
            raise ValueError(
                f"{reference_id!r} is not a candidate for unique sequence {index}"
            )
        self.candidates[index] = (reference_id,)

    def best(self, index: int) -> str:
        if not self.is_resolved_at(index):
            raise ValueError(f"Unique sequence {index} is still ambiguous.")
        return self.candidates[index][0]

    def best_references(self) -> List[str]:
        """One identifier per unique sequence; fails while ties remain."""
        return [self.best(i) for i in range(len(self.candidates))]

    @classmethod
    def from_best(cls, best: Sequence[str]) -> "Assignment":
        return cls([(ref_id,) for ref_id in best])


__all__ = ["Assignment"]
