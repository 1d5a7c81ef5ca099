"""
Closest-reference search for unique sequences.

Every unique sequence is compared with every reference by k-mer distance and
keeps the references at minimal distance. When several references tie exactly,
the configured :class:`~referr.types.TieMode` decides:

- ``ABUNDANCE`` keeps the tied reference with the most exactly-matching raw reads
  (first in input order when abundances are equal);
- ``PROBABILITY`` keeps all of them so they can be resolved later against the
  fitted error matrix.

The search is split into index ranges and run on a spawn-context process pool.
Each worker receives the matcher once at start-up; each range is independent,
and results are written back by index so the assignment follows the order of
the unique sequences.
"""

from __future__ import annotations

import logging
import multiprocessing
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import List, Optional, Sequence, Tuple

import numpy as np

from referr.algorithms.kmer import DEFAULT_KMER_SIZE, kmer_counts, kmer_distances
from referr.exceptions import WorkerFailure
from referr.types import Assignment, ReferenceSequence, TieMode

logger = logging.getLogger(__name__)

CHUNKS_PER_WORKER = 4

_Match = Tuple[Tuple[str, ...], bool]

_worker_matcher: Optional["ReferenceMatcher"] = None


def _init_worker(matcher: "ReferenceMatcher") -> None:
    global _worker_matcher
    _worker_matcher = matcher


def _match_in_worker(sequences: Sequence[str]) -> List[_Match]:
    if _worker_matcher is None:
        raise RuntimeError("Worker process was started without a matcher.")
    return _worker_matcher._match_range(sequences, 0, len(sequences))


class ReferenceMatcher:
    """Assign unique sequences to their closest references."""

    def __init__(
        self,
        references: Sequence[ReferenceSequence],
        kmer_size: int = DEFAULT_KMER_SIZE,
        tie_mode: TieMode = TieMode.ABUNDANCE,
        threads: int = 1,
    ) -> None:
        if not references:
            raise ValueError("At least one reference sequence is required.")
        if threads < 1:
            raise ValueError(f"threads must be positive, got {threads}")
        self.references = list(references)
        self.kmer_size = kmer_size
        self.tie_mode = TieMode(tie_mode)
        self.threads = threads

        self._ref_counts = np.vstack(
            [kmer_counts(ref.sequence, kmer_size) for ref in self.references]
        )
        self._ref_lengths = np.array([len(ref) for ref in self.references])
        self._abundances = np.array([ref.abundance for ref in self.references])

    def distances(self, sequence: str) -> np.ndarray:
        """K-mer distance from ``sequence`` to every reference, in input order."""
        return kmer_distances(
            sequence, self._ref_counts, self._ref_lengths, self.kmer_size
        )

    def candidates(self, sequence: str) -> _Match:
        """Closest reference identifiers and whether a tie was found."""
        dist = self.distances(sequence)
        tied = np.flatnonzero(dist == dist.min())
        if len(tied) == 1:
            return (self.references[tied[0]].identifier,), False

        if self.tie_mode is TieMode.ABUNDANCE:
            winner = tied[int(np.argmax(self._abundances[tied]))]
            return (self.references[winner].identifier,), True
        return tuple(self.references[i].identifier for i in tied), True

    def _match_range(self, sequences: Sequence[str], start: int, stop: int) -> List[_Match]:
        return [self.candidates(sequences[i]) for i in range(start, stop)]

    def _ranges(self, n: int) -> List[Tuple[int, int]]:
        n_chunks = max(1, min(n, self.threads * CHUNKS_PER_WORKER))
        bounds = np.linspace(0, n, n_chunks + 1).astype(int)
        return [(int(a), int(b)) for a, b in zip(bounds[:-1], bounds[1:]) if b > a]

    def match(self, sequences: Sequence[str]) -> Assignment:
        """Return the candidate references of every sequence, in input order."""
        results: List[_Match] = [None] * len(sequences)  # type: ignore[list-item]
        ranges = self._ranges(len(sequences))

        if self.threads == 1:
            for start, stop in ranges:
                try:
                    results[start:stop] = self._match_range(sequences, start, stop)
                except Exception as exc:
                    raise WorkerFailure(
                        f"Reference matching failed for unique sequences {start}..{stop - 1}"
                    ) from exc
        else:
            with ProcessPoolExecutor(
                max_workers=self.threads,
                mp_context=multiprocessing.get_context("spawn"),
                initializer=_init_worker,
                initargs=(self,),
            ) as executor:
                futures = {
                    executor.submit(_match_in_worker, list(sequences[start:stop])): (
                        start,
                        stop,
                    )
                    for start, stop in ranges
                }
                for future in as_completed(futures):
                    start, stop = futures[future]
                    try:
                        results[start:stop] = future.result()
                    except Exception as exc:
                        for pending in futures:
                            pending.cancel()
                        raise WorkerFailure(
                            f"Reference matching failed for unique sequences "
                            f"{start}..{stop - 1}"
                        ) from exc

        n_ties = sum(1 for _, tied in results if tied)
        if n_ties:
            if self.tie_mode is TieMode.ABUNDANCE:
                logger.info(
                    "%d unique sequences tie between references; "
                    "searching best reference based on abundance information.",
                    n_ties,
                )
            else:
                logger.info(
                    "%d unique sequences tie between references; "
                    "searching best reference based on transition probability.",
                    n_ties,
                )
        return Assignment([ids for ids, _ in results])


__all__ = ["ReferenceMatcher"]
