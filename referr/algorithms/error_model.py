"""
End-to-end estimation of a reference-guided error model.

The run proceeds in phases:

1. check that the requested sample fits in the raw reads;
2. dereplicate the reads and annotate every reference with the number of raw
   reads identical to it, dropping references that no read matches;
3. assign each unique sequence to its closest reference(s) by k-mer distance
   (the only parallel phase);
4. sample raw reads, align them to their reference and tabulate
   (reference base, observed base, quality) counts;
5. smooth the counts into an error matrix;
6. under probability tie-breaking, resolve the remaining ties with the matrix.

Abundance bookkeeping is written to fresh reference records owned by the
returned result; the references passed in are left untouched.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

import numpy as np

from referr.algorithms.ambiguity import AmbiguityResolver
from referr.algorithms.base import PairwiseAligner
from referr.algorithms.dereplication import dereplicate
from referr.algorithms.needleman_wunsch import NeedlemanWunschAligner
from referr.algorithms.reference_matcher import ReferenceMatcher
from referr.algorithms.sampling import ReadSampler, check_sample_size
from referr.algorithms.smoothing import loess_error_matrix
from referr.algorithms.transitions import TransitionTabulator
from referr.exceptions import DataIntegrityError
from referr.types import (
    Dereplication,
    ErrorModelConfig,
    ErrorModelResult,
    ReadRecord,
    ReferenceSequence,
    TieMode,
)
from referr.utils.fastq import read_fastq
from referr.utils.references import read_references

logger = logging.getLogger(__name__)


@contextmanager
def _timed(phase: str) -> Iterator[None]:
    start = time.perf_counter()
    yield
    logger.info("%s finished in %.2f s.", phase, time.perf_counter() - start)


def annotate_references(
    references: Sequence[ReferenceSequence], dereplication: Dereplication
) -> List[ReferenceSequence]:
    """Set exact-match abundances and keep references seen at least once."""
    kept: List[ReferenceSequence] = []
    for ref in references:
        unique_index = dereplication.index_of(ref.sequence)
        if unique_index is None:
            continue
        kept.append(
            ReferenceSequence(
                identifier=ref.identifier,
                sequence=ref.sequence,
                abundance=dereplication.uniques[unique_index].count,
                estimated_abundance=0.0,
            )
        )

    dropped = len(references) - len(kept)
    if dropped:
        logger.info(
            "Dropped %d of %d references without an exactly matching read.",
            dropped,
            len(references),
        )
    if not kept:
        raise DataIntegrityError(
            f"None of the {len(references)} reference sequences matches a raw read "
            "exactly; no reference is left to match against."
        )
    return kept


def estimate_error_model(
    reads: Sequence[ReadRecord],
    references: Sequence[ReferenceSequence],
    config: Optional[ErrorModelConfig] = None,
    aligner: Optional[PairwiseAligner] = None,
) -> ErrorModelResult:
    """Estimate the error matrix and best-reference assignment for ``reads``."""
    config = config or ErrorModelConfig()
    aligner = aligner or NeedlemanWunschAligner()
    total_reads = len(reads)
    check_sample_size(config.sample_size, total_reads)
    logger.info("Reference tie-break mode: %s.", config.tie_mode.name.lower())

    with _timed("Dereplication"):
        dereplication = dereplicate(reads)
    logger.info(
        "Dereplicated %d reads into %d unique sequences.",
        total_reads,
        len(dereplication.uniques),
    )

    filtered = annotate_references(references, dereplication)
    by_id: Dict[str, ReferenceSequence] = {ref.identifier: ref for ref in filtered}
    if len(by_id) != len(filtered):
        raise DataIntegrityError("Reference identifiers must be unique.")

    with _timed("Reference matching"):
        matcher = ReferenceMatcher(
            filtered,
            kmer_size=config.kmer_size,
            tie_mode=config.tie_mode,
            threads=config.threads,
        )
        assignment = matcher.match(dereplication.sequences)
    logger.info("Finished finding the best reference sequences for each unique sequence.")

    with _timed("Transition tabulation"):
        sampler = ReadSampler(config.sample_size, np.random.default_rng(config.seed))
        sampled = sampler.sample(reads, dereplication, assignment, by_id)
        transitions = TransitionTabulator(config.max_quality, aligner).tabulate(sampled)

    with _timed("Error smoothing"):
        error_matrix = loess_error_matrix(transitions)

    if config.tie_mode is TieMode.PROBABILITY and not assignment.is_resolved:
        with _timed("Ambiguity resolution"):
            AmbiguityResolver(error_matrix, aligner).resolve(
                assignment, dereplication, by_id
            )

    return ErrorModelResult(
        references=filtered,
        error_matrix=error_matrix,
        dereplication=dereplication.with_best_references(assignment.best_references()),
        total_reads=total_reads,
        transitions=transitions,
    )


def estimate_error_model_from_files(
    fastq_path: Path,
    reference_path: Path,
    config: Optional[ErrorModelConfig] = None,
) -> ErrorModelResult:
    """Read a (possibly gzipped) FASTQ and a reference table, then estimate."""
    config = config or ErrorModelConfig()
    reads = read_fastq(fastq_path, phred_offset=config.phred_offset)
    references = read_references(reference_path)
    return estimate_error_model(reads, references, config)


__all__ = [
    "annotate_references",
    "estimate_error_model",
    "estimate_error_model_from_files",
]
