"""Synthetic community reads with a known substitution process."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import numpy as np

from referr.types import NUCLEOTIDES, ReadRecord, ReferenceSequence


def random_references(
    n_references: int, length: int, rng: np.random.Generator, prefix: str = "ref"
) -> List[ReferenceSequence]:
    """Draw distinct uniformly random reference sequences."""
    references: List[ReferenceSequence] = []
    seen = set()
    while len(references) < n_references:
        sequence = "".join(rng.choice(list(NUCLEOTIDES), size=length))
        if sequence in seen:
            continue
        seen.add(sequence)
        references.append(
            ReferenceSequence(identifier=f"{prefix}{len(references) + 1}", sequence=sequence)
        )
    return references


def simulate_reads(
    references: Sequence[ReferenceSequence],
    n_reads: int,
    substitution_rates: Dict[str, float],
    quality: int,
    rng: np.random.Generator,
    weights: Optional[Sequence[float]] = None,
) -> List[ReadRecord]:
    """Simulate reads from ``references`` at a single quality score.

    ``substitution_rates`` maps labels such as ``"A2C"`` to the probability that
    a reference base is read as the other base. Every read position carries
    ``quality``.
    """
    for label, rate in substitution_rates.items():
        ref_base, obs_base = label.split("2")
        if ref_base not in NUCLEOTIDES or obs_base not in NUCLEOTIDES or ref_base == obs_base:
            raise ValueError(f"Invalid substitution label {label!r}")
        if not 0.0 <= rate <= 1.0:
            raise ValueError(f"Substitution rate for {label} must be a probability")

    if weights is None:
        weights = [1.0] * len(references)
    probs = np.asarray(weights, dtype=float)
    probs = probs / probs.sum()
    sources = rng.choice(len(references), size=n_reads, p=probs)

    reads: List[ReadRecord] = []
    for read_index, source in enumerate(sources):
        bases = list(references[source].sequence)
        draws = rng.random(len(bases))
        for pos, ref_base in enumerate(bases):
            # one substitution at most per position
            threshold = 0.0
            for label, rate in substitution_rates.items():
                if not label.startswith(ref_base):
                    continue
                threshold += rate
                if draws[pos] < threshold:
                    bases[pos] = label[-1]
                    break
        reads.append(
            ReadRecord(
                identifier=f"read{read_index}_{references[source].identifier}",
                sequence="".join(bases),
                quality=np.full(len(bases), quality, dtype=np.int64),
            )
        )
    return reads


__all__ = ["random_references", "simulate_reads"]
