"""Shared fixtures for the test suite."""

from __future__ import annotations

import numpy as np
import pytest

from referr.types import NUCLEOTIDES, BasePair, ErrorMatrix, ReferenceSequence


def build_error_matrix(
    n_qualities: int = 43, base_rate: float = 0.001, overrides=None
) -> ErrorMatrix:
    """Uniform substitution rates with identity rows summing each base to one.

    ``overrides`` maps (label, quality) -> probability for substitution cells.
    """
    probs = np.full((len(BasePair), n_qualities), base_rate)
    for (label, quality), value in (overrides or {}).items():
        probs[BasePair[label], quality] = value
    for ref_base in NUCLEOTIDES:
        subs = [BasePair.of(ref_base, obs) for obs in NUCLEOTIDES if obs != ref_base]
        probs[BasePair.of(ref_base, ref_base)] = 1.0 - probs[subs].sum(axis=0)
    return ErrorMatrix(probs)


@pytest.fixture
def error_matrix_factory():
    return build_error_matrix


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)


@pytest.fixture
def flank_references():
    """Two references that differ only at the middle base of a poly-T flank."""
    flank = "T" * 20
    return [
        ReferenceSequence(identifier="refA", sequence=flank + "A" + flank, abundance=3),
        ReferenceSequence(identifier="refG", sequence=flank + "G" + flank, abundance=3),
    ]
