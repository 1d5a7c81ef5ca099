"""Unit tests for likelihood-based tie resolution."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from referr.algorithms.ambiguity import AmbiguityResolver
from referr.types import Assignment, Dereplication, UniqueSequence

MIDDLE_C = "T" * 20 + "C" + "T" * 20


def _unique(sequence=MIDDLE_C, quality=35.0, index=0, count=1):
    return UniqueSequence(
        index=index,
        sequence=sequence,
        count=count,
        quality_profile=np.full(len(sequence), quality, dtype=float),
    )


def test_higher_likelihood_candidate_wins(flank_references, error_matrix_factory):
    ref_a, ref_g = flank_references
    em = error_matrix_factory(overrides={("A2C", 35): 0.02, ("G2C", 35): 0.001})
    resolver = AmbiguityResolver(em)

    assert resolver.likelihood(_unique(), ref_a) == pytest.approx(0.02)
    assert resolver.choose(_unique(), [ref_g, ref_a]).identifier == "refA"
    assert resolver.choose(_unique(), [ref_a, ref_g]).identifier == "refA"


def test_zero_likelihood_tie_keeps_first_candidate(
    flank_references, error_matrix_factory, caplog
):
    ref_a, ref_g = flank_references
    em = error_matrix_factory(overrides={("A2C", 35): 0.0, ("G2C", 35): 0.0})
    resolver = AmbiguityResolver(em)

    with caplog.at_level(logging.DEBUG, logger="referr.algorithms.ambiguity"):
        assert resolver.choose(_unique(), [ref_g, ref_a]).identifier == "refG"
    assert "zero likelihood" in caplog.text


def test_mean_quality_is_rounded_to_nearest_score(
    flank_references, error_matrix_factory
):
    ref_a, ref_g = flank_references
    em = error_matrix_factory(
        overrides={
            ("A2C", 30): 0.05,
            ("A2C", 29): 1e-6,
            ("G2C", 30): 0.001,
            ("G2C", 29): 0.5,
        }
    )
    resolver = AmbiguityResolver(em)
    unique = _unique(quality=29.6)

    assert resolver.scored_columns(unique, ref_a) == [("A", "C", 30)]
    assert resolver.choose(unique, [ref_g, ref_a]).identifier == "refA"


def test_identical_sequence_has_likelihood_one(flank_references, error_matrix_factory):
    ref_a, _ = flank_references
    resolver = AmbiguityResolver(error_matrix_factory())
    assert resolver.likelihood(_unique(sequence=ref_a.sequence), ref_a) == 1.0


def test_resolve_updates_only_tied_entries(flank_references, error_matrix_factory):
    ref_a, ref_g = flank_references
    em = error_matrix_factory(overrides={("A2C", 35): 0.02})
    derep = Dereplication(
        uniques=[
            _unique(sequence=ref_a.sequence, index=0, count=3),
            _unique(index=1, count=2),
        ],
        read_map=np.array([0, 0, 0, 1, 1]),
    )
    assignment = Assignment([("refA",), ("refG", "refA")])

    resolved = AmbiguityResolver(em).resolve(
        assignment, derep, {"refA": ref_a, "refG": ref_g}
    )

    assert resolved == 1
    assert assignment.is_resolved
    assert assignment.best_references() == ["refA", "refA"]


def test_choose_without_candidates_fails(error_matrix_factory):
    with pytest.raises(ValueError):
        AmbiguityResolver(error_matrix_factory()).choose(_unique(), [])
