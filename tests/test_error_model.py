"""End-to-end tests for error-model estimation on simulated communities."""

from __future__ import annotations

import numpy as np
import pytest

from referr.algorithms import error_model
from referr.algorithms.error_model import estimate_error_model
from referr.algorithms.reference_matcher import ReferenceMatcher
from referr.exceptions import DataIntegrityError, SamplingSizeExceeded
from referr.types import ErrorModelConfig, ReferenceSequence, TieMode
from referr.types.matrix import substitutions
from referr.utils.simulation import random_references, simulate_reads

SUBSTITUTION_RATE = 0.01
QUALITY = 35


@pytest.fixture(scope="module")
def community():
    """Three 50 bp references and 10,000 reads with 1 % A->C at q35."""
    rng = np.random.default_rng(2024)
    references = random_references(3, 50, rng)
    reads = simulate_reads(
        references, 10000, {"A2C": SUBSTITUTION_RATE}, QUALITY, rng
    )
    return references, reads


@pytest.fixture(scope="module")
def baseline(community):
    references, reads = community
    config = ErrorModelConfig(seed=7)
    return estimate_error_model(reads, references, config)


def test_recovers_injected_substitution_rate(baseline):
    em = baseline.error_matrix
    assert em.probability("A", "C", QUALITY) == pytest.approx(SUBSTITUTION_RATE, abs=0.005)
    for pair in substitutions():
        if pair.label != "A2C":
            assert em.probabilities[pair, QUALITY] < 0.001


def test_references_match_their_own_reads(community, baseline):
    references, reads = community
    derep = baseline.dereplication

    assert baseline.total_reads == len(reads)
    assert len(derep.read_map) == len(reads)
    assert sum(u.count for u in derep.uniques) == len(reads)
    assert len(derep.best_references) == len(derep.uniques)

    for ref in baseline.references:
        index = derep.index_of(ref.sequence)
        assert derep.best_references[index] == ref.identifier
        assert ref.abundance == derep.uniques[index].count
    # inputs keep their own bookkeeping
    assert all(ref.abundance == 0 for ref in references)


def test_seeded_runs_are_reproducible_across_thread_counts(community):
    references, reads = community
    baseline = estimate_error_model(
        reads, references, ErrorModelConfig(sample_size=500, seed=7)
    )
    again = estimate_error_model(
        reads, references, ErrorModelConfig(sample_size=500, seed=7, threads=3)
    )

    np.testing.assert_array_equal(
        again.transitions.counts, baseline.transitions.counts
    )
    np.testing.assert_allclose(
        again.error_matrix.probabilities, baseline.error_matrix.probabilities
    )
    assert again.best_references == baseline.best_references


def test_sample_size_checked_before_any_work(community, monkeypatch):
    references, reads = community

    def fail(_reads):
        raise AssertionError("dereplication should not run")

    monkeypatch.setattr(error_model, "dereplicate", fail)
    with pytest.raises(SamplingSizeExceeded) as excinfo:
        estimate_error_model(
            reads, references, ErrorModelConfig(sample_size=len(reads) + 1)
        )
    assert excinfo.value.available == len(reads)


def test_no_matching_reference_is_a_data_error(community):
    _, reads = community
    strangers = random_references(2, 40, np.random.default_rng(99), prefix="x")
    with pytest.raises(DataIntegrityError):
        estimate_error_model(reads, strangers, ErrorModelConfig(sample_size=10))


def test_unmatched_references_are_dropped(community, baseline):
    references, reads = community
    extra = ReferenceSequence(identifier="ghost", sequence="A" * 40)
    result = estimate_error_model(
        reads, list(references) + [extra], ErrorModelConfig(sample_size=200, seed=1)
    )
    assert [ref.identifier for ref in result.references] == [
        ref.identifier for ref in baseline.references
    ]


def test_probability_mode_resolves_every_tie(community):
    references, reads = community
    twin = ReferenceSequence(identifier="twin", sequence=references[0].sequence)
    config = ErrorModelConfig(sample_size=500, seed=3, tie_mode=TieMode.PROBABILITY)

    result = estimate_error_model(reads, list(references) + [twin], config)

    best = result.best_references
    assert len(best) == len(result.dereplication.uniques)
    index = result.dereplication.index_of(references[0].sequence)
    assert best[index] == references[0].identifier
    assert "twin" in {ref.identifier for ref in result.references}


def test_probability_mode_prefers_likelier_substitution_in_fitted_matrix():
    rng = np.random.default_rng(11)
    left = "".join(rng.choice(list("ACGT"), size=25))
    right = "".join(rng.choice(list("ACGT"), size=25))
    ref_g = ReferenceSequence(identifier="refG", sequence=left + "G" + right)
    ref_a = ReferenceSequence(identifier="refA", sequence=left + "A" + right)
    references = [ref_g, ref_a]
    reads = simulate_reads(references, 6000, {"A2C": 0.03, "G2C": 0.001}, QUALITY, rng)
    config = ErrorModelConfig(sample_size=3000, seed=11, tie_mode=TieMode.PROBABILITY)

    result = estimate_error_model(reads, references, config)

    em = result.error_matrix
    assert em.probability("A", "C", QUALITY) > 2 * em.probability("G", "C", QUALITY)
    middle_c = left + "C" + right
    tied, _ = ReferenceMatcher(references, tie_mode=TieMode.PROBABILITY).candidates(middle_c)
    assert tied == ("refG", "refA")
    index = result.dereplication.index_of(middle_c)
    assert index is not None
    assert result.best_references[index] == "refA"
