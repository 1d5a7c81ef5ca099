"""Tests for the core data types and run configuration."""

from __future__ import annotations

import numpy as np
import pytest

from referr.exceptions import ConfigurationError, DataIntegrityError
from referr.types import (
    Assignment,
    BasePair,
    ErrorMatrix,
    ErrorModelConfig,
    PairwiseAlignment,
    ReadRecord,
    ReferenceSequence,
    TieMode,
    TransitionMatrix,
)
from referr.types.matrix import pairs_from, substitutions


class TestErrorModelConfig:
    def test_defaults(self):
        config = ErrorModelConfig()
        assert config.sample_size == 10000
        assert config.threads == 1
        assert config.phred_offset == 33
        assert config.tie_mode is TieMode.ABUNDANCE
        assert config.n_qualities == 43

    def test_tie_mode_accepts_integer(self):
        assert ErrorModelConfig(tie_mode=2).tie_mode is TieMode.PROBABILITY

    @pytest.mark.parametrize(
        "options",
        [
            {"tie_mode": 3},
            {"phred_offset": 50},
            {"threads": 0},
            {"sample_size": 0},
            {"kmer_size": 0},
            {"max_quality": -1},
            {"tie_mode": None},
            {"tie_mode": "abundance"},
            {"sample_size": None},
            {"threads": "many"},
            {"max_quality": None},
        ],
    )
    def test_invalid_options(self, options):
        with pytest.raises(ConfigurationError):
            ErrorModelConfig(**options)


class TestBasePair:
    def test_layout(self):
        assert BasePair.of("A", "C") is BasePair.A2C
        assert BasePair.of("T", "T") == 15
        assert BasePair.G2A.ref_base == "G"
        assert BasePair.G2A.obs_base == "A"
        assert BasePair.C2C.is_identity
        assert BasePair.C2T.label == "C2T"

    def test_substitutions_and_pairs(self):
        assert len(list(substitutions())) == 12
        assert [p.label for p in pairs_from("G")] == ["G2A", "G2C", "G2G", "G2T"]

    def test_invalid_base(self):
        with pytest.raises(ValueError):
            BasePair.of("N", "A")


class TestMatrices:
    def test_transition_matrix_rejects_negative_counts(self):
        counts = np.zeros((16, 5), dtype=np.int64)
        counts[0, 0] = -1
        with pytest.raises(ValueError):
            TransitionMatrix(counts)

    def test_transition_matrix_totals(self):
        counts = np.zeros((16, 3), dtype=np.int64)
        counts[BasePair.A2A, 2] = 7
        counts[BasePair.A2G, 2] = 3
        matrix = TransitionMatrix(counts)
        assert matrix.totals("A").tolist() == [0, 0, 10]
        assert matrix.add(matrix).count("A", "G", 2) == 6

    def test_error_matrix_validation(self):
        with pytest.raises(ValueError):
            ErrorMatrix(np.full((16, 3), 1.5))
        with pytest.raises(ValueError):
            ErrorMatrix(np.full((16, 3), np.nan))
        with pytest.raises(ValueError):
            ErrorMatrix(np.full((15, 3), 0.1))

    def test_error_matrix_quality_out_of_range(self, error_matrix_factory):
        em = error_matrix_factory(n_qualities=10)
        assert em.max_quality == 9
        with pytest.raises(ValueError):
            em.probability("A", "C", 10)


class TestSequences:
    def test_reads_are_uppercased(self):
        read = ReadRecord(identifier="r", sequence="acgt", quality=[1, 2, 3, 4])
        assert read.sequence == "ACGT"
        assert read.quality.dtype == np.int64

    def test_ambiguous_read_is_rejected(self):
        with pytest.raises(DataIntegrityError):
            ReadRecord(identifier="r", sequence="ACNT", quality=[1, 2, 3, 4])

    def test_quality_length_must_match(self):
        with pytest.raises(ValueError):
            ReadRecord(identifier="r", sequence="ACGT", quality=[1, 2])

    def test_reference_rejects_empty_and_ambiguous(self):
        with pytest.raises(ValueError):
            ReferenceSequence(identifier="r", sequence="")
        with pytest.raises(DataIntegrityError):
            ReferenceSequence(identifier="r", sequence="ACGR")


class TestAssignment:
    def test_resolution_lifecycle(self):
        assignment = Assignment([("a",), ("b", "c")])
        assert not assignment.is_resolved
        assert list(assignment.unresolved()) == [1]
        with pytest.raises(ValueError):
            assignment.best(1)
        with pytest.raises(ValueError):
            assignment.resolve(1, "a")

        assignment.resolve(1, "c")
        assert assignment.best_references() == ["a", "c"]

    def test_empty_entry_is_rejected(self):
        with pytest.raises(ValueError):
            Assignment([("a",), ()])


def test_alignment_rejects_all_gap_column():
    with pytest.raises(ValueError):
        PairwiseAlignment("A-C", "A-C", 0.0)
    with pytest.raises(ValueError):
        PairwiseAlignment("AC", "A", 0.0)
