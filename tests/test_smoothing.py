"""Unit tests for the loess error smoother."""

from __future__ import annotations

import numpy as np
import pytest

from referr.algorithms.smoothing import (
    MAX_ERROR_RATE,
    loess_error_matrix,
    weighted_loess,
)
from referr.exceptions import DataIntegrityError
from referr.types import NUCLEOTIDES, BasePair, TransitionMatrix


def _transitions(cells, max_quality=42):
    """TransitionMatrix from {(label, quality): count}."""
    counts = np.zeros((16, max_quality + 1), dtype=np.int64)
    for (label, quality), value in cells.items():
        counts[BasePair[label], quality] = value
    return TransitionMatrix(counts)


def _background(qualities, total):
    """Error-free observations of C, G and T so every base has data."""
    return {(f"{b}2{b}", q): total for b in "CGT" for q in qualities}


def test_loess_reproduces_linear_data():
    x = np.arange(10, dtype=float)
    y = 2.0 * x + 1.0
    fitted = weighted_loess(x, y, np.ones_like(x), x)
    np.testing.assert_allclose(fitted, y, atol=1e-8)


def test_loess_single_point_is_constant():
    fitted = weighted_loess(np.array([30.0]), np.array([-2.0]), np.array([5.0]), np.arange(43))
    np.testing.assert_allclose(fitted, -2.0)


def test_loess_extends_edges_as_constants():
    x = np.arange(10, 21, dtype=float)
    y = 0.5 * x
    fitted = weighted_loess(x, y, np.ones_like(x), np.array([0.0, 10.0, 20.0, 42.0]))
    assert fitted[0] == pytest.approx(fitted[1])
    assert fitted[3] == pytest.approx(fitted[2])
    assert fitted[1] == pytest.approx(5.0)


def test_loess_rejects_empty_input():
    with pytest.raises(ValueError):
        weighted_loess(np.array([]), np.array([]), np.array([]), np.arange(3))


def test_single_quality_rate_spreads_to_all_qualities():
    cells = {("A2A", 30): 9901, ("A2C", 30): 99}
    cells.update(_background([30], 10000))
    em = loess_error_matrix(_transitions(cells))

    np.testing.assert_allclose(em.row(BasePair.A2C), 0.01, rtol=1e-9)
    np.testing.assert_allclose(em.row(BasePair.A2G), 1e-4, rtol=1e-9)
    assert em.probability("A", "A", 0) == pytest.approx(1 - 0.01 - 2e-4)


def test_each_reference_base_sums_to_one():
    cells = {("A2A", 30): 9901, ("A2C", 30): 99, ("G2T", 30): 5}
    cells.update(_background([20, 30], 10000))
    em = loess_error_matrix(_transitions(cells))

    for ref_base in NUCLEOTIDES:
        rows = [BasePair.of(ref_base, obs) for obs in NUCLEOTIDES]
        np.testing.assert_allclose(em.probabilities[rows].sum(axis=0), 1.0)


def test_log_linear_rates_are_interpolated():
    cells = {}
    for q, errs in zip((10, 20, 30, 40), (10**4, 10**3, 10**2, 10**1)):
        cells[("A2C", q)] = errs - 1
        cells[("A2A", q)] = 10**6 - (errs - 1)
    cells.update(_background((10, 20, 30, 40), 10**6))
    em = loess_error_matrix(_transitions(cells))

    assert em.probability("A", "C", 25) == pytest.approx(10**-3.5, rel=1e-6)
    assert em.probability("A", "C", 0) == pytest.approx(0.01, rel=1e-6)
    assert em.probability("A", "C", 42) == pytest.approx(1e-5, rel=1e-6)


def test_rates_are_capped():
    cells = {("A2A", 30): 1000, ("A2C", 30): 9000}
    cells.update(_background([30], 10000))
    em = loess_error_matrix(_transitions(cells))
    assert em.probability("A", "C", 30) == pytest.approx(MAX_ERROR_RATE)
    assert em.probability("A", "A", 30) >= 0.0


def test_missing_reference_base_is_a_data_error():
    with pytest.raises(DataIntegrityError, match="C"):
        loess_error_matrix(_transitions({("A2A", 30): 100}))
