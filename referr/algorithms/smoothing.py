"""
Loess smoothing of transition counts into an error matrix.

For every substitution (reference base -> different observed base) the observed
rate at each quality score is taken on a log10 scale with one pseudocount,
``log10((errors + 1) / total)``, and fitted across the quality axis with a
weighted local quadratic regression whose prior weights are the per-quality
totals of the reference base. Qualities without any observation do not enter
the fit; predictions outside the observed range take the value at the nearest
observed quality. Fitted rates are clipped to ``[MIN_ERROR_RATE, MAX_ERROR_RATE]``
and the identity rate of each reference base is one minus its three
substitution rates, so each reference base's column sums to one.
"""

from __future__ import annotations

import numpy as np

from referr.exceptions import DataIntegrityError
from referr.types import NUCLEOTIDES, BasePair, ErrorMatrix, TransitionMatrix
from referr.types.matrix import NUM_BASE_PAIRS

LOESS_SPAN = 0.75
LOESS_DEGREE = 2
MAX_ERROR_RATE = 0.25
MIN_ERROR_RATE = 1e-7


def _local_fit(
    x: np.ndarray, y: np.ndarray, weights: np.ndarray, x0: float, span: float, degree: int
) -> float:
    """Weighted polynomial fit around ``x0`` with a tricube kernel."""
    dist = np.abs(x - x0)
    n_local = max(int(np.floor(len(x) * span)), 1)
    radius = np.sort(dist)[n_local - 1]
    if radius > 0:
        kernel = np.clip(1.0 - (dist / radius) ** 3, 0.0, None) ** 3
    else:
        kernel = (dist == 0).astype(float)

    w = kernel * weights
    mask = w > 0
    if not mask.any():
        return float(y[np.argmin(dist)])

    deg = min(degree, np.unique(x[mask]).size - 1)
    if deg <= 0:
        return float(np.average(y[mask], weights=w[mask]))
    coeffs = np.polyfit(x[mask] - x0, y[mask], deg, w=np.sqrt(w[mask]))
    return float(coeffs[-1])


def weighted_loess(
    x: np.ndarray,
    y: np.ndarray,
    weights: np.ndarray,
    x_new: np.ndarray,
    span: float = LOESS_SPAN,
    degree: int = LOESS_DEGREE,
) -> np.ndarray:
    """Predict a loess curve through (x, y) at ``x_new``.

    Points of ``x_new`` beyond the range of ``x`` get the prediction at the
    nearest end of that range.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    weights = np.asarray(weights, dtype=float)
    if x.size == 0:
        raise ValueError("Cannot fit a loess curve without data points.")
    if not (x.shape == y.shape == weights.shape):
        raise ValueError("x, y and weights must share the same shape.")
    if not 0 < span <= 1:
        raise ValueError(f"span must lie within (0, 1], got {span}")

    x_eval = np.clip(np.asarray(x_new, dtype=float), x.min(), x.max())
    return np.array([_local_fit(x, y, weights, x0, span, degree) for x0 in x_eval])


def loess_error_matrix(transitions: TransitionMatrix) -> ErrorMatrix:
    """Fit an :class:`ErrorMatrix` to raw transition counts."""
    counts = transitions.counts
    qualities = transitions.qualities.astype(float)
    probs = np.zeros((NUM_BASE_PAIRS, counts.shape[1]), dtype=float)

    for ref_base in NUCLEOTIDES:
        totals = transitions.totals(ref_base)
        observed = totals > 0
        if not observed.any():
            raise DataIntegrityError(
                f"No observations of reference base {ref_base}; "
                "its error rates cannot be estimated."
            )

        substitution_sum = np.zeros(counts.shape[1], dtype=float)
        for obs_base in NUCLEOTIDES:
            if obs_base == ref_base:
                continue
            pair = BasePair.of(ref_base, obs_base)
            errors = counts[pair][observed]
            rlogp = np.log10((errors + 1.0) / totals[observed])
            fitted = weighted_loess(
                qualities[observed], rlogp, totals[observed].astype(float), qualities
            )
            rates = np.clip(10.0**fitted, MIN_ERROR_RATE, MAX_ERROR_RATE)
            probs[pair] = rates
            substitution_sum += rates

        probs[BasePair.of(ref_base, ref_base)] = 1.0 - substitution_sum

    return ErrorMatrix(probs)


__all__ = [
    "weighted_loess",
    "loess_error_matrix",
    "MAX_ERROR_RATE",
    "MIN_ERROR_RATE",
]
