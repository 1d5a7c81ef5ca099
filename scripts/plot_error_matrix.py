#!/usr/bin/env python3
"""Plot observed transition frequencies against the fitted error matrix."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .constants import (
    ERROR_MATRIX_YAML,
    FIGURES_FOLDER,
    FITTED_COLOR,
    OBSERVED_COLOR,
    PLOT_DPI,
    PLOT_GRID_ALPHA,
    PLOT_TITLE_FONTSIZE,
    PLOT_XLABEL_FONTSIZE,
    PLOT_YLABEL_FONTSIZE,
    TRANSITIONS_CSV,
)

# Add the repository root to the Python path
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from referr.types import NUCLEOTIDES, BasePair
from referr.utils import error_matrix_frame, load_error_matrix


def observed_frequencies(transitions: pd.DataFrame) -> pd.DataFrame:
    """Per-quality observed frequency of every base pair (NaN without data)."""
    freqs = transitions.astype(float).copy()
    for ref_base in NUCLEOTIDES:
        rows = [f"{ref_base}2{obs}" for obs in NUCLEOTIDES]
        totals = transitions.loc[rows].sum(axis=0).astype(float)
        freqs.loc[rows] = transitions.loc[rows].div(totals.replace(0, np.nan), axis=1)
    return freqs


def plot_error_matrix(
    fitted: pd.DataFrame, observed: pd.DataFrame, output_path: Path
) -> None:
    """One panel per base pair on a log10 probability axis."""
    fig, axes = plt.subplots(4, 4, figsize=(14, 12), sharex=True, sharey=True)
    qualities = fitted.columns.astype(int)

    for pair in BasePair:
        ax = axes[pair.value // 4][pair.value % 4]
        obs = observed.loc[pair.label].to_numpy(dtype=float)
        mask = np.isfinite(obs) & (obs > 0)
        ax.scatter(
            qualities[mask], obs[mask], s=10, color=OBSERVED_COLOR, label="observed"
        )
        ax.plot(
            qualities,
            fitted.loc[pair.label].to_numpy(dtype=float),
            color=FITTED_COLOR,
            linewidth=1.5,
            label="fitted",
        )
        ax.set_yscale("log")
        ax.set_title(pair.label, fontsize=PLOT_TITLE_FONTSIZE - 2)
        ax.grid(True, alpha=PLOT_GRID_ALPHA)

    for ax in axes[-1]:
        ax.set_xlabel("Consensus quality score", fontsize=PLOT_XLABEL_FONTSIZE)
    for row in axes:
        row[0].set_ylabel("Error frequency (log10)", fontsize=PLOT_YLABEL_FONTSIZE)
    axes[0][0].legend(loc="lower left", fontsize=8)

    fig.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=PLOT_DPI)
    plt.close(fig)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--error-matrix", type=Path, default=ERROR_MATRIX_YAML)
    parser.add_argument("--transitions", type=Path, default=TRANSITIONS_CSV)
    parser.add_argument(
        "--output", type=Path, default=FIGURES_FOLDER / "error_matrix.png"
    )
    args = parser.parse_args()

    fitted = error_matrix_frame(load_error_matrix(args.error_matrix))
    transitions = pd.read_csv(args.transitions, index_col=0)
    transitions.columns = transitions.columns.astype(int)
    fitted.columns = fitted.columns.astype(int)

    plot_error_matrix(fitted, observed_frequencies(transitions), args.output)
    print(f"Saved error matrix plot to {args.output}", file=sys.stdout)


if __name__ == "__main__":
    main()
