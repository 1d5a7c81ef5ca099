#!/usr/bin/env python3
"""CLI to estimate a reference-guided error matrix from a FASTQ and a reference table."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

from .constants import (
    ASSIGNMENTS_CSV,
    ERROR_MATRIX_YAML,
    PRECISION,
    REFERENCES_CSV,
    SIMULATED_READS,
    SIMULATED_REFERENCES,
    TRANSITIONS_CSV,
)

# Add the repository root to the Python path
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from referr.algorithms.error_model import estimate_error_model_from_files
from referr.exceptions import ReferrError
from referr.types import BasePair, ErrorModelConfig
from referr.utils import (
    assignment_frame,
    load_config,
    reference_frame,
    save_error_matrix,
)
from referr.utils.serialization import config_to_dict


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Estimate a sequencing error matrix against known references."
    )
    parser.add_argument("--fastq", type=Path, default=SIMULATED_READS)
    parser.add_argument("--references", type=Path, default=SIMULATED_REFERENCES)
    parser.add_argument(
        "--config", type=Path, help="YAML file with ErrorModelConfig options."
    )
    parser.add_argument("--sample-size", type=int)
    parser.add_argument("--threads", type=int)
    parser.add_argument("--phred-offset", type=int, choices=(33, 64))
    parser.add_argument("--max-quality", type=int)
    parser.add_argument(
        "--tie-mode",
        type=int,
        choices=(1, 2),
        help="1: abundance-based, 2: transition probability-based",
    )
    parser.add_argument("--seed", type=int)
    parser.add_argument("--output", type=Path, default=ERROR_MATRIX_YAML)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args()


def build_config(args: argparse.Namespace) -> ErrorModelConfig:
    overrides = {
        "sample_size": args.sample_size,
        "threads": args.threads,
        "phred_offset": args.phred_offset,
        "max_quality": args.max_quality,
        "tie_mode": args.tie_mode,
        "seed": args.seed,
    }
    if args.config is not None:
        return load_config(args.config, **overrides)
    return ErrorModelConfig(**{k: v for k, v in overrides.items() if v is not None})


def main() -> None:
    """Estimate the error matrix and write YAML/CSV outputs."""
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
        result = estimate_error_model_from_files(args.fastq, args.references, config)
    except ReferrError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    save_error_matrix(
        result.error_matrix,
        args.output,
        metadata={
            "fastq": str(args.fastq),
            "references": str(args.references),
            "total_reads": result.total_reads,
            "config": config_to_dict(config),
        },
        float_precision=PRECISION,
    )

    out_dir = args.output.parent
    assignment_frame(result).to_csv(out_dir / ASSIGNMENTS_CSV.name, index=False)
    reference_frame(result).to_csv(out_dir / REFERENCES_CSV.name, index=False)
    pd.DataFrame(
        result.transitions.counts,
        index=[pair.label for pair in BasePair],
        columns=result.transitions.qualities,
    ).to_csv(out_dir / TRANSITIONS_CSV.name)

    print(
        f"Wrote error matrix for {result.total_reads} reads and "
        f"{len(result.references)} references to {args.output}",
        file=sys.stdout,
    )


if __name__ == "__main__":
    main()
