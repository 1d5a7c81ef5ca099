#!/usr/bin/env python3
"""Simulate a synthetic community (references + FASTQ reads) with known substitutions."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import skbio.io
from skbio import DNA

from .constants import (
    RANDOM_SEED,
    SIM_NUM_READS,
    SIM_NUM_REFERENCES,
    SIM_QUALITY,
    SIM_REFERENCE_LENGTH,
    SIM_SUBSTITUTIONS,
    SIMULATED_READS,
    SIMULATED_REFERENCES,
)

# Add the repository root to the Python path
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from referr.utils import write_fastq
from referr.utils.simulation import random_references, simulate_reads


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--references", type=int, default=SIM_NUM_REFERENCES)
    parser.add_argument("--length", type=int, default=SIM_REFERENCE_LENGTH)
    parser.add_argument("--reads", type=int, default=SIM_NUM_READS)
    parser.add_argument("--quality", type=int, default=SIM_QUALITY)
    parser.add_argument(
        "--substitution",
        action="append",
        metavar="X2Y=RATE",
        help="Substitution rate, e.g. A2C=0.01 (repeatable).",
    )
    parser.add_argument("--seed", type=int, default=RANDOM_SEED)
    args = parser.parse_args()

    substitutions = dict(SIM_SUBSTITUTIONS)
    if args.substitution:
        substitutions = {}
        for item in args.substitution:
            label, rate = item.split("=", 1)
            substitutions[label.upper()] = float(rate)

    rng = np.random.default_rng(args.seed)
    references = random_references(args.references, args.length, rng)
    reads = simulate_reads(references, args.reads, substitutions, args.quality, rng)

    SIMULATED_READS.parent.mkdir(parents=True, exist_ok=True)
    write_fastq(reads, SIMULATED_READS, compression="gzip")
    skbio.io.write(
        (DNA(ref.sequence, metadata={"id": ref.identifier}) for ref in references),
        format="fasta",
        into=str(SIMULATED_REFERENCES),
    )

    print(
        f"Simulated {len(reads)} reads from {len(references)} references "
        f"({substitutions}) into {SIMULATED_READS.parent}",
        file=sys.stdout,
    )


if __name__ == "__main__":
    main()
