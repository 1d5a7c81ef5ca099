#!/usr/bin/env python3
"""Run the complete simulate -> estimate -> plot workflow."""

import argparse
import subprocess
import sys

STEPS = [
    ("Estimating error matrix", "scripts.estimate_error_matrix"),
    ("Plotting error matrix", "scripts.plot_error_matrix"),
]


def run(module: str, args: list[str] | None = None) -> None:
    """Run a script."""
    cmd = [sys.executable, "-m", module] + (args or [])
    subprocess.run(cmd, check=True)


def main() -> None:
    """Run the complete workflow."""
    parser = argparse.ArgumentParser(description="Run the complete workflow.")
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Simulate a synthetic community before running (default: skip)",
    )
    parser.add_argument(
        "--tie-mode",
        choices=("1", "2"),
        default="1",
        help="Reference tie-break mode passed to the estimation step",
    )
    opts = parser.parse_args()

    if opts.simulate:
        print("\n=== Simulating synthetic community ===")
        run("scripts.simulate_community")

    for name, module in STEPS:
        args = ["--tie-mode", opts.tie_mode] if module.endswith("estimate_error_matrix") else None
        print(f"\n=== {name} ===")
        run(module, args)

    print("\n=== Workflow complete ===")


if __name__ == "__main__":
    main()
