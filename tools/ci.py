#!/usr/bin/env python3
# Copyright 2026 jsonrevive Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the jsonrevive checks locally: format, lint, type check, tests with coverage, and build.

Pass step names to run a subset, e.g. ``tools/ci.py lint tests``.
"""

import argparse
import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: dict[str, list[str]] = {
    "format": ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"],
    "lint": ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"],
    "typecheck": ["uv", "run", "ty", "check", "src/"],
    "tests": ["uv", "run", "pytest", "--cov=jsonrevive", "--cov-report=term-missing"],
    "build": ["uv", "build"],
}


def main() -> int:
    """Run the selected steps and print a summary."""
    parser = argparse.ArgumentParser(prog="ci", description="Run the jsonrevive checks.")
    parser.add_argument("steps", nargs="*", help=f"Steps to run among {', '.join(STEPS)} (default: all)")
    args = parser.parse_args()
    unknown = [name for name in args.steps if name not in STEPS]
    if unknown:
        parser.error(f"unknown step(s): {', '.join(unknown)}")
    selected = args.steps or list(STEPS)

    results: list[tuple[str, int, float]] = []
    for name in selected:
        _banner(name)
        start = time.monotonic()
        proc = subprocess.run(STEPS[name], cwd=_repo_root())
        results.append((name, proc.returncode, time.monotonic() - start))

    _banner("summary")
    for name, returncode, elapsed in results:
        if returncode == 0:
            print(chalk.green(f"  PASS  {name} ({elapsed:.1f}s)"))
        else:
            print(chalk.red(f"  FAIL  {name} ({elapsed:.1f}s, exit code {returncode})"))
    print()
    return 0 if all(returncode == 0 for _, returncode, _ in results) else 1


# ################
# Implementation
# ################


def _banner(title: str) -> None:
    rule = chalk.blue("=" * 60)
    print(f"\n{rule}\n{chalk.blue(title.capitalize())}\n{rule}")


def _repo_root() -> pathlib.Path:
    return pathlib.Path(__file__).resolve().parent.parent


if __name__ == "__main__":
    sys.exit(main())
