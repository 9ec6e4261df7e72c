#!/usr/bin/env python3
"""Run the test suite under coverage and enforce a minimum percentage.

Usage:
    python scripts/run_coverage.py [--threshold PERCENT] [--html] [--xml]
                                   [--verbose] [--tests PATH]

Exit Codes:
    0 - Tests passed and coverage threshold met
    1 - Tests failed
    2 - Coverage below threshold
    3 - Missing tooling or unexpected pytest exit
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional


PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_THRESHOLD = 90
DEFAULT_MODULE = "graphbinary"

COMPONENTS = [
    ("graphbinary.serialization.buffer", "Buffer"),
    ("graphbinary.serialization.registry", "Type registry"),
    ("graphbinary.serialization.service", "Writer / reader"),
    ("graphbinary.serialization.builtin", "Leaf codecs"),
    ("graphbinary.serialization.composite", "Composite codecs"),
    ("graphbinary.structure", "Value model"),
    ("graphbinary.config", "Configuration"),
    ("graphbinary.cli", "Inspector CLI"),
]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run pytest with coverage validation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_THRESHOLD,
        help=f"Minimum coverage percentage (default: {DEFAULT_THRESHOLD})",
    )
    parser.add_argument("--html", action="store_true", help="Write an HTML report to htmlcov/")
    parser.add_argument("--xml", action="store_true", help="Write coverage.xml")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="List missing lines and the measured components",
    )
    parser.add_argument(
        "--module",
        default=DEFAULT_MODULE,
        help=f"Package to measure (default: {DEFAULT_MODULE})",
    )
    parser.add_argument("--tests", default="tests/", help="Test path (default: tests/)")
    return parser.parse_args(argv)


def build_pytest_command(args: argparse.Namespace) -> List[str]:
    cmd = [
        sys.executable, "-m", "pytest",
        f"--cov={args.module}",
        f"--cov-fail-under={args.threshold}",
        "--cov-report=term-missing" if args.verbose else "--cov-report=term",
    ]
    if args.html:
        cmd.append("--cov-report=html:htmlcov")
    if args.xml:
        cmd.append("--cov-report=xml:coverage.xml")
    cmd.append(args.tests)
    return cmd


def run_coverage(args: argparse.Namespace) -> int:
    os.chdir(PROJECT_ROOT)
    cmd = build_pytest_command(args)

    print("=" * 70)
    print(f"GRAPHBINARY COVERAGE ({args.module}, threshold {args.threshold}%)")
    print(f"Command: {' '.join(cmd)}")
    print("=" * 70)

    result = subprocess.run(cmd, cwd=PROJECT_ROOT)

    outcomes = {
        0: (0, f"SUCCESS: coverage meets {args.threshold}%"),
        1: (1, "FAILURE: tests failed"),
        2: (2, f"FAILURE: coverage below {args.threshold}%"),
    }
    code, message = outcomes.get(
        result.returncode, (3, f"ERROR: unexpected pytest exit code {result.returncode}")
    )
    print("=" * 70)
    print(message)
    return code


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        import pytest  # noqa: F401
        import pytest_cov  # noqa: F401
    except ImportError as e:
        print(f"ERROR: Required package not installed: {e}")
        print("Install with: pip install -e .[dev]")
        return 3

    if args.verbose:
        for module, description in COMPONENTS:
            print(f"  {description:<20} {module}")

    return run_coverage(args)


if __name__ == "__main__":
    sys.exit(main())
