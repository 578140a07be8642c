"""Helper script to run the ROI calculator and write every artifact."""
from __future__ import annotations

import argparse

from layoutroi.cli import main


def _parse_args(argv: list[str] | None = None) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(description="Run the layout ROI calculator")
    parser.add_argument(
        "--full-report",
        action="store_true",
        help="Write the workbook, CSV, JSON and charts in one pass.",
    )
    return parser.parse_known_args(argv)


if __name__ == "__main__":  # pragma: no cover
    args, remaining = _parse_args()
    forward_args: list[str] = list(remaining)
    if args.full_report:
        forward_args.extend(["--export", "--charts"])
    raise SystemExit(main(forward_args))
