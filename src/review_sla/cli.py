"""Command-line argument parsing for the PR review SLA analyzer."""

from __future__ import annotations

import argparse
from datetime import date, datetime
from typing import List, Optional, Sequence

from .config import DEFAULT_MAX_PAGES


def _iso_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` CLI value.

    Raises:
        argparse.ArgumentTypeError: If value is not a valid calendar date.
    """
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a date in YYYY-MM-DD format") from exc


def _positive_int(value: str) -> int:
    """Parse and validate a positive integer CLI value.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")

    return parsed


def _keyword_list(value: str) -> List[str]:
    return [keyword.strip() for keyword in value.split(",") if keyword.strip()]


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-r",
        "--repository",
        help="Target repository, for example 'owner/repo'.",
    )
    parser.add_argument(
        "-u",
        "--reviewer",
        help="GitHub login of the reviewer to analyze.",
    )
    parser.add_argument(
        "-s",
        "--start-date",
        type=_iso_date,
        help="First day of the period (YYYY-MM-DD, inclusive).",
    )
    parser.add_argument(
        "-e",
        "--end-date",
        type=_iso_date,
        help="Last day of the period (YYYY-MM-DD, inclusive).",
    )
    parser.add_argument(
        "-t",
        "--token",
        help="GitHub Personal Access Token (default: GITHUB_TOKEN environment variable).",
    )
    parser.add_argument(
        "--max-pages",
        type=_positive_int,
        default=DEFAULT_MAX_PAGES,
        help=f"Maximum pull request pages to fetch (default: {DEFAULT_MAX_PAGES}).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the structured result as JSON instead of the text report.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Required values are checked later by ``load_config`` so that a missing
    token can still come from the environment.

    Returns:
        Parsed CLI arguments; ``command`` is ``"speed"`` or ``"comments"``.
    """
    parser = argparse.ArgumentParser(
        prog="pr-review-sla",
        description="Measure how quickly a reviewer responds to GitHub pull request review requests.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    speed = subparsers.add_parser(
        "speed",
        help="Rate of reviews completed within the normal (1 day) and design (3 day) deadlines.",
        epilog=(
            "examples:\n"
            "  pr-review-sla speed -r owner/repo -u reviewer -s 2025-06-01 -e 2025-06-30\n"
            "  pr-review-sla speed -r owner/repo -u reviewer -s 2025-06-01 -e 2025-06-30 "
            "-d design,architecture"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_common_arguments(speed)
    speed.add_argument(
        "-d",
        "--design-keywords",
        type=_keyword_list,
        default=[],
        help="Comma-separated keywords marking a design review (case-insensitive).",
    )

    comments = subparsers.add_parser(
        "comments",
        help="Count review comments left by the reviewer on closed pull requests.",
    )
    _add_common_arguments(comments)

    return parser.parse_args(argv)
