"""Entry point and orchestration for the PR review SLA analyzer."""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Optional, Sequence

from .analyzer import analyze_review_speed
from .cli import parse_args
from .comments import collect_review_comments
from .config import load_config
from .errors import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    DataValidationError,
)
from .github_client import GitHubClient
from .report import generate_comment_report, generate_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION = 2
EXIT_AUTHENTICATION = 3
EXIT_API = 4
EXIT_DATA = 5


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging from ``--verbose`` or the ``LOG_LEVEL`` variable."""
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, os.environ.get("LOG_LEVEL", "WARNING").upper(), logging.WARNING)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def orchestrate_analysis(argv: Optional[Sequence[str]] = None) -> int:
    """Run the selected tool end to end and map failures to exit codes.

    Returns:
        ``0`` on success, ``2`` for configuration errors, ``3`` for
        authentication errors, ``4`` for API errors, ``5`` for invalid API
        data, and ``1`` for anything unexpected.
    """
    try:
        args = parse_args(argv)
        configure_logging(args.verbose)

        config = load_config(
            repository=args.repository,
            reviewer=args.reviewer,
            start_date=args.start_date,
            end_date=args.end_date,
            token=args.token,
            design_keywords=getattr(args, "design_keywords", None),
            max_pages=args.max_pages,
        )
        client = GitHubClient(config=config)

        if args.command == "comments":
            summary = collect_review_comments(client, config)
            if args.json:
                print(json.dumps(summary.to_dict(), indent=2))
            else:
                print(generate_comment_report(summary))
        else:
            result = analyze_review_speed(client, config)
            if args.json:
                print(json.dumps(result.to_dict(), indent=2))
            else:
                print(generate_report(result))

        return EXIT_OK
    except ConfigurationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        print("Run 'pr-review-sla <command> --help' for usage.", file=sys.stderr)
        return EXIT_CONFIGURATION
    except AuthenticationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_AUTHENTICATION
    except ApiError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_API
    except DataValidationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_DATA
    except Exception:
        logger.exception("Unexpected failure while running the review SLA analyzer")
        print("ERROR: Unexpected failure; rerun with --verbose for details.", file=sys.stderr)
        return EXIT_UNEXPECTED


def main() -> None:
    """Console script entry point."""
    sys.exit(orchestrate_analysis())


if __name__ == "__main__":
    main()
