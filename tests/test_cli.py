"""Tests for command-line argument parsing."""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from review_sla.cli import parse_args


def test_parse_args_speed_with_valid_arguments():
    """Verify speed parsing succeeds when all arguments are provided."""
    args = parse_args(
        [
            "speed",
            "--repository",
            "owner/repo",
            "--reviewer",
            "alice",
            "--start-date",
            "2025-06-01",
            "--end-date",
            "2025-06-30",
            "--token",
            "gh-token",
            "--design-keywords",
            "design, architecture,,",
        ]
    )

    assert args.command == "speed"
    assert args.repository == "owner/repo"
    assert args.reviewer == "alice"
    assert args.start_date == date(2025, 6, 1)
    assert args.end_date == date(2025, 6, 30)
    assert args.token == "gh-token"
    assert args.design_keywords == ["design", "architecture"]
    assert args.json is False
    assert args.max_pages == 50


def test_parse_args_speed_short_options_and_defaults():
    """Verify short options work and keywords default to an empty list."""
    args = parse_args(["speed", "-r", "owner/repo", "-u", "alice", "-s", "2025-06-01", "-e", "2025-06-30"])

    assert args.repository == "owner/repo"
    assert args.token is None
    assert args.design_keywords == []


def test_parse_args_comments_subcommand():
    """Verify the comment collector accepts the shared options."""
    args = parse_args(
        ["comments", "-r", "owner/repo", "-u", "alice", "-s", "2025-06-01", "-e", "2025-06-30", "--json"]
    )

    assert args.command == "comments"
    assert args.json is True
    assert not hasattr(args, "design_keywords")


def test_parse_args_with_invalid_date_fails_validation():
    """Verify CLI parsing exits with an error for malformed dates."""
    with pytest.raises(SystemExit):
        parse_args(["speed", "-s", "2025/06/01"])


def test_parse_args_with_non_positive_max_pages_fails_validation():
    """Verify CLI parsing exits with an error when --max-pages is not positive."""
    with pytest.raises(SystemExit):
        parse_args(["speed", "--max-pages", "0"])


def test_parse_args_without_command_fails():
    """Verify a subcommand is required."""
    with pytest.raises(SystemExit):
        parse_args([])
