"""Tests for application orchestration in the main module."""

import json
import sys
from argparse import Namespace
from datetime import date, datetime, timezone
from pathlib import Path
from unittest.mock import Mock, patch

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from review_sla.config import Config
from review_sla.errors import (
    AuthenticationError,
    ConfigurationError,
    DataValidationError,
    PageLimitExceededError,
)
from review_sla.main import orchestrate_analysis


def _args(command: str = "speed", as_json: bool = False) -> Namespace:
    args = Namespace(
        command=command,
        repository="owner/repo",
        reviewer="alice",
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 30),
        token=None,
        max_pages=50,
        json=as_json,
        verbose=False,
    )
    if command == "speed":
        args.design_keywords = ["design"]
    return args


def _config() -> Config:
    return Config(
        repository="owner/repo",
        reviewer="alice",
        start=datetime(2025, 6, 1, tzinfo=timezone.utc),
        end=datetime(2025, 6, 30, 23, 59, 59, tzinfo=timezone.utc),
        token="secret",
        design_keywords=("design",),
    )


def test_orchestrate_analysis_speed_success(capsys):
    """Verify orchestration returns 0 and wires components correctly on success."""
    config = _config()
    client = Mock()
    result = Mock()

    with patch("review_sla.main.parse_args", return_value=_args()) as parse_args_mock, patch(
        "review_sla.main.load_config", return_value=config
    ) as load_config_mock, patch(
        "review_sla.main.GitHubClient", return_value=client
    ) as client_ctor_mock, patch(
        "review_sla.main.analyze_review_speed", return_value=result
    ) as analyze_mock, patch(
        "review_sla.main.generate_report", return_value="REPORT"
    ) as report_mock:
        exit_code = orchestrate_analysis(["speed"])

    assert exit_code == 0
    parse_args_mock.assert_called_once_with(["speed"])
    load_config_mock.assert_called_once_with(
        repository="owner/repo",
        reviewer="alice",
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 30),
        token=None,
        design_keywords=["design"],
        max_pages=50,
    )
    client_ctor_mock.assert_called_once_with(config=config)
    analyze_mock.assert_called_once_with(client, config)
    report_mock.assert_called_once_with(result)
    assert "REPORT" in capsys.readouterr().out


def test_orchestrate_analysis_speed_json_output(capsys):
    """Verify --json prints the structured result instead of the text report."""
    result = Mock()
    result.to_dict.return_value = {"overall_target_met": False}

    with patch("review_sla.main.parse_args", return_value=_args(as_json=True)), patch(
        "review_sla.main.load_config", return_value=_config()
    ), patch("review_sla.main.GitHubClient"), patch(
        "review_sla.main.analyze_review_speed", return_value=result
    ):
        exit_code = orchestrate_analysis()

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == {"overall_target_met": False}


def test_orchestrate_analysis_comments_runs_collector(capsys):
    """Verify the comments command runs the comment collector and its report."""
    summary = Mock()

    with patch("review_sla.main.parse_args", return_value=_args(command="comments")), patch(
        "review_sla.main.load_config", return_value=_config()
    ) as load_config_mock, patch("review_sla.main.GitHubClient"), patch(
        "review_sla.main.collect_review_comments", return_value=summary
    ) as collect_mock, patch(
        "review_sla.main.generate_comment_report", return_value="COMMENTS"
    ), patch("review_sla.main.analyze_review_speed") as analyze_mock:
        exit_code = orchestrate_analysis()

    assert exit_code == 0
    assert load_config_mock.call_args.kwargs["design_keywords"] is None
    collect_mock.assert_called_once()
    analyze_mock.assert_not_called()
    assert "COMMENTS" in capsys.readouterr().out


def test_orchestrate_analysis_configuration_error_returns_config_exit_code(capsys):
    """Verify configuration failures exit before any client is created."""
    with patch("review_sla.main.parse_args", return_value=_args()), patch(
        "review_sla.main.load_config",
        side_effect=ConfigurationError("Start date must not be after end date."),
    ), patch("review_sla.main.GitHubClient") as client_ctor_mock:
        exit_code = orchestrate_analysis()

    assert exit_code == 2
    client_ctor_mock.assert_not_called()
    assert "Start date must not be after end date." in capsys.readouterr().err


def test_orchestrate_analysis_invalid_token_returns_auth_exit_code():
    """Verify authentication failures return the authentication exit code."""
    with patch("review_sla.main.parse_args", return_value=_args()), patch(
        "review_sla.main.load_config", return_value=_config()
    ), patch("review_sla.main.GitHubClient"), patch(
        "review_sla.main.analyze_review_speed",
        side_effect=AuthenticationError("GitHub Personal Access Token is invalid."),
    ):
        exit_code = orchestrate_analysis()

    assert exit_code == 3


def test_orchestrate_analysis_page_limit_returns_api_exit_code():
    """Verify runaway pagination returns the API error exit code."""
    with patch("review_sla.main.parse_args", return_value=_args()), patch(
        "review_sla.main.load_config", return_value=_config()
    ), patch("review_sla.main.GitHubClient"), patch(
        "review_sla.main.analyze_review_speed",
        side_effect=PageLimitExceededError("too many pages"),
    ):
        exit_code = orchestrate_analysis()

    assert exit_code == 4


def test_orchestrate_analysis_bad_payload_returns_data_exit_code():
    """Verify undecodable pull request payloads return the data error exit code."""
    with patch("review_sla.main.parse_args", return_value=_args()), patch(
        "review_sla.main.load_config", return_value=_config()
    ), patch("review_sla.main.GitHubClient"), patch(
        "review_sla.main.analyze_review_speed",
        side_effect=DataValidationError("missing fields"),
    ):
        exit_code = orchestrate_analysis()

    assert exit_code == 5


def test_orchestrate_analysis_unexpected_error_returns_generic_exit_code():
    """Verify unexpected exceptions are mapped to the generic non-zero exit code."""
    with patch("review_sla.main.parse_args", side_effect=RuntimeError("boom")):
        exit_code = orchestrate_analysis()

    assert exit_code == 1
