"""Tests for configuration loading and validation."""

import sys
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from review_sla.config import expand_date_window, load_config
from review_sla.errors import AuthenticationError, ConfigurationError


@pytest.fixture(autouse=True)
def _no_dotenv():
    with patch("review_sla.config.load_dotenv") as load_dotenv_mock:
        yield load_dotenv_mock


def _load(**overrides):
    values = {
        "repository": "owner/repo",
        "reviewer": "alice",
        "start_date": date(2025, 6, 1),
        "end_date": date(2025, 6, 30),
        "token": "gh-token",
    }
    values.update(overrides)
    return load_config(**values)


def test_load_config_returns_validated_config():
    """Verify valid inputs produce a config with an expanded local-time window."""
    config = _load(design_keywords=[" design ", "", "architecture"])

    assert config.repository == "owner/repo"
    assert config.reviewer == "alice"
    assert config.token == "gh-token"
    assert config.design_keywords == ("design", "architecture")
    assert (config.start.hour, config.start.minute, config.start.second) == (0, 0, 0)
    assert (config.end.hour, config.end.minute, config.end.second) == (23, 59, 59)
    assert config.start.tzinfo is not None


def test_load_config_loads_dotenv_without_override(_no_dotenv):
    """Verify a .env file is consulted without replacing existing variables."""
    _load()

    _no_dotenv.assert_called_once_with(override=False)


def test_load_config_missing_parameters_raises_configuration_error():
    """Verify every missing required value is reported."""
    with pytest.raises(ConfigurationError) as exc_info:
        _load(repository=None, start_date=None)

    assert "repository" in str(exc_info.value)
    assert "start_date" in str(exc_info.value)


def test_load_config_start_after_end_raises_configuration_error():
    """Verify an inverted date window is rejected."""
    with pytest.raises(ConfigurationError):
        _load(start_date=date(2025, 7, 1), end_date=date(2025, 6, 30))


def test_load_config_same_start_and_end_day_is_valid():
    """Verify a single-day window is accepted."""
    config = _load(start_date=date(2025, 6, 1), end_date=date(2025, 6, 1))

    assert config.start < config.end


@pytest.mark.parametrize("repository", ["repo", "owner/", "/repo", "a/b/c"])
def test_load_config_malformed_repository_raises_configuration_error(repository):
    """Verify repositories must be given as owner/name."""
    with pytest.raises(ConfigurationError):
        _load(repository=repository)


def test_load_config_reads_token_from_environment(monkeypatch):
    """Verify GITHUB_TOKEN is used when no token is passed."""
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")

    config = _load(token=None)

    assert config.token == "env-token"


def test_load_config_missing_token_raises_authentication_error(monkeypatch):
    """Verify a missing token is an authentication problem."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)

    with pytest.raises(AuthenticationError):
        _load(token=None)


def test_config_repr_hides_token():
    """Verify the token does not leak into logs through the config repr."""
    assert "gh-token" not in repr(_load())


def test_expand_date_window_is_inclusive_of_both_days():
    """Verify calendar dates expand to the first and last second of their days."""
    start, end = expand_date_window(date(2025, 6, 1), date(2025, 6, 30))

    assert start.date() == date(2025, 6, 1)
    assert end.date() == date(2025, 6, 30)
    assert (end.hour, end.minute, end.second) == (23, 59, 59)
