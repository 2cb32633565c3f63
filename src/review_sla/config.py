"""Configuration parsing and validation for the PR review SLA analyzer."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from .errors import AuthenticationError, ConfigurationError

DEFAULT_MAX_PAGES = 50


@dataclass(frozen=True)
class Config:
    """Validated runtime settings threaded through every component."""

    repository: str
    reviewer: str
    start: datetime
    end: datetime
    token: str = field(repr=False)
    design_keywords: Tuple[str, ...] = ()
    max_pages: int = DEFAULT_MAX_PAGES


def expand_date_window(start_date: date, end_date: date) -> Tuple[datetime, datetime]:
    """Expand inclusive calendar dates to local ``00:00:00`` and ``23:59:59`` bounds."""
    start = datetime.combine(start_date, time(0, 0, 0)).astimezone()
    end = datetime.combine(end_date, time(23, 59, 59)).astimezone()
    return start, end


def normalize_keywords(keywords: Optional[Sequence[str]]) -> Tuple[str, ...]:
    """Strip blank entries from a keyword list, preserving order."""
    if not keywords:
        return ()
    return tuple(keyword.strip() for keyword in keywords if keyword and keyword.strip())


def load_config(
    repository: Optional[str],
    reviewer: Optional[str],
    start_date: Optional[date],
    end_date: Optional[date],
    token: Optional[str] = None,
    design_keywords: Optional[Sequence[str]] = None,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> Config:
    """Build and validate application configuration.

    A ``.env`` file in the working directory is loaded first; variables that
    are already set in the environment take precedence over it.

    Args:
        repository: Repository in ``owner/name`` form.
        reviewer: GitHub login of the reviewer to measure.
        start_date: First calendar day of the window (inclusive).
        end_date: Last calendar day of the window (inclusive).
        token: Personal access token; falls back to ``GITHUB_TOKEN``.
        design_keywords: Optional case-insensitive design review keywords.
        max_pages: Upper bound on pull request pages fetched per run.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If a required value is missing, the repository is
            not ``owner/name``, or the start date is after the end date.
        AuthenticationError: If no token is configured.
    """
    load_dotenv(override=False)

    required = {
        "repository": repository,
        "reviewer": reviewer,
        "start_date": start_date,
        "end_date": end_date,
    }
    missing: List[str] = [name for name, value in required.items() if value in (None, "")]
    if missing:
        raise ConfigurationError(f"Missing required parameters: {', '.join(missing)}")

    owner, _, name = repository.strip().partition("/")
    if not owner or not name or "/" in name:
        raise ConfigurationError(
            f"Invalid repository '{repository}': expected the form 'owner/name'."
        )

    if start_date > end_date:
        raise ConfigurationError("Start date must not be after end date.")

    if max_pages <= 0:
        raise ConfigurationError("Invalid value for 'max_pages': expected an integer greater than 0.")

    resolved_token = (token or os.getenv("GITHUB_TOKEN", "")).strip()
    if not resolved_token:
        raise AuthenticationError(
            "Missing required GitHub Personal Access Token. "
            "Pass --token or set the 'GITHUB_TOKEN' environment variable."
        )

    start, end = expand_date_window(start_date, end_date)

    return Config(
        repository=repository.strip(),
        reviewer=reviewer.strip(),
        start=start,
        end=end,
        token=resolved_token,
        design_keywords=normalize_keywords(design_keywords),
        max_pages=max_pages,
    )
