"""Review speed analysis for a single reviewer over a date window.

This module wires the client and timing logic together:
- fetch pull requests created in the window
- keep those the reviewer was involved in
- split them into design and normal reviews
- measure each against its category deadline and aggregate the results
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from .config import Config
from .errors import AuthenticationError
from .github_client import GitHubClient
from .models import DESIGN, NORMAL, AnalysisResult, CategoryResult, PullRequest, ReviewTiming
from .report import DEADLINE_DAYS, compute_category_result, is_design_review
from .timing import PullRequestActivity, analyze_pr_review_timing, is_reviewer_involved

logger = logging.getLogger(__name__)


def ensure_valid_token(client: GitHubClient) -> None:
    """Raise ``AuthenticationError`` unless the client's token is accepted."""
    if not client.validate_token():
        raise AuthenticationError(
            "GitHub Personal Access Token is invalid. Check the token and run again."
        )


def analyze_category(
    activities: Sequence[PullRequestActivity],
    reviewer: str,
    category: str,
) -> CategoryResult:
    """Measure every pull request of one category against its deadline.

    Pull requests without a derivable clock start or without a submitted review
    are excluded from the counts rather than counted as late.
    """
    deadline_days = DEADLINE_DAYS[category]
    timings: List[ReviewTiming] = []
    excluded = 0

    for activity in activities:
        timing = analyze_pr_review_timing(activity, reviewer, category, deadline_days)
        if timing is None:
            excluded += 1
            continue
        timings.append(timing)

    result = compute_category_result(category, timings)

    logger.info(
        "Analyzed review category",
        extra={
            "category": category,
            "prs_total": len(activities),
            "measured": result.total_count,
            "on_time": result.on_time_count,
            "excluded": excluded,
        },
    )

    return result


def analyze_review_speed(client: GitHubClient, config: Config) -> AnalysisResult:
    """Run the full review speed analysis described by ``config``.

    Raises:
        AuthenticationError: If the token is rejected; no partial result is produced.
        PageLimitExceededError: If pagination does not reach the window start.
    """
    ensure_valid_token(client)

    prs: List[PullRequest] = client.list_pull_requests_in_window(
        config.repository,
        config.start,
        config.end,
        sort="created",
        state="all",
        max_pages=config.max_pages,
    )

    normal_activities: List[PullRequestActivity] = []
    design_activities: List[PullRequestActivity] = []

    for pr in prs:
        activity = PullRequestActivity(client, pr)
        if not is_reviewer_involved(activity, config.reviewer):
            continue
        if is_design_review(pr, config.design_keywords):
            design_activities.append(activity)
        else:
            normal_activities.append(activity)

    logger.info(
        "Resolved reviewer involvement",
        extra={
            "repository": config.repository,
            "prs_in_window": len(prs),
            "normal": len(normal_activities),
            "design": len(design_activities),
        },
    )

    normal = analyze_category(normal_activities, config.reviewer, NORMAL)
    design = analyze_category(design_activities, config.reviewer, DESIGN)

    return AnalysisResult(
        repository=config.repository,
        reviewer=config.reviewer,
        start=config.start,
        end=config.end,
        pull_request_count=len(prs),
        normal=normal,
        design=design,
    )
