"""Review comment counting for pull requests a reviewer reviewed."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .analyzer import ensure_valid_token
from .config import Config
from .github_client import GitHubClient
from .models import Review, ReviewCommentSummary
from .timing import PullRequestActivity, is_reviewer_involved

logger = logging.getLogger(__name__)


def count_review_comments(
    client: GitHubClient,
    repository: str,
    pr_number: int,
    reviewer: str,
    reviews: Optional[Sequence[Review]] = None,
) -> int:
    """Count the reviewer's substantive comments on a pull request.

    Business logic:
    - Inline review comments by the reviewer with a non-blank body count.
    - Submitted reviews by the reviewer with a non-blank body count, except
      approvals.

    Already fetched ``reviews`` may be passed to avoid requesting them again.
    """
    comment_count = 0

    for comment in client.list_review_comments(repository, pr_number):
        if comment.author == reviewer and comment.body.strip():
            comment_count += 1

    if reviews is None:
        reviews = client.list_reviews(repository, pr_number)

    for review in reviews:
        if review.reviewer == reviewer and review.body.strip() and review.state != "APPROVED":
            comment_count += 1

    return comment_count


def collect_review_comments(client: GitHubClient, config: Config) -> ReviewCommentSummary:
    """Count review comments on closed pull requests updated in the window.

    Only pull requests the reviewer submitted a review on are counted; the
    author is never counted as a reviewer of their own pull request.
    """
    ensure_valid_token(client)

    prs = client.list_pull_requests_in_window(
        config.repository,
        config.start,
        config.end,
        sort="updated",
        state="closed",
        max_pages=config.max_pages,
    )

    summary = ReviewCommentSummary(
        repository=config.repository,
        reviewer=config.reviewer,
        start=config.start,
        end=config.end,
    )

    for pr in prs:
        activity = PullRequestActivity(client, pr)
        if not is_reviewer_involved(activity, config.reviewer, include_requests=False):
            continue

        count = count_review_comments(
            client,
            config.repository,
            pr.number,
            config.reviewer,
            reviews=activity.reviews,
        )
        summary.pull_request_count += 1
        summary.total_comments += count
        summary.per_pull_request[pr.number] = count
        summary.titles[pr.number] = pr.title

    logger.info(
        "Collected review comments",
        extra={
            "repository": config.repository,
            "prs_in_window": len(prs),
            "prs_reviewed": summary.pull_request_count,
            "total_comments": summary.total_comments,
        },
    )

    return summary
