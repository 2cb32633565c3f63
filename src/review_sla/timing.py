"""Review timing logic for reviewer response SLA metrics.

This module decides, per pull request and reviewer:
- whether the reviewer was involved at all (requested or reviewed)
- when the review clock started (first request, or PR creation as a fallback)
- how long the first submitted review took, and whether it met the deadline
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence

from .github_client import GitHubClient
from .models import PullRequest, Review, ReviewRequestEvent, ReviewTiming

logger = logging.getLogger(__name__)


class PullRequestActivity:
    """Lazily fetched request events and reviews for one pull request.

    Each sub-resource is requested at most once, and only when first needed.
    """

    def __init__(self, client: GitHubClient, pr: PullRequest) -> None:
        self._client = client
        self.pr = pr
        self._events: Optional[List[ReviewRequestEvent]] = None
        self._reviews: Optional[List[Review]] = None

    @property
    def events(self) -> List[ReviewRequestEvent]:
        if self._events is None:
            self._events = self._client.list_issue_events(
                self.pr.repository_full_name, self.pr.number
            )
        return self._events

    @property
    def reviews(self) -> List[Review]:
        if self._reviews is None:
            self._reviews = self._client.list_reviews(self.pr.repository_full_name, self.pr.number)
        return self._reviews

    def request_events_for(self, reviewer: str) -> List[ReviewRequestEvent]:
        return [event for event in self.events if event.requests(reviewer)]

    def reviews_by(self, reviewer: str) -> List[Review]:
        return [review for review in self.reviews if review.reviewer == reviewer]


def round_half_up(value: float, digits: int = 1) -> float:
    """Round ``value`` to ``digits`` decimals, halves away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def is_reviewer_involved(
    activity: PullRequestActivity,
    reviewer: str,
    include_requests: bool = True,
) -> bool:
    """Return whether ``reviewer`` took part in reviewing the pull request.

    Business logic, evaluated in order:
    - The PR author is never their own reviewer (no API calls are made).
    - A ``review_requested`` event naming the reviewer means involvement.
    - Otherwise, any review authored by the reviewer means involvement.

    ``include_requests=False`` skips the request event lookup and decides on
    submitted reviews alone.
    """
    if activity.pr.author == reviewer:
        return False

    if include_requests and activity.request_events_for(reviewer):
        return True

    return bool(activity.reviews_by(reviewer))


def resolve_clock_start(activity: PullRequestActivity, reviewer: str) -> Optional[datetime]:
    """Return the timestamp the review clock starts from, if one can be derived.

    The earliest matching review request wins, even if the reviewer was asked
    again later. Without any request event, a review by the reviewer implies an
    unrecorded request, and the PR creation time is used instead. Returns
    ``None`` when neither exists.
    """
    requests_for_reviewer = activity.request_events_for(reviewer)
    if requests_for_reviewer:
        return min(event.created_at for event in requests_for_reviewer)

    if activity.reviews_by(reviewer):
        logger.debug(
            "No review request event found; using PR creation time as clock start",
            extra={"pr_number": activity.pr.number, "reviewer": reviewer},
        )
        return activity.pr.created_at

    return None


def first_review_time(reviews: Sequence[Review], reviewer: str) -> Optional[datetime]:
    """Return the earliest submission time among ``reviewer``'s reviews."""
    submitted = [
        review.submitted_at
        for review in reviews
        if review.reviewer == reviewer and review.submitted_at is not None
    ]
    if not submitted:
        return None
    return min(submitted)


def classify_review_timing(
    pr: PullRequest,
    clock_start: datetime,
    reviews: Sequence[Review],
    reviewer: str,
    category: str,
    deadline_days: int,
) -> Optional[ReviewTiming]:
    """Measure the reviewer's first response against ``deadline_days``.

    Hours are rounded to one decimal first, and days are derived from the
    rounded hours and rounded again; the on-time check uses the rounded days.
    A first review earlier than ``clock_start`` yields a negative delay, which
    is kept and counts as on time.

    Returns ``None`` when the reviewer has no submitted review.
    """
    first_reviewed_at = first_review_time(reviews, reviewer)
    if first_reviewed_at is None:
        return None

    elapsed_seconds = (first_reviewed_at - clock_start).total_seconds()
    delay_hours = round_half_up(elapsed_seconds / 3600)
    delay_days = round_half_up(delay_hours / 24)

    if delay_hours < 0:
        logger.debug(
            "First review precedes clock start",
            extra={"pr_number": pr.number, "delay_hours": delay_hours},
        )

    return ReviewTiming(
        pr_number=pr.number,
        title=pr.title,
        requested_at=clock_start,
        first_reviewed_at=first_reviewed_at,
        delay_hours=delay_hours,
        delay_days=delay_days,
        on_time=delay_days <= deadline_days,
        category=category,
        deadline_days=deadline_days,
    )


def analyze_pr_review_timing(
    activity: PullRequestActivity,
    reviewer: str,
    category: str,
    deadline_days: int,
) -> Optional[ReviewTiming]:
    """Resolve clock start and classify timing for one involved pull request."""
    clock_start = resolve_clock_start(activity, reviewer)
    if clock_start is None:
        return None

    return classify_review_timing(
        pr=activity.pr,
        clock_start=clock_start,
        reviews=activity.reviews,
        reviewer=reviewer,
        category=category,
        deadline_days=deadline_days,
    )
