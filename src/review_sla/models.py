"""Domain models for GitHub review SLA analysis.

These dataclasses intentionally model only the subset of API payload fields that
are required for review timing and comment counting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

NORMAL = "normal"
DESIGN = "design"

REVIEW_REQUESTED = "review_requested"


def format_delay(delay_hours: float, delay_days: float) -> str:
    """Format a review delay for display: hours below one day, days otherwise."""
    if delay_hours < 24:
        return f"{delay_hours} hours"
    return f"{delay_days} days"


@dataclass(frozen=True)
class PullRequest:
    """Represents an immutable pull request snapshot fetched once per run."""

    number: int
    title: str
    body: Optional[str]
    author: str
    created_at: datetime
    updated_at: datetime
    state: str
    repository_full_name: str


@dataclass(frozen=True)
class Review:
    """Represents one review submitted (or pending) on a pull request."""

    reviewer: str
    submitted_at: Optional[datetime]
    body: str
    state: str


@dataclass(frozen=True)
class ReviewRequestEvent:
    """Represents an issue timeline event, usually a review request."""

    event_type: str
    requested_reviewer: Optional[str]
    created_at: datetime

    def requests(self, reviewer: str) -> bool:
        """Return whether this event asked ``reviewer`` to review."""
        return self.event_type == REVIEW_REQUESTED and self.requested_reviewer == reviewer


@dataclass(frozen=True)
class ReviewComment:
    """Represents an inline code review comment."""

    author: str
    body: str


@dataclass
class FetchResult:
    """Outcome of a single API call.

    ``ok`` is ``False`` when the call failed (HTTP error, transport failure or
    invalid JSON). Callers that only need data use :attr:`payload`, which is an
    empty collection on failure so that "failed" and "confirmed empty" behave
    the same downstream.
    """

    ok: bool
    data: Any = None
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def payload(self) -> Any:
        if not self.ok or self.data is None:
            return []
        return self.data


@dataclass(frozen=True)
class ReviewTiming:
    """Represents one PR-level review response measurement."""

    pr_number: int
    title: str
    requested_at: datetime
    first_reviewed_at: datetime
    delay_hours: float
    delay_days: float
    on_time: bool
    category: str
    deadline_days: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pr_number": self.pr_number,
            "title": self.title,
            "requested_at": self.requested_at.isoformat(),
            "first_reviewed_at": self.first_reviewed_at.isoformat(),
            "delay_hours": self.delay_hours,
            "delay_days": self.delay_days,
            "on_time": self.on_time,
            "category": self.category,
            "deadline_days": self.deadline_days,
            "review_time": format_delay(self.delay_hours, self.delay_days),
        }


@dataclass
class CategoryResult:
    """Represents aggregated on-time statistics for one review category."""

    category: str
    deadline_days: int
    total_count: int
    on_time_count: int
    rate_percent: float
    target_met: bool
    details: List[ReviewTiming] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "deadline_days": self.deadline_days,
            "total_count": self.total_count,
            "on_time_count": self.on_time_count,
            "rate_percent": self.rate_percent,
            "target_met": self.target_met,
            "details": [timing.to_dict() for timing in self.details],
        }


@dataclass
class AnalysisResult:
    """Represents the full review speed analysis for one reviewer and window."""

    repository: str
    reviewer: str
    start: datetime
    end: datetime
    pull_request_count: int
    normal: CategoryResult
    design: CategoryResult

    @property
    def overall_target_met(self) -> bool:
        return self.normal.target_met and self.design.target_met

    def to_dict(self) -> Dict[str, Any]:
        return {
            "repository": self.repository,
            "reviewer": self.reviewer,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "pull_request_count": self.pull_request_count,
            "normal": self.normal.to_dict(),
            "design": self.design.to_dict(),
            "overall_target_met": self.overall_target_met,
        }


@dataclass
class ReviewCommentSummary:
    """Represents review comment counts for the pull requests a reviewer reviewed."""

    repository: str
    reviewer: str
    start: datetime
    end: datetime
    pull_request_count: int = 0
    total_comments: int = 0
    per_pull_request: Dict[int, int] = field(default_factory=dict)
    titles: Dict[int, str] = field(default_factory=dict)

    @property
    def average_per_pull_request(self) -> float:
        if self.pull_request_count == 0:
            return 0.0
        return self.total_comments / self.pull_request_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "repository": self.repository,
            "reviewer": self.reviewer,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "pull_request_count": self.pull_request_count,
            "total_comments": self.total_comments,
            "average_per_pull_request": round(self.average_per_pull_request, 2),
            "per_pull_request": {str(number): count for number, count in self.per_pull_request.items()},
        }
