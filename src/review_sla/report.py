"""Aggregation and formatting helpers for review SLA reporting.

This module provides utilities for:
- Classifying pull requests as design or normal reviews by keyword.
- Aggregating per-category totals, on-time counts, and rates.
- Building human-readable reports for review speed and review comments.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from .models import (
    DESIGN,
    NORMAL,
    AnalysisResult,
    CategoryResult,
    PullRequest,
    ReviewCommentSummary,
    ReviewTiming,
    format_delay,
)
from .timing import round_half_up

TARGET_RATE_PERCENT = 70.0

DEADLINE_DAYS: Dict[str, int] = {
    NORMAL: 1,
    DESIGN: 3,
}

_SEPARATOR = "=" * 50


def is_design_review(pr: PullRequest, keywords: Sequence[str]) -> bool:
    """Return whether any keyword occurs in the PR title or body, ignoring case.

    With no keywords configured every pull request is a normal review.
    """
    if not keywords:
        return False

    title = pr.title.lower()
    body = (pr.body or "").lower()
    return any(keyword.lower() in title or keyword.lower() in body for keyword in keywords)


def compute_category_result(category: str, timings: Sequence[ReviewTiming]) -> CategoryResult:
    """Aggregate review timings for one category.

    The rate is a percentage rounded to one decimal, ``0.0`` when there is
    nothing to measure, and the target is met at exactly 70.0 or above.
    """
    total_count = len(timings)
    on_time_count = sum(1 for timing in timings if timing.on_time)

    if total_count == 0:
        rate_percent = 0.0
    else:
        rate_percent = round_half_up(on_time_count / total_count * 100)

    return CategoryResult(
        category=category,
        deadline_days=DEADLINE_DAYS[category],
        total_count=total_count,
        on_time_count=on_time_count,
        rate_percent=rate_percent,
        target_met=rate_percent >= TARGET_RATE_PERCENT,
        details=list(timings),
    )


def _deadline_label(deadline_days: int) -> str:
    if deadline_days == 1:
        return "same day"
    return f"within {deadline_days} days"


def format_timing_line(timing: ReviewTiming) -> str:
    """Format one per-PR result line."""
    label = _deadline_label(timing.deadline_days)
    status = f"on time ({label})" if timing.on_time else "late"
    delay = format_delay(timing.delay_hours, timing.delay_days)
    return f"PR #{timing.pr_number}: {timing.title} - {status} ({delay} after request)"


def _category_section(title: str, result: CategoryResult) -> List[str]:
    label = _deadline_label(result.deadline_days)
    verdict = "target met" if result.target_met else "target missed"
    lines = [f"--- {title} (reviewed {label} of request) ---"]
    lines.extend(format_timing_line(timing) for timing in result.details)
    lines.extend(
        [
            f"   Pull requests: {result.total_count}",
            f"   Reviewed {label}: {result.on_time_count}",
            f"   Rate: {result.rate_percent}% - {verdict} (target: {TARGET_RATE_PERCENT:.0f}% or more)",
        ]
    )
    return lines


def generate_report(result: AnalysisResult) -> str:
    """Generate a human-readable review speed report.

    The report includes per-PR lines in processing order, a section per
    category, an overall verdict, and suggestions for each missed target.
    """
    lines = [
        "=== PR Review Speed Analysis ===",
        f"Repository: {result.repository}",
        f"Reviewer: {result.reviewer}",
        f"Period: {result.start.isoformat()} - {result.end.isoformat()}",
        f"Pull requests in period: {result.pull_request_count}",
        _SEPARATOR,
        "",
    ]
    lines.extend(_category_section("Normal reviews", result.normal))
    lines.append("")
    lines.extend(_category_section("Design reviews", result.design))

    lines.extend(["", _SEPARATOR, "=== Summary ===", _SEPARATOR])
    for title, category in (("Normal reviews", result.normal), ("Design reviews", result.design)):
        lines.extend(
            [
                f"{title} ({_deadline_label(category.deadline_days)} of request):",
                f"   Rate: {category.rate_percent}% ({category.on_time_count}/{category.total_count})",
                f"   Target met: {'YES' if category.target_met else 'NO'} "
                f"(target: {TARGET_RATE_PERCENT:.0f}% or more)",
            ]
        )

    if result.overall_target_met:
        lines.extend(["", "Overall: both targets met"])
    else:
        lines.extend(["", "Overall: improvement needed", "", "Suggestions:"])
        if not result.normal.target_met:
            lines.append("   - Review normal pull requests on the same day they are requested.")
        if not result.design.target_met:
            lines.append("   - Review design pull requests within 3 days of the request.")

    return "\n".join(lines)


def generate_comment_report(summary: ReviewCommentSummary) -> str:
    """Generate a human-readable review comment count report."""
    lines = [
        "=== PR Review Comment Collection ===",
        f"Repository: {summary.repository}",
        f"Reviewer: {summary.reviewer}",
        f"Period: {summary.start.isoformat()} - {summary.end.isoformat()}",
        "=" * 40,
    ]
    for number, count in summary.per_pull_request.items():
        title = summary.titles.get(number, "")
        lines.append(f"PR #{number}: {title} - {count} comments")

    lines.extend(
        [
            "=" * 40,
            "Results:",
            f"Pull requests reviewed: {summary.pull_request_count}",
            f"Total review comments: {summary.total_comments}",
            f"Average comments per PR: {summary.average_per_pull_request:.2f}",
        ]
    )
    return "\n".join(lines)
