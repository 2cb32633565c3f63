"""GitHub REST API client for review SLA data retrieval."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from .config import DEFAULT_MAX_PAGES, Config
from .errors import DataValidationError, PageLimitExceededError
from .models import FetchResult, PullRequest, Review, ReviewComment, ReviewRequestEvent

logger = logging.getLogger(__name__)

_STATUS_REASONS = {
    401: "authentication failed; check the GitHub Personal Access Token",
    403: "rate limit exceeded or access forbidden",
    404: "resource not found; check the repository name",
}


class GitHubClient:
    """Small, typed client for the GitHub pull request APIs."""

    BASE_URL = "https://api.github.com"
    USER_AGENT = "PR-Review-SLA-Analyzer"
    _PAGE_SIZE = 100
    _SORT_FIELDS = {"created": "created_at", "updated": "updated_at"}

    def __init__(self, config: Config, timeout_seconds: int = 30) -> None:
        """Initialize an authenticated GitHub API client.

        Args:
            config: Validated runtime configuration including the token.
            timeout_seconds: Per-request timeout in seconds.
        """
        self._config = config
        self._timeout_seconds = timeout_seconds

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"token {config.token}",
                "Accept": "application/vnd.github.v3+json",
                "User-Agent": self.USER_AGENT,
            }
        )

    def _build_url(self, path: str) -> str:
        """Build a fully qualified API URL from an endpoint path."""
        return f"{self.BASE_URL}/{path.lstrip('/')}"

    @staticmethod
    def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
        """Parse GitHub ISO8601 timestamps into timezone-aware datetimes.

        Raises:
            DataValidationError: If ``value`` is not an ISO8601 timestamp.
        """
        if not value:
            return None

        normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
        try:
            parsed = datetime.fromisoformat(normalized)
        except (TypeError, ValueError) as exc:
            raise DataValidationError(f"Invalid GitHub timestamp: {value!r}") from exc
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> FetchResult:
        """Execute a single GET request and tag the outcome.

        Never raises for HTTP, transport or decoding failures; those produce a
        ``FetchResult`` with ``ok=False``. No retries are attempted.
        """
        url = self._build_url(path)

        try:
            response = self._session.get(url, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            return FetchResult(ok=False, error=f"request failed: {exc}")

        status_code = response.status_code
        if status_code != 200:
            reason = _STATUS_REASONS.get(status_code, response.text)
            return FetchResult(ok=False, status_code=status_code, error=f"HTTP {status_code}: {reason}")

        try:
            payload = response.json()
        except ValueError:
            return FetchResult(ok=False, status_code=status_code, error="invalid JSON in response body")

        return FetchResult(ok=True, data=payload, status_code=status_code)

    def request(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET ``path`` and return decoded JSON, or an empty collection on failure.

        A failed call is reported as a warning and then treated by callers as
        "no further data".
        """
        result = self._get_json(path, params)
        if not result.ok:
            logger.warning(
                "GitHub API call to %s failed (%s); treating as empty",
                path,
                result.error,
                extra={"path": path, "status_code": result.status_code},
            )
        return result.payload

    def validate_token(self) -> bool:
        """Return whether the configured token authenticates as a GitHub user."""
        try:
            user = self.request("/user")
        except Exception as exc:
            logger.error("Token validation failed: %s", exc)
            return False

        return isinstance(user, dict) and bool(user) and "login" in user

    def _decode_pull_request(self, item: Dict[str, Any]) -> PullRequest:
        """Decode one pull request payload.

        Raises:
            DataValidationError: If required fields are missing or malformed.
        """
        number = item.get("number")
        title = item.get("title")
        author = (item.get("user") or {}).get("login")
        created_at = self._parse_datetime(item.get("created_at"))
        updated_at = self._parse_datetime(item.get("updated_at"))
        repository = (((item.get("base") or {}).get("repo")) or {}).get("full_name")

        if number is None or title is None or not author or created_at is None or updated_at is None:
            raise DataValidationError(
                f"GitHub pull request payload is missing required fields: payload={item}"
            )

        state = "merged" if item.get("merged_at") else str(item.get("state") or "open")

        return PullRequest(
            number=int(number),
            title=str(title),
            body=item.get("body"),
            author=str(author),
            created_at=created_at,
            updated_at=updated_at,
            state=state,
            repository_full_name=str(repository or self._config.repository),
        )

    def list_pull_requests_page(
        self,
        repository: str,
        page: int,
        sort: str = "created",
        state: str = "all",
    ) -> List[PullRequest]:
        """Fetch one page of pull requests in descending ``sort`` order."""
        payload = self.request(
            f"/repos/{repository}/pulls",
            {
                "state": state,
                "sort": sort,
                "direction": "desc",
                "page": page,
                "per_page": self._PAGE_SIZE,
            },
        )
        if not isinstance(payload, list):
            return []
        return [self._decode_pull_request(item) for item in payload]

    def list_pull_requests_in_window(
        self,
        repository: str,
        start: datetime,
        end: datetime,
        sort: str = "created",
        state: str = "all",
        max_pages: int = DEFAULT_MAX_PAGES,
    ) -> List[PullRequest]:
        """List pull requests whose ``sort`` timestamp falls in ``[start, end]``.

        Pages are requested newest first. Retrieval stops at the first empty
        page, or once the oldest item of a page is earlier than ``start``; this
        relies on the API returning pages in strictly descending order, and an
        unsorted page may cause in-window items beyond it to be missed.

        Raises:
            PageLimitExceededError: If more than ``max_pages`` pages would be needed.
        """
        if sort not in self._SORT_FIELDS:
            raise ValueError(f"Unsupported sort field '{sort}'.")
        timestamp_field = self._SORT_FIELDS[sort]

        pull_requests: List[PullRequest] = []

        for page in range(1, max_pages + 1):
            page_items = self.list_pull_requests_page(repository, page, sort=sort, state=state)
            if not page_items:
                return pull_requests

            in_window = [
                pr for pr in page_items if start <= getattr(pr, timestamp_field) <= end
            ]
            pull_requests.extend(in_window)

            logger.debug(
                "Fetched pull request page",
                extra={"page": page, "items": len(page_items), "in_window": len(in_window)},
            )

            if getattr(page_items[-1], timestamp_field) < start:
                return pull_requests

        raise PageLimitExceededError(
            f"Pull request listing for '{repository}' did not reach the window start "
            f"within {max_pages} pages."
        )

    def list_reviews(self, repository: str, pr_number: int) -> List[Review]:
        """List reviews for a pull request (first 100 only; not paginated further)."""
        payload = self.request(
            f"/repos/{repository}/pulls/{pr_number}/reviews",
            {"per_page": self._PAGE_SIZE},
        )
        reviews: List[Review] = []

        for item in payload if isinstance(payload, list) else []:
            reviewer = (item.get("user") or {}).get("login")
            if not reviewer:
                logger.debug("Skipping review without author on PR #%s", pr_number)
                continue

            try:
                submitted_at = self._parse_datetime(item.get("submitted_at"))
            except DataValidationError as exc:
                logger.debug("Skipping malformed review on PR #%s: %s", pr_number, exc)
                continue

            reviews.append(
                Review(
                    reviewer=str(reviewer),
                    submitted_at=submitted_at,
                    body=item.get("body") or "",
                    state=str(item.get("state") or ""),
                )
            )

        return reviews

    def list_issue_events(self, repository: str, pr_number: int) -> List[ReviewRequestEvent]:
        """List timeline events for a pull request's issue (first 100 only; not paginated further)."""
        payload = self.request(
            f"/repos/{repository}/issues/{pr_number}/events",
            {"per_page": self._PAGE_SIZE},
        )
        events: List[ReviewRequestEvent] = []

        for item in payload if isinstance(payload, list) else []:
            event_type = item.get("event")
            try:
                created_at = self._parse_datetime(item.get("created_at"))
            except DataValidationError as exc:
                logger.debug("Skipping malformed issue event on PR #%s: %s", pr_number, exc)
                continue
            if not event_type or created_at is None:
                logger.debug("Skipping incomplete issue event on PR #%s", pr_number)
                continue

            requested = (item.get("requested_reviewer") or {}).get("login")
            events.append(
                ReviewRequestEvent(
                    event_type=str(event_type),
                    requested_reviewer=str(requested) if requested else None,
                    created_at=created_at,
                )
            )

        return events

    def list_review_comments(self, repository: str, pr_number: int) -> List[ReviewComment]:
        """List inline review comments for a pull request (first 100 only; not paginated further)."""
        payload = self.request(
            f"/repos/{repository}/pulls/{pr_number}/comments",
            {"per_page": self._PAGE_SIZE},
        )
        comments: List[ReviewComment] = []

        for item in payload if isinstance(payload, list) else []:
            author = (item.get("user") or {}).get("login")
            if not author:
                continue
            comments.append(ReviewComment(author=str(author), body=item.get("body") or ""))

        return comments
