"""Custom exception types for the PR review SLA analyzer."""


class ReviewSlaError(Exception):
    """Base exception for all recoverable review SLA analyzer errors."""


class ConfigurationError(ReviewSlaError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(ReviewSlaError):
    """Raised when GitHub credentials are unavailable or rejected."""


class ApiError(ReviewSlaError):
    """Raised when the GitHub API cannot be used to complete an analysis."""


class PageLimitExceededError(ApiError):
    """Raised when paginated retrieval does not terminate within the page budget."""


class DataValidationError(ReviewSlaError):
    """Raised when API payloads do not meet expected constraints."""
