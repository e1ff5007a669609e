"""Exception hierarchy for review coverage runs.

Each category maps to a distinct CLI exit code (see cli/review_coverage.py).
"""


class ReviewCoverageError(Exception):
    """Base class for all review-coverage failures."""


class ConfigError(ReviewCoverageError):
    """Required configuration (token, org) is missing or invalid."""


class AuthorizationError(ReviewCoverageError):
    """Token rejected or lacking scopes. Never retried."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class RateLimitError(ReviewCoverageError):
    """Provider rate limit hit; `reset_at` is a unix timestamp."""

    def __init__(self, reset_at: float, message: str = "GitHub rate limit exceeded"):
        self.reset_at = reset_at
        super().__init__(message)


class RateLimitExhausted(ReviewCoverageError):
    """Raised when a rate-limit wait exceeds the configured ceiling."""

    def __init__(self, wait_seconds: float):
        self.wait_seconds = wait_seconds
        super().__init__(f"GitHub rate limit exhausted, reset in {wait_seconds:.0f}s")


class GitHubAPIError(ReviewCoverageError):
    """Unexpected API response (non-rate-limit 4xx, persistent 5xx)."""

    def __init__(self, status_code: int, path: str, message: str = ""):
        self.status_code = status_code
        self.path = path
        detail = f": {message}" if message else ""
        super().__init__(f"GitHub API error {status_code} for {path}{detail}")
