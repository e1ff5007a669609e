"""Pull request data extractor."""

from datetime import datetime

from ..models import PullRequest
from ..report_config import ReportConfig

# Module-level config instance for bot detection
# This gets set when the report run is initialized
_config: ReportConfig | None = None


def set_config(config: ReportConfig) -> None:
    """Set the report config for bot detection."""
    global _config
    _config = config


def get_config() -> ReportConfig:
    """Get the report config, using defaults if not set."""
    global _config
    if _config is None:
        _config = ReportConfig.default()
    return _config


def is_bot(user: dict) -> bool:
    """Check if user is a bot/GitHub App.

    Uses the report config's is_bot method which supports:
    - GitHub API user type ("Bot")
    - Glob patterns (default: *[bot])
    - Explicit login list from config
    """
    config = get_config()
    login = user.get("login", "")
    user_type = user.get("type")
    return config.is_bot(login, user_type)


def parse_datetime(dt_str: str | None) -> datetime | None:
    """Parse ISO datetime string, returns None if input is empty."""
    if not dt_str:
        return None
    return datetime.fromisoformat(dt_str.replace("Z", "+00:00"))


def extract_pr(repo: str, pr_data: dict) -> PullRequest:
    """Extract PR data from a full pull request API response."""
    user = pr_data.get("user") or {}
    merged_at = parse_datetime(pr_data.get("merged_at"))

    return PullRequest(
        repo=repo,
        pr_number=pr_data["number"],
        title=pr_data.get("title", ""),
        author_login=user.get("login", "unknown"),
        draft=pr_data.get("draft", False),
        merged=pr_data.get("merged", False) or merged_at is not None,
        merged_at=merged_at,
    )
