"""Configuration for the review coverage report."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Auth and target org
GITHUB_TOKEN = os.environ.get("GITHUB_TOKEN")
GITHUB_ORG = os.environ.get("GITHUB_ORG")

# Reporting window, in days ending "now"
WINDOW_DAYS = int(os.environ.get("WINDOW_DAYS", "7"))

# Pause between repositories, independent of rate-limit backoff
REPO_DELAY_SECONDS = float(os.environ.get("REPO_DELAY_SECONDS", "5"))

# Longest single rate-limit wait before giving up (unset = wait forever)
_max_wait = os.environ.get("RATE_LIMIT_MAX_WAIT")
RATE_LIMIT_MAX_WAIT = float(_max_wait) if _max_wait else None

# Rate-limit backoff tuning
RATE_LIMIT_BUFFER = 2.0  # Seconds added past the advertised reset
RATE_LIMIT_MIN_WAIT = 5.0  # Floor when the reset is already past (clock skew)

# Pagination
PER_PAGE = 100  # Max items per REST page
SEARCH_PER_PAGE = 100  # Max items per search page
SEARCH_RESULT_LIMIT = 1000  # Search API never returns more than this


def get_cache_dir() -> Path:
    """Get the cache directory for run logs."""
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache) / "review-coverage"
    return Path.home() / ".cache" / "review-coverage"


LOG_FILE = get_cache_dir() / "run.log"


def default_output_path(days: int) -> Path:
    """CSV path in the working directory, e.g. by_repo_7d.csv."""
    return Path(f"by_repo_{days}d.csv")


def mask_token(token: str) -> str:
    """Mask all but the last 4 characters of a token for display."""
    if len(token) > 4:
        return "*" * (len(token) - 4) + token[-4:]
    return "****"
