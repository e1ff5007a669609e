"""Organization repository extractor."""

from ..models import Repository
from .prs import parse_datetime


def extract_repo(repo_data: dict) -> Repository:
    """Extract repository data from GitHub API response."""
    return Repository(
        name=repo_data["name"],
        full_name=repo_data.get("full_name", repo_data["name"]),
        private=repo_data.get("private", False),
        archived=repo_data.get("archived", False),
        fork=repo_data.get("fork", False),
        updated_at=parse_datetime(repo_data.get("updated_at")),
    )
