"""PR review data extractor."""

from ..models import Review
from .prs import is_bot, parse_datetime


def extract_review(repo: str, pr_number: int, review_data: dict) -> Review:
    """Extract review data from GitHub API response."""
    # Deleted accounts come back as user: null
    user = review_data.get("user") or {}

    return Review(
        repo=repo,
        pr_number=pr_number,
        review_id=review_data["id"],
        reviewer_login=user.get("login", "ghost"),
        reviewer_is_bot=is_bot(user),
        state=review_data["state"],
        submitted_at=parse_datetime(review_data.get("submitted_at")),
    )
