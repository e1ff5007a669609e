"""Pre-merge reviews for a pull request."""

import logging
from datetime import datetime
from functools import partial

from ..config import PER_PAGE
from ..extractors.reviews import extract_review
from ..github_client import GitHubClient
from ..models import Review
from ..rate_limit import RateLimitedFetcher

logger = logging.getLogger(__name__)


class ReviewSource:
    """Pages through a PR's reviews, keeping those submitted before merge."""

    def __init__(self, client: GitHubClient, fetcher: RateLimitedFetcher, per_page: int = PER_PAGE):
        self.client = client
        self.fetcher = fetcher
        self.per_page = per_page

    async def fetch(self, org: str, repo: str, pr_number: int, merged_at: datetime) -> list[Review]:
        """Reviews with submitted_at strictly before merged_at, in API order."""
        reviews: list[Review] = []
        page = 1

        while True:
            items = await self.fetcher.execute(
                partial(self.client.list_pr_reviews, org, repo, pr_number, page, self.per_page),
                label=f"{repo}#{pr_number} reviews page {page}",
            )
            if not items:
                break

            for item in items:
                review = extract_review(repo, pr_number, item)
                # Pending reviews have no submission time
                if review.submitted_at is not None and review.submitted_at < merged_at:
                    reviews.append(review)

            if len(items) < self.per_page:
                break
            page += 1

        logger.debug(f"{repo}#{pr_number}: {len(reviews)} pre-merge reviews")
        return reviews
