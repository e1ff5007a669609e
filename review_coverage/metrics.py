"""Per-repository review coverage tallies."""

import logging
from collections import Counter

from .classifier import classify
from .models import RepoMetrics, ReviewOutcome, TimeWindow
from .sources.merged_prs import MergedPrSource
from .sources.reviews import ReviewSource

logger = logging.getLogger(__name__)


class RepoMetricsAggregator:
    """Fetches, classifies and counts one repository's merged PRs."""

    def __init__(
        self,
        merged_prs: MergedPrSource,
        reviews: ReviewSource,
        ignore_bot_reviews: bool = True,
    ):
        self.merged_prs = merged_prs
        self.reviews = reviews
        self.ignore_bot_reviews = ignore_bot_reviews

    async def compute(self, org: str, repo: str, window: TimeWindow) -> RepoMetrics:
        """Build RepoMetrics for `repo`. Any fetch failure propagates."""
        prs = await self.merged_prs.fetch(org, repo, window)

        # Drafts never count as merged for reporting
        prs = [pr for pr in prs if not pr.draft]

        counts: Counter[ReviewOutcome] = Counter()
        for pr in prs:
            reviews = await self.reviews.fetch(org, repo, pr.pr_number, pr.merged_at)
            if self.ignore_bot_reviews:
                reviews = [r for r in reviews if not r.reviewer_is_bot]
            outcome = classify(pr, reviews)
            logger.debug(f"{repo}#{pr.pr_number}: {outcome.value}")
            counts[outcome] += 1

        approved = counts[ReviewOutcome.APPROVED]
        changes_requested = counts[ReviewOutcome.CHANGES_REQUESTED]
        commented_only = counts[ReviewOutcome.COMMENTED]
        no_review = counts[ReviewOutcome.NO_REVIEW]

        return RepoMetrics(
            repo=repo,
            merged_count=approved + changes_requested + commented_only + no_review,
            approved=approved,
            changes_requested=changes_requested,
            commented_only=commented_only,
            no_review=no_review,
        )
