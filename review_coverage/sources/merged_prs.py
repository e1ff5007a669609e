"""Merged pull requests for one repository and time window.

The search endpoint only returns lightweight issue records, so each hit is
hydrated with a full pull request fetch before it is trusted.
"""

import logging
from functools import partial

from ..config import SEARCH_PER_PAGE, SEARCH_RESULT_LIMIT
from ..extractors.prs import extract_pr
from ..github_client import GitHubClient
from ..models import PullRequest, TimeWindow
from ..rate_limit import RateLimitedFetcher

logger = logging.getLogger(__name__)


def build_search_query(org: str, repo: str, window: TimeWindow) -> str:
    return f"repo:{org}/{repo} is:pr is:merged {window.search_qualifier()}"


class MergedPrSource:
    """Search-then-hydrate source of merged PRs."""

    def __init__(
        self,
        client: GitHubClient,
        fetcher: RateLimitedFetcher,
        per_page: int = SEARCH_PER_PAGE,
        result_limit: int = SEARCH_RESULT_LIMIT,
    ):
        self.client = client
        self.fetcher = fetcher
        self.per_page = per_page
        self.result_limit = result_limit

    async def fetch(self, org: str, repo: str, window: TimeWindow) -> list[PullRequest]:
        """Merged PRs with merged_at inside the window, unique by number."""
        query = build_search_query(org, repo, window)
        found: dict[int, PullRequest] = {}
        seen = 0
        page = 1

        while True:
            result = await self.fetcher.execute(
                partial(self.client.search_issues, query, page, self.per_page),
                label=f"{repo} search page {page}",
            )
            items = result.get("items", [])
            total = result.get("total_count", 0)

            if not items:
                break

            for item in items:
                number = item["number"]
                if number in found:
                    continue
                pr = await self._hydrate(org, repo, number)
                # Search index can lag the PR record; trust the hydrated merge time
                if pr.merged and pr.merged_at is not None and window.contains(pr.merged_at):
                    found[number] = pr
                else:
                    logger.debug(f"{repo}#{number}: merged_at {pr.merged_at} outside window, skipped")

            seen += len(items)
            if seen >= total:
                break
            if seen >= self.result_limit:
                logger.warning(
                    f"{repo}: search reported {total} merged PRs, only the first {self.result_limit} are reachable"
                )
                break
            page += 1

        logger.info(f"{repo}: {len(found)} merged PRs in window ({seen} search hits)")
        return list(found.values())

    async def _hydrate(self, org: str, repo: str, number: int) -> PullRequest:
        pr_data = await self.fetcher.execute(
            partial(self.client.get_pull_request, org, repo, number),
            label=f"{repo}#{number}",
        )
        return extract_pr(repo, pr_data)
