"""Org-wide report runner: one repository at a time, with a pause between each."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

import trio
from rich.console import Console

from .config import REPO_DELAY_SECONDS
from .errors import AuthorizationError, RateLimitExhausted
from .github_client import GitHubClient
from .metrics import RepoMetricsAggregator
from .models import RepoMetrics, Repository, TimeWindow
from .rate_limit import RateLimitedFetcher
from .report import print_progress
from .report_config import ReportConfig
from .sources.repos import list_org_repos

logger = logging.getLogger(__name__)

# Never skipped by --keep-going: retrying the next repo cannot help
FATAL_ERRORS = (AuthorizationError, RateLimitExhausted)


@dataclass
class RepoFailure:
    """Record of a repository whose metrics could not be computed."""

    repo: str
    error_type: str
    error_message: str
    timestamp: str


class OrgReportRunner:
    """Runs RepoMetricsAggregator over every eligible repository in an org."""

    def __init__(
        self,
        client: GitHubClient,
        fetcher: RateLimitedFetcher,
        aggregator: RepoMetricsAggregator,
        console: Console,
        config: ReportConfig | None = None,
        repo_delay: float = REPO_DELAY_SECONDS,
        continue_on_error: bool = False,
    ):
        self.client = client
        self.fetcher = fetcher
        self.aggregator = aggregator
        self.console = console
        self.config = config or ReportConfig.default()
        self.repo_delay = repo_delay
        self.continue_on_error = continue_on_error
        self.failures: list[RepoFailure] = []

    def eligible(self, repos: list[Repository]) -> list[Repository]:
        """Drop archived, forked and excluded repos; sort by name."""
        kept = [
            r for r in repos
            if not r.archived and not r.fork and not self.config.is_excluded(r.name)
        ]
        return sorted(kept, key=lambda r: (r.name.lower(), r.name))

    async def run(self, org: str, window: TimeWindow) -> list[RepoMetrics]:
        """Metrics for each eligible repository, in ascending name order."""
        repos = self.eligible(await list_org_repos(self.client, self.fetcher, org))
        logger.info(f"{org}: {len(repos)} eligible repositories, window {window.start} .. {window.end}")

        results: list[RepoMetrics] = []
        for i, repo in enumerate(repos):
            try:
                metrics = await self.aggregator.compute(org, repo.name, window)
            except FATAL_ERRORS:
                raise
            except Exception as e:
                if not self.continue_on_error:
                    raise
                self._record_failure(repo.name, e)
            else:
                results.append(metrics)
                if metrics.merged_count > 0:
                    print_progress(self.console, metrics)

            if i < len(repos) - 1 and self.repo_delay > 0:
                await trio.sleep(self.repo_delay)

        return results

    def _record_failure(self, repo: str, e: Exception) -> None:
        failure = RepoFailure(
            repo=repo,
            error_type=type(e).__name__,
            error_message=str(e)[:500],
            timestamp=datetime.now(UTC).isoformat(),
        )
        self.failures.append(failure)
        logger.error(f"{repo} failed: {failure.error_type}: {e}", exc_info=e)
        self.console.print(f"[red]{repo}: skipped ({failure.error_type}: {str(e)[:100]})[/]")
