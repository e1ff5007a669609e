"""Review coverage report orchestration.

Wires client, fetcher, sources and runner together, then writes the CSV.
"""

import logging
import os
from pathlib import Path

from rich.console import Console

from .config import GITHUB_ORG, GITHUB_TOKEN, LOG_FILE, mask_token
from .errors import ConfigError
from .extractors.prs import set_config as set_extractor_config
from .github_client import GitHubClient
from .metrics import RepoMetricsAggregator
from .models import TimeWindow
from .rate_limit import RateLimitedFetcher, RetryPolicy
from .report import print_summary, write_csv
from .report_config import ReportConfig
from .runner import OrgReportRunner, RepoFailure
from .sources.merged_prs import MergedPrSource
from .sources.reviews import ReviewSource

logger = logging.getLogger(__name__)


def setup_logging(log_file: Path = LOG_FILE) -> None:
    """Setup file logging for debugging."""
    os.makedirs(log_file.parent, exist_ok=True)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
        handlers=[
            logging.FileHandler(log_file, mode="a"),
        ],
    )


def resolve_settings(org: str | None, token: str | None) -> tuple[str, str]:
    """Pick org/token from arguments or environment; both are required."""
    org = org or GITHUB_ORG
    token = token or GITHUB_TOKEN
    missing = [name for name, value in (("GITHUB_ORG", org), ("GITHUB_TOKEN", token)) if not value]
    if missing:
        raise ConfigError(f"{' and '.join(missing)} not set. Add to .env or pass --org/--token")
    return org, token


async def main(
    console: Console,
    output: Path,
    days: int,
    repo_delay: float,
    org: str | None = None,
    token: str | None = None,
    continue_on_error: bool = False,
    max_wait: float | None = None,
    config_path: Path | None = None,
) -> list[RepoFailure]:
    """Run the report and write the CSV. Returns repositories that were skipped."""
    org, token = resolve_settings(org, token)

    config = ReportConfig.load(config_path)
    set_extractor_config(config)

    console.print(f"GitHub Org: {org}")
    console.print(f"GitHub Token: {mask_token(token)}")

    window = TimeWindow.last_days(days)
    console.print(f"[bold]Merged PRs from {window.start:%Y-%m-%d %H:%M} to {window.end:%Y-%m-%d %H:%M} UTC[/]\n")
    logger.info("=" * 60)
    logger.info(f"Starting report for {org}: {window.start.isoformat()} to {window.end.isoformat()}")

    fetcher = RateLimitedFetcher(policy=RetryPolicy(max_wait=max_wait), console=console)

    async with GitHubClient(token=token) as client:
        aggregator = RepoMetricsAggregator(
            MergedPrSource(client, fetcher),
            ReviewSource(client, fetcher),
            ignore_bot_reviews=config.ignore_bot_reviews,
        )
        runner = OrgReportRunner(
            client,
            fetcher,
            aggregator,
            console,
            config=config,
            repo_delay=repo_delay,
            continue_on_error=continue_on_error,
        )
        rows = await runner.run(org, window)

        logger.info(
            f"Report complete: {len(rows)} repos, {len(runner.failures)} failed, "
            f"{client.request_count} API requests, {fetcher.retries} rate-limit waits, "
            f"{client.rate_limit_remaining} requests left until {client.rate_limit_reset}"
        )

    path = write_csv(rows, output)
    print_summary(console, rows, path)

    if runner.failures:
        console.print(f"\n[yellow]{len(runner.failures)} repositories skipped:[/]")
        for failure in runner.failures:
            console.print(f"  {failure.repo}: {failure.error_type}")
        console.print(f"[dim]Details in {LOG_FILE}[/]")

    return runner.failures
