"""Tests for the org-wide report runner."""

import pytest
import trio
from rich.console import Console

from review_coverage.errors import AuthorizationError, GitHubAPIError, RateLimitExhausted
from review_coverage.models import RepoMetrics, TimeWindow
from review_coverage.rate_limit import RateLimitedFetcher
from review_coverage.report_config import ReportConfig
from review_coverage.runner import OrgReportRunner

from factories import make_repo_data, utc

WINDOW = TimeWindow(start=utc(2024, 1, 1), end=utc(2024, 1, 8))


class StubClient:
    """Serves org repositories one page at a time."""

    def __init__(self, pages):
        self.pages = pages
        self.requested_pages = []

    async def list_org_repos(self, org, page, per_page):
        self.requested_pages.append(page)
        return self.pages[page - 1] if page <= len(self.pages) else []


class StubAggregator:
    def __init__(self, merged=None, errors=None):
        self.merged = merged or {}
        self.errors = errors or {}
        self.visited = []
        self.visit_times = []

    async def compute(self, org, repo, window):
        self.visited.append(repo)
        self.visit_times.append(trio.current_time())
        if repo in self.errors:
            raise self.errors[repo]
        merged = self.merged.get(repo, 0)
        return RepoMetrics(
            repo=repo,
            merged_count=merged,
            approved=merged,
            changes_requested=0,
            commented_only=0,
            no_review=0,
        )


def make_runner(client, aggregator, console=None, **kwargs):
    kwargs.setdefault("repo_delay", 0)
    return OrgReportRunner(
        client,
        RateLimitedFetcher(),
        aggregator,
        console or Console(quiet=True),
        **kwargs,
    )


REPOS = [
    make_repo_data("zeta"),
    make_repo_data("Alpha"),
    make_repo_data("archived-thing", archived=True),
    make_repo_data("forked-lib", fork=True),
    make_repo_data("beta"),
]


class TestOrgReportRunner:
    @pytest.mark.trio
    async def test_visits_eligible_repos_in_name_order(self):
        aggregator = StubAggregator()
        runner = make_runner(StubClient([REPOS]), aggregator)

        results = await runner.run("acme", WINDOW)

        assert aggregator.visited == ["Alpha", "beta", "zeta"]
        assert [m.repo for m in results] == ["Alpha", "beta", "zeta"]

    @pytest.mark.trio
    async def test_short_repo_page_ends_listing(self):
        client = StubClient([[make_repo_data("a"), make_repo_data("b")], [make_repo_data("c")]])

        results = await make_runner(client, StubAggregator()).run("acme", WINDOW)

        assert [m.repo for m in results] == ["a", "b"]
        assert client.requested_pages == [1]

    @pytest.mark.trio
    async def test_excluded_patterns(self):
        config = ReportConfig(exclude_repos=["sandbox-*", ".github"])
        repos = [make_repo_data("api"), make_repo_data("sandbox-bob"), make_repo_data(".github")]
        aggregator = StubAggregator()

        await make_runner(StubClient([repos]), aggregator, config=config).run("acme", WINDOW)

        assert aggregator.visited == ["api"]

    @pytest.mark.trio
    async def test_delay_between_repositories(self, autojump_clock):
        aggregator = StubAggregator()
        runner = make_runner(StubClient([REPOS]), aggregator, repo_delay=5)

        start = trio.current_time()
        await runner.run("acme", WINDOW)

        gaps = [b - a for a, b in zip(aggregator.visit_times, aggregator.visit_times[1:])]
        assert all(gap >= 5 for gap in gaps)
        # No pause after the last repository
        assert trio.current_time() - start == pytest.approx(10)

    @pytest.mark.trio
    async def test_progress_only_for_active_repos(self):
        console = Console(record=True, width=200)
        aggregator = StubAggregator(merged={"beta": 4})

        await make_runner(StubClient([REPOS]), aggregator, console=console).run("acme", WINDOW)

        output = console.export_text()
        assert "beta" in output
        assert "Alpha" not in output
        assert "zeta" not in output

    @pytest.mark.trio
    async def test_failure_halts_run_by_default(self):
        aggregator = StubAggregator(errors={"beta": GitHubAPIError(500, "/search/issues")})

        with pytest.raises(GitHubAPIError):
            await make_runner(StubClient([REPOS]), aggregator).run("acme", WINDOW)
        assert aggregator.visited == ["Alpha", "beta"]

    @pytest.mark.trio
    async def test_keep_going_skips_failed_repo(self, autojump_clock):
        aggregator = StubAggregator(errors={"beta": GitHubAPIError(500, "/search/issues")})
        runner = make_runner(StubClient([REPOS]), aggregator, continue_on_error=True, repo_delay=5)

        start = trio.current_time()
        results = await runner.run("acme", WINDOW)

        assert [m.repo for m in results] == ["Alpha", "zeta"]
        assert [f.repo for f in runner.failures] == ["beta"]
        assert runner.failures[0].error_type == "GitHubAPIError"
        # The pause still applies after a failed repository
        assert trio.current_time() - start == pytest.approx(10)

    @pytest.mark.trio
    @pytest.mark.parametrize("error", [AuthorizationError("bad token", 401), RateLimitExhausted(7200)])
    async def test_fatal_errors_propagate_even_with_keep_going(self, error):
        aggregator = StubAggregator(errors={"Alpha": error})
        runner = make_runner(StubClient([REPOS]), aggregator, continue_on_error=True)

        with pytest.raises(type(error)):
            await runner.run("acme", WINDOW)
        assert aggregator.visited == ["Alpha"]


def test_eligible_sort_is_stable_for_case():
    from review_coverage.extractors.repos import extract_repo

    repos = [extract_repo(make_repo_data(n)) for n in ["b", "B", "a"]]
    runner = make_runner(StubClient([]), StubAggregator())
    assert [r.name for r in runner.eligible(repos)] == ["a", "B", "b"]
