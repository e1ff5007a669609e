"""Organization repository listing."""

from functools import partial

from ..config import PER_PAGE
from ..extractors.repos import extract_repo
from ..github_client import GitHubClient
from ..models import Repository
from ..rate_limit import RateLimitedFetcher


async def list_org_repos(
    client: GitHubClient,
    fetcher: RateLimitedFetcher,
    org: str,
    per_page: int = PER_PAGE,
) -> list[Repository]:
    """All repositories in the org, in API order."""
    repos: list[Repository] = []
    page = 1

    while True:
        items = await fetcher.execute(
            partial(client.list_org_repos, org, page, per_page),
            label=f"{org} repos page {page}",
        )
        if not items:
            break

        repos.extend(extract_repo(item) for item in items)

        if len(items) < per_page:
            break
        page += 1

    return repos
