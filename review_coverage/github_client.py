"""GitHub API client with typed rate-limit and authorization errors.

Uses httpx.AsyncClient under trio. Rate limits are raised as RateLimitError
so the caller's RateLimitedFetcher decides how long to wait.
"""

import logging
import time
from typing import Any

import httpx
import trio

from .config import GITHUB_TOKEN
from .errors import AuthorizationError, ConfigError, GitHubAPIError, RateLimitError

logger = logging.getLogger(__name__)

# Fallback wait for a secondary rate limit that carries no Retry-After
SECONDARY_RATE_LIMIT_WAIT = 60


class GitHubClient:
    """Async GitHub REST API client authenticated with a personal access token."""

    BASE_URL = "https://api.github.com"

    def __init__(self, token: str | None = None, max_retries: int = 3):
        """Initialize the client.

        Args:
            token: Personal access token (falls back to GITHUB_TOKEN)
            max_retries: Attempts for 5xx responses before giving up
        """
        self.token = token or GITHUB_TOKEN
        if not self.token:
            raise ConfigError("GitHub auth required. Set GITHUB_TOKEN or pass --token")

        self.max_retries = max_retries
        self.client: httpx.AsyncClient | None = None
        self._request_count = 0
        self.rate_limit_remaining = 5000
        self.rate_limit_reset = 0

    async def __aenter__(self):
        self.client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers={
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "Authorization": f"Bearer {self.token}",
            },
            timeout=30.0,
            http2=True,
        )
        return self

    async def __aexit__(self, *args):
        if self.client:
            await self.client.aclose()

    @property
    def request_count(self) -> int:
        return self._request_count

    def _track_rate_limit(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")
        if remaining is not None:
            self.rate_limit_remaining = int(remaining)
        if reset is not None:
            self.rate_limit_reset = int(reset)

    def _check_rate_limit(self, response: httpx.Response, path: str) -> None:
        """Raise RateLimitError if the response is a primary or secondary rate limit."""
        if response.status_code not in (403, 429):
            return

        retry_after = response.headers.get("Retry-After")
        if retry_after is not None:
            raise RateLimitError(
                reset_at=time.time() + int(retry_after),
                message=f"Secondary rate limit on {path}",
            )

        if response.headers.get("X-RateLimit-Remaining") == "0":
            reset_at = int(response.headers.get("X-RateLimit-Reset", 0))
            raise RateLimitError(reset_at=reset_at, message=f"Primary rate limit on {path}")

        if response.status_code == 429:
            raise RateLimitError(
                reset_at=time.time() + SECONDARY_RATE_LIMIT_WAIT,
                message=f"Too many requests on {path}",
            )

        # 403 secondary limits may omit Retry-After; only the body tells them apart
        if "rate limit" in response.text.lower():
            raise RateLimitError(
                reset_at=time.time() + SECONDARY_RATE_LIMIT_WAIT,
                message=f"Secondary rate limit on {path}",
            )

    async def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
    ) -> httpx.Response:
        """Make request, mapping rate limits and auth failures to typed errors."""
        if not self.client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        for attempt in range(self.max_retries):
            response = await self.client.request(method, path, params=params)
            self._request_count += 1
            self._track_rate_limit(response)

            self._check_rate_limit(response, path)

            if response.status_code in (401, 403):
                raise AuthorizationError(
                    f"GitHub rejected the token for {path} ({response.status_code}): {response.text[:200]}",
                    status_code=response.status_code,
                )

            if response.status_code >= 500:
                if attempt == self.max_retries - 1:
                    break
                wait = 2**attempt
                logger.warning(f"Server error {response.status_code} on {path}. Retrying in {wait}s...")
                await trio.sleep(wait)
                continue

            if response.status_code >= 400:
                raise GitHubAPIError(response.status_code, path, response.text[:200])

            return response

        raise GitHubAPIError(response.status_code, path, "max retries exceeded")

    async def get(self, path: str, params: dict | None = None) -> Any:
        """GET request returning JSON."""
        response = await self._request("GET", path, params=params)
        return response.json()

    async def list_org_repos(self, org: str, page: int, per_page: int) -> list[dict]:
        """One page of an organization's repositories."""
        path = f"/orgs/{org}/repos"
        params = {"type": "all", "sort": "full_name", "per_page": per_page, "page": page}
        return await self.get(path, params)

    async def search_issues(self, query: str, page: int, per_page: int) -> dict:
        """One page of issue/PR search results (total_count + items)."""
        params = {"q": query, "per_page": per_page, "page": page}
        return await self.get("/search/issues", params)

    async def get_pull_request(self, org: str, repo: str, pr_number: int) -> dict:
        """Full pull request detail (merged_at, draft, author)."""
        return await self.get(f"/repos/{org}/{repo}/pulls/{pr_number}")

    async def list_pr_reviews(self, org: str, repo: str, pr_number: int, page: int, per_page: int) -> list[dict]:
        """One page of reviews for a PR, in submission order."""
        path = f"/repos/{org}/{repo}/pulls/{pr_number}/reviews"
        return await self.get(path, {"per_page": per_page, "page": page})
