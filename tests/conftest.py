"""Shared test fixtures."""

import pytest


@pytest.fixture
def github_client_uninit():
    """Create an uninitialized GitHubClient with a fake PAT token.

    Use this for sync tests that don't need the async context manager.
    """
    from review_coverage.github_client import GitHubClient

    return GitHubClient(token="fake-token")


@pytest.fixture(autouse=True)
def reset_extractor_config():
    """Bot detection config is module-level; don't leak it between tests."""
    from review_coverage.extractors import prs

    prs._config = None
    yield
    prs._config = None
