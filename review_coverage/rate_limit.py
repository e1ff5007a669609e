"""Retry wrapper for rate-limited GitHub API calls.

Every paginated call in the report goes through RateLimitedFetcher.execute().
A RetryPolicy decides which failures are recoverable and how long to wait;
everything else propagates to the caller unchanged.
"""

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TypeVar

import trio
from rich.console import Console

from .config import RATE_LIMIT_BUFFER, RATE_LIMIT_MIN_WAIT
from .errors import RateLimitError, RateLimitExhausted

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_rate_limit(exc: BaseException) -> bool:
    return isinstance(exc, RateLimitError)


@dataclass
class RetryPolicy:
    """Which failures to retry, and how long to wait before retrying.

    Args:
        is_recoverable: Predicate separating "wait and retry" from "propagate"
        buffer: Seconds added past the advertised reset time
        minimum_wait: Floor for the wait (covers clock skew / already-past resets)
        max_wait: Give up with RateLimitExhausted if a single wait exceeds this
    """

    is_recoverable: Callable[[BaseException], bool] = is_rate_limit
    buffer: float = RATE_LIMIT_BUFFER
    minimum_wait: float = RATE_LIMIT_MIN_WAIT
    max_wait: float | None = None

    def compute_wait(self, exc: BaseException, now: float) -> float:
        reset_at = getattr(exc, "reset_at", now)
        return max(reset_at - now + self.buffer, self.minimum_wait)


@dataclass
class RateLimitedFetcher:
    """Runs zero-argument API operations, sleeping through rate limits.

    Retries are unbounded: a rate limit always clears eventually. `clock` and
    `sleep` are injectable so tests can drive the backoff without real time.
    """

    policy: RetryPolicy = field(default_factory=RetryPolicy)
    clock: Callable[[], float] = time.time
    sleep: Callable[[float], Awaitable[None]] = trio.sleep
    console: Console | None = None
    retries: int = 0

    async def execute(self, operation: Callable[[], Awaitable[T]], label: str = "") -> T:
        while True:
            try:
                return await operation()
            except Exception as e:
                if not self.policy.is_recoverable(e):
                    raise

                now = self.clock()
                wait = self.policy.compute_wait(e, now)
                if self.policy.max_wait is not None and wait > self.policy.max_wait:
                    raise RateLimitExhausted(wait) from e

                self._notify(label, wait, now)
                self.retries += 1
                await self.sleep(wait)

    def _notify(self, label: str, wait: float, now: float) -> None:
        resume_at = datetime.fromtimestamp(now + wait).strftime("%H:%M:%S")
        target = label or "GitHub API"
        message = f"Rate limited on {target}. Waiting {wait:.0f}s (resuming at {resume_at})..."
        logger.warning(message)
        if self.console is not None:
            self.console.print(f"[yellow]{message}[/]")
