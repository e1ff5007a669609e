"""Pydantic models for pull requests, reviews and per-repository metrics."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, NonNegativeInt, model_validator


class Repository(BaseModel):
    """Organization repository as listed by the API."""

    model_config = ConfigDict(frozen=True)

    name: str
    full_name: str
    private: bool
    archived: bool
    fork: bool
    updated_at: datetime | None


class PullRequest(BaseModel):
    """Hydrated pull request, as of fetch time."""

    model_config = ConfigDict(frozen=True)

    repo: str
    pr_number: int
    title: str
    author_login: str
    draft: bool
    merged: bool
    merged_at: datetime | None


class Review(BaseModel):
    """PR review data."""

    model_config = ConfigDict(frozen=True)

    repo: str
    pr_number: int
    review_id: int
    reviewer_login: str
    reviewer_is_bot: bool
    state: str
    submitted_at: datetime | None  # None while the review is pending


class ReviewOutcome(Enum):
    APPROVED = "approved"
    CHANGES_REQUESTED = "changes_requested"
    COMMENTED = "commented"
    NO_REVIEW = "no_review"
    DRAFT_EXCLUDED = "draft_excluded"


class TimeWindow(BaseModel):
    """Inclusive [start, end] window for merge timestamps."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_bounds(self) -> TimeWindow:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("window bounds must be timezone-aware")
        if self.start > self.end:
            raise ValueError("window start must not be after end")
        return self

    @classmethod
    def last_days(cls, days: int, now: datetime | None = None) -> TimeWindow:
        """Window covering the last `days` days, ending now."""
        end = now or datetime.now(UTC)
        return cls(start=end - timedelta(days=days), end=end)

    def contains(self, ts: datetime) -> bool:
        return self.start <= ts <= self.end

    def search_qualifier(self) -> str:
        """Search syntax is inclusive on UTC calendar days."""
        start = self.start.astimezone(UTC).date().isoformat()
        end = self.end.astimezone(UTC).date().isoformat()
        return f"merged:{start}..{end}"


class RepoMetrics(BaseModel):
    """Review coverage tallies for one repository."""

    model_config = ConfigDict(frozen=True)

    repo: str
    merged_count: NonNegativeInt
    approved: NonNegativeInt
    changes_requested: NonNegativeInt
    commented_only: NonNegativeInt
    no_review: NonNegativeInt

    @model_validator(mode="after")
    def _check_totals(self) -> RepoMetrics:
        counted = self.approved + self.changes_requested + self.commented_only + self.no_review
        if counted != self.merged_count:
            raise ValueError(
                f"category counts ({counted}) do not add up to merged_count ({self.merged_count})"
            )
        return self

    @property
    def reviewed_any(self) -> int:
        return self.approved + self.changes_requested + self.commented_only

    def pct(self, value: int) -> float:
        """Percentage of merged PRs, 0 for an empty repository."""
        if self.merged_count == 0:
            return 0.0
        return value / self.merged_count * 100.0
