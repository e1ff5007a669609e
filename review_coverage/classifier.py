"""Classify a merged PR by the reviews it received before merge."""

from collections.abc import Iterable

from .models import PullRequest, Review, ReviewOutcome

# Most decisive first: "was it ever approved" beats the latest state
OUTCOME_PRIORITY = [
    ("APPROVED", ReviewOutcome.APPROVED),
    ("CHANGES_REQUESTED", ReviewOutcome.CHANGES_REQUESTED),
    ("COMMENTED", ReviewOutcome.COMMENTED),
]


def is_self_review(pr: PullRequest, review: Review) -> bool:
    return review.reviewer_login.lower() == pr.author_login.lower()


def classify(pr: PullRequest, reviews: Iterable[Review]) -> ReviewOutcome:
    """Return exactly one outcome for the PR.

    Rules, in order:
    1. Draft PRs are DRAFT_EXCLUDED regardless of reviews
    2. Reviews by the PR author are ignored
    3. No reviews left -> NO_REVIEW
    4. Any APPROVED, else any CHANGES_REQUESTED, else any COMMENTED
    5. Only dismissed/pending/unknown states -> NO_REVIEW
    """
    if pr.draft:
        return ReviewOutcome.DRAFT_EXCLUDED

    states = {review.state.upper() for review in reviews if not is_self_review(pr, review)}
    if not states:
        return ReviewOutcome.NO_REVIEW

    for state, outcome in OUTCOME_PRIORITY:
        if state in states:
            return outcome

    return ReviewOutcome.NO_REVIEW
