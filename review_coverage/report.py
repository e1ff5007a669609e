"""CSV output and console summary for the review coverage report."""

from __future__ import annotations

import csv
from collections.abc import Iterable
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .models import RepoMetrics

CSV_HEADER = [
    "repo",
    "merged_count",
    "reviewed_any",
    "reviewed_any_pct",
    "approved",
    "changes_requested",
    "commented_only",
    "no_review",
]


def format_pct(value: float | None) -> str:
    """Format percentage with one decimal."""
    if value is None:
        return "N/A"
    return f"{value:.1f}%"


def csv_row(metrics: RepoMetrics) -> list[str]:
    return [
        metrics.repo,
        str(metrics.merged_count),
        str(metrics.reviewed_any),
        f"{metrics.pct(metrics.reviewed_any):.1f}",
        str(metrics.approved),
        str(metrics.changes_requested),
        str(metrics.commented_only),
        str(metrics.no_review),
    ]


def write_csv(rows: Iterable[RepoMetrics], path: Path | str) -> Path:
    """Write one line per repository, in the order given.

    Fields containing a comma, quote or newline are quoted with inner quotes doubled.
    """
    path = Path(path)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
        writer.writerow(CSV_HEADER)
        for metrics in rows:
            writer.writerow(csv_row(metrics))
    return path


def progress_line(metrics: RepoMetrics) -> str:
    reviewed_pct = format_pct(metrics.pct(metrics.reviewed_any))
    return (
        f"[bold]{escape(metrics.repo)}[/]: merged {metrics.merged_count}, "
        f"reviewed {metrics.reviewed_any} ([green]{reviewed_pct}[/]), "
        f"no review [yellow]{metrics.no_review}[/]"
    )


def print_progress(console: Console, metrics: RepoMetrics) -> None:
    console.print(progress_line(metrics))


def org_totals(rows: list[RepoMetrics]) -> RepoMetrics:
    """Sum all repositories into a single org-wide row."""
    return RepoMetrics(
        repo="(all)",
        merged_count=sum(m.merged_count for m in rows),
        approved=sum(m.approved for m in rows),
        changes_requested=sum(m.changes_requested for m in rows),
        commented_only=sum(m.commented_only for m in rows),
        no_review=sum(m.no_review for m in rows),
    )


def print_summary(console: Console, rows: list[RepoMetrics], path: Path) -> None:
    """Print org totals and where the CSV went."""
    totals = org_totals(rows)
    active = sum(1 for m in rows if m.merged_count > 0)
    console.print()
    console.print(
        f"[bold]Total[/]: {totals.merged_count} merged PRs across {active}/{len(rows)} repos, "
        f"reviewed {totals.reviewed_any} ([green]{format_pct(totals.pct(totals.reviewed_any))}[/]), "
        f"no review {totals.no_review}"
    )
    console.print(f"[green]Wrote {escape(str(path))}[/]")
