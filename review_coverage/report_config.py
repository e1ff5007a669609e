"""Report settings loaded from coverage.yaml.

Example:

    report:
      exclude_repos:
        - "sandbox-*"
        - ".github"
      ignore_bot_reviews: true
      bot_logins:
        - ci-reviewer
      bot_patterns:
        - "*[bot]"
"""

from __future__ import annotations

import fnmatch
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

CONFIG_CANDIDATES = ["coverage.yaml", ".coverage.yaml", "coverage.yml", ".coverage.yml"]

DEFAULT_BOT_PATTERNS = ["*[bot]"]


@dataclass
class ReportConfig:
    """Repository exclusions and bot detection for a report run."""

    exclude_repos: list[str] = field(default_factory=list)
    ignore_bot_reviews: bool = True
    bot_logins: list[str] = field(default_factory=list)
    bot_patterns: list[str] = field(default_factory=lambda: DEFAULT_BOT_PATTERNS.copy())

    @classmethod
    def load(cls, path: Path | str | None = None) -> ReportConfig:
        """Load config from YAML file or return defaults."""
        if path is None:
            for candidate in CONFIG_CANDIDATES:
                if Path(candidate).exists():
                    path = candidate
                    break

        if path is None or not Path(path).exists():
            return cls.default()

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReportConfig:
        """Create config from dictionary (e.g., parsed YAML)."""
        report_data = data.get("report", {}) or {}

        return cls(
            exclude_repos=list(report_data.get("exclude_repos", [])),
            ignore_bot_reviews=bool(report_data.get("ignore_bot_reviews", True)),
            bot_logins=list(report_data.get("bot_logins", [])),
            bot_patterns=list(report_data.get("bot_patterns", DEFAULT_BOT_PATTERNS.copy())),
        )

    @classmethod
    def default(cls) -> ReportConfig:
        return cls()

    def is_bot(self, login: str, user_type: str | None = None) -> bool:
        """Check if a login belongs to a bot/GitHub App.

        Matches, in order: API user type "Bot", explicit logins, glob patterns.
        """
        if user_type == "Bot":
            return True

        lowered = login.lower()
        if lowered in {b.lower() for b in self.bot_logins}:
            return True

        # fnmatchcase: "[bot]" is a character class in glob syntax, escape it
        for pattern in self.bot_patterns:
            escaped = pattern.replace("[", "[[]")
            if fnmatch.fnmatchcase(lowered, escaped.lower()):
                return True

        return False

    def is_excluded(self, repo_name: str) -> bool:
        """Check if a repository is excluded from the report."""
        return any(fnmatch.fnmatch(repo_name, pattern) for pattern in self.exclude_repos)

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data = {
            "report": {
                "exclude_repos": self.exclude_repos,
                "ignore_bot_reviews": self.ignore_bot_reviews,
                "bot_logins": self.bot_logins,
                "bot_patterns": self.bot_patterns,
            }
        }
        return yaml.dump(data, default_flow_style=False, sort_keys=False)
