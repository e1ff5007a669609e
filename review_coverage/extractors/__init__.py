"""Map GitHub API payloads to report models."""
