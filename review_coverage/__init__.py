"""review-coverage: per-repository pull request review coverage for a GitHub org."""
