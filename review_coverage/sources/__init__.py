"""Paginated GitHub data sources feeding the review coverage report."""
