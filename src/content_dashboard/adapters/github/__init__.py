"""Version-control adapters."""

from content_dashboard.adapters.github.github_client import GitHubClient

__all__ = ["GitHubClient"]
