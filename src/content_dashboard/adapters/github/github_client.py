"""GitHub REST client for reading docs repository commits."""

import logging
from typing import Any, Optional

import httpx

from content_dashboard.core import UpstreamError, VersionControlClient

logger = logging.getLogger(__name__)


class GitHubClient(VersionControlClient):
    """Read commits from a single GitHub repository."""

    def __init__(
        self,
        repository: str,
        token: Optional[str] = None,
        api_base: str = "https://api.github.com",
        timeout: float = 15.0,
    ) -> None:
        self.repository = repository
        self.token = token
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    async def get_commit(self, sha: str) -> dict[str, Any]:
        """Fetch a commit including its `files` list."""
        data = await self._get(f"/repos/{self.repository}/commits/{sha}")
        if not isinstance(data, dict):
            raise UpstreamError(f"Unexpected commit payload for {sha}")
        return data

    async def list_commits(self, branch: str, per_page: int = 10) -> list[dict[str, Any]]:
        """List the latest commits on a branch, newest first."""
        data = await self._get(
            f"/repos/{self.repository}/commits",
            params={"sha": branch, "per_page": per_page},
        )
        if not isinstance(data, list):
            raise UpstreamError(f"Unexpected commit list payload for {branch}")
        return data

    async def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        url = f"{self.api_base}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, headers=self._get_headers(), params=params)
        except httpx.RequestError as e:
            raise UpstreamError(f"GitHub request failed: {e}") from e

        if response.status_code != 200:
            if response.status_code == 403:
                logger.warning("GitHub API returned 403 (rate limit or missing token)")
            raise UpstreamError(
                f"GitHub API error: {response.status_code} for {path}",
                status_code=response.status_code,
            )

        return response.json()

    def _get_headers(self) -> dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        return headers
