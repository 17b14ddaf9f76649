"""Shared fixtures."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from content_dashboard.config import SummaryConfig
from content_dashboard.core import ChangelogBackend, ChangelogStore
from content_dashboard.use_cases import DocsChangelogService, SummaryGenerator

REPOSITORY = "getsentry/sentry-docs"


class MemoryBackend(ChangelogBackend):
    """In-process backend holding the serialized list."""

    def __init__(self) -> None:
        self.data: list[dict[str, Any]] = []

    async def read(self) -> list[dict[str, Any]]:
        return list(self.data)

    async def write(self, entries: list[dict[str, Any]]) -> None:
        self.data = list(entries)


def commit_details(sha: str, files: list[tuple[str, str]], message: str = "Update docs") -> dict[str, Any]:
    """Commits API payload for a single commit."""
    return {
        "sha": sha,
        "html_url": f"https://github.com/{REPOSITORY}/commit/{sha}",
        "commit": {
            "message": message,
            "author": {"name": "Jane", "email": "jane@example.com", "date": "2024-01-01T00:00:00Z"},
        },
        "files": [
            {"filename": name, "status": status, "additions": 1, "deletions": 0, "changes": 1}
            for name, status in files
        ],
    }


@pytest.fixture
def store() -> ChangelogStore:
    return ChangelogStore(MemoryBackend())


@pytest.fixture
def vcs() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def changelog_service(vcs: AsyncMock, store: ChangelogStore) -> DocsChangelogService:
    return DocsChangelogService(vcs, SummaryGenerator(None, SummaryConfig()), store)
