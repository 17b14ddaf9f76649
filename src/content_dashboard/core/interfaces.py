"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from content_dashboard.core.entities import ContentItem


class ItemSource(ABC):
    """Interface for fetching content items from various sources."""

    @abstractmethod
    async def fetch_items(self, since: Optional[datetime] = None) -> list[ContentItem]:
        """Fetch items, optionally limited to those published after `since`."""
        pass


class LLMClient(ABC):
    """Interface for text generation."""

    @abstractmethod
    async def generate(self, prompt: str, system: str, max_tokens: Optional[int] = None) -> str:
        """Generate a completion for the prompt."""
        pass


class VersionControlClient(ABC):
    """Interface for reading commits from the upstream repository."""

    @abstractmethod
    async def get_commit(self, sha: str) -> dict[str, Any]:
        """Fetch a single commit with its file list."""
        pass

    @abstractmethod
    async def list_commits(self, branch: str, per_page: int = 10) -> list[dict[str, Any]]:
        """List the most recent commits on a branch, newest first."""
        pass


class ChangelogBackend(ABC):
    """Persistence strategy for the serialized changelog list."""

    @abstractmethod
    async def read(self) -> list[dict[str, Any]]:
        """Return the stored list, or an empty list when nothing is stored."""
        pass

    @abstractmethod
    async def write(self, entries: list[dict[str, Any]]) -> None:
        """Replace the stored list."""
        pass

    async def close(self) -> None:
        """Release any held connection."""
        return None
