"""Core domain entities."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class ContentSource(str, Enum):
    """Origin of an aggregated content item."""

    BLOG = "blog"
    YOUTUBE = "youtube"
    DOCS = "docs"
    CHANGELOG = "changelog"


def format_timestamp(value: datetime) -> str:
    """Render a datetime as UTC ISO-8601 with milliseconds and a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def now_timestamp() -> str:
    return format_timestamp(datetime.now(timezone.utc))


@dataclass
class Category:
    """Static topical tag assigned through keyword matching."""

    id: str
    name: str
    color: str
    keywords: tuple[str, ...]
    description: str = ""


@dataclass
class ContentItem:
    """Item parsed from a feed or API, recomputed on every fetch."""

    title: str
    description: str
    url: str
    published_at: str
    source: ContentSource
    author: Optional[str] = None
    categories: list[str] = field(default_factory=list)
    id: Optional[str] = None
    thumbnail: Optional[str] = None
    duration: Optional[str] = None
    last_modified: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError("Title cannot be empty")
        if not self.url:
            raise ValueError("URL cannot be empty")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "publishedAt": self.published_at,
            "source": self.source.value,
            "categories": list(self.categories),
        }
        optional = {
            "id": self.id,
            "author": self.author,
            "thumbnail": self.thumbnail,
            "duration": self.duration,
            "lastModified": self.last_modified,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data


@dataclass
class FilesChanged:
    """Documentation files touched by a commit, split by change kind."""

    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "added": list(self.added),
            "removed": list(self.removed),
            "modified": list(self.modified),
        }


@dataclass
class ChangelogEntry:
    """Persisted record summarizing one documentation-affecting commit."""

    id: str
    title: str
    description: str
    url: str
    published_at: str
    author: str
    commit_id: str
    files_changed: FilesChanged
    ai_summary: str
    categories: list[str] = field(default_factory=lambda: ["technical", "documentation"])
    source: str = ContentSource.DOCS.value

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Entry id cannot be empty")
        if not self.categories:
            raise ValueError("Categories cannot be empty")

    @staticmethod
    def id_for_commit(commit_id: str) -> str:
        return f"docs-{commit_id}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "publishedAt": self.published_at,
            "source": self.source,
            "categories": list(self.categories),
            "commitId": self.commit_id,
            "author": self.author,
            "filesChanged": self.files_changed.to_dict(),
            "aiSummary": self.ai_summary,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChangelogEntry":
        files = data.get("filesChanged") or {}
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            description=data.get("description", ""),
            url=data.get("url", ""),
            published_at=data.get("publishedAt", ""),
            author=data.get("author", ""),
            commit_id=data.get("commitId", ""),
            files_changed=FilesChanged(
                added=list(files.get("added", [])),
                removed=list(files.get("removed", [])),
                modified=list(files.get("modified", [])),
            ),
            ai_summary=data.get("aiSummary", ""),
            categories=list(data.get("categories") or ["technical"]),
            source=data.get("source", ContentSource.DOCS.value),
        )


@dataclass
class CommitAuthor:
    name: str = "Unknown"
    email: str = ""


@dataclass
class Commit:
    """Canonical commit record shared by the webhook, trigger and poller."""

    id: str
    message: str
    timestamp: str
    url: str
    author: CommitAuthor
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)

    @property
    def headline(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n")[0]


@dataclass
class CommitFile:
    """File change details as reported by the version-control API."""

    filename: str
    status: str = "modified"
    additions: int = 0
    deletions: int = 0
    changes: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CommitFile":
        return cls(
            filename=data.get("filename", ""),
            status=data.get("status", "modified"),
            additions=int(data.get("additions") or 0),
            deletions=int(data.get("deletions") or 0),
            changes=int(data.get("changes") or 0),
        )
