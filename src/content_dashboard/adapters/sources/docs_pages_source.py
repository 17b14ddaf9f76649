"""Known documentation pages recorded by the docs monitor."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from content_dashboard.core import ContentItem, ContentSource, ItemSource, StorageError
from content_dashboard.core.entities import parse_timestamp

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _modified(item: ContentItem) -> datetime:
    try:
        return parse_timestamp(item.last_modified or "")
    except ValueError:
        return _EPOCH


class DocsPagesSource(ItemSource):
    """Read the `knownPages` list from the docs page store."""

    name = "Docs"

    def __init__(self, path: Path) -> None:
        self.path = path

    async def fetch_items(self, since: Optional[datetime] = None) -> list[ContentItem]:
        """Return all known pages, newest modification first.

        Pages are not filtered by date; `since` is ignored.
        """
        if not self.path.exists():
            logger.info("Docs storage file not found, returning empty list")
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e

        pages = []
        for page in data.get("knownPages", []):
            if not page.get("title") or not page.get("url"):
                continue
            modified = page.get("lastModified", "")
            pages.append(ContentItem(
                title=page["title"],
                description=page.get("description", ""),
                url=page["url"],
                published_at=modified,
                source=ContentSource.DOCS,
                last_modified=modified,
            ))

        pages.sort(key=_modified, reverse=True)
        return pages
