"""Deduplicating, capacity-bounded store for docs changelog entries."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from content_dashboard.core.entities import ChangelogEntry, parse_timestamp
from content_dashboard.core.errors import StorageError
from content_dashboard.core.interfaces import ChangelogBackend

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 100


class ChangelogStore:
    """Keep the newest-first changelog list in a pluggable backend."""

    def __init__(self, backend: ChangelogBackend, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        self.backend = backend
        self.max_entries = max_entries

    async def save(self, entry: ChangelogEntry) -> None:
        """Insert or replace an entry keyed by its id."""
        entries = await self._read()

        index = next((i for i, existing in enumerate(entries) if existing.get("id") == entry.id), None)
        if index is not None:
            logger.info("Changelog entry %s already exists, updating", entry.id)
            entries[index] = entry.to_dict()
        else:
            entries.insert(0, entry.to_dict())

        try:
            await self.backend.write(entries[: self.max_entries])
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Could not write changelog: {e}") from e

        logger.info("Saved changelog entry %s", entry.id)

    async def load(self) -> list[ChangelogEntry]:
        """Return stored entries, newest first."""
        entries = []
        for data in await self._read():
            try:
                entries.append(ChangelogEntry.from_dict(data))
            except (KeyError, ValueError) as e:
                logger.warning("Skipping malformed changelog record: %s", e)
        return entries

    async def get(self, entry_id: str) -> Optional[ChangelogEntry]:
        return next((e for e in await self.load() if e.id == entry_id), None)

    async def recent(self, days: int, now: Optional[datetime] = None) -> list[ChangelogEntry]:
        """Entries published within the last `days` days."""
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=days)
        result = []
        for entry in await self.load():
            try:
                if parse_timestamp(entry.published_at) >= cutoff:
                    result.append(entry)
            except ValueError:
                result.append(entry)
        return result

    async def _read(self) -> list[dict]:
        try:
            data = await self.backend.read()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Could not read changelog: {e}") from e

        if not isinstance(data, list):
            raise StorageError("Stored changelog is not a list")
        return list(data)
