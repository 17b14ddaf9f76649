"""Local JSON file backend for the changelog."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from content_dashboard.core import ChangelogBackend, StorageError

logger = logging.getLogger(__name__)


class FileChangelogBackend(ChangelogBackend):
    """Store the changelog list as a single JSON array file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    async def read(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            logger.debug("No local changelog file at %s", self.path)
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e

        logger.debug("Loaded %d changelog entries from %s", len(data), self.path)
        return data

    async def write(self, entries: list[dict[str, Any]]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(entries, indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e
