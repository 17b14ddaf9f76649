"""Redis key backend for the changelog."""

import json
import logging
from typing import Any, Optional

import redis.asyncio as aioredis

from content_dashboard.core import ChangelogBackend, StorageError

logger = logging.getLogger(__name__)


class RedisChangelogBackend(ChangelogBackend):
    """Store the changelog list as a JSON string under one Redis key."""

    def __init__(self, url: str, key: str = "docs-changelog") -> None:
        if not url:
            raise ValueError("Redis URL cannot be empty")
        self.url = url
        self.key = key
        self._client: Optional[aioredis.Redis] = None

    async def _get_client(self) -> aioredis.Redis:
        """Connect on first use and reuse the client afterwards."""
        if self._client is None:
            # rediss:// URLs enable TLS in from_url
            client = aioredis.from_url(
                self.url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            try:
                await client.ping()
            except aioredis.RedisError as e:
                await client.aclose()
                raise StorageError(f"Failed to connect to Redis: {e}") from e
            self._client = client
            logger.info("Connected to Redis changelog store")
        return self._client

    async def read(self) -> list[dict[str, Any]]:
        client = await self._get_client()
        try:
            raw = await client.get(self.key)
        except aioredis.RedisError as e:
            raise StorageError(f"Redis read failed: {e}") from e

        if not raw:
            return []
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Stored changelog under {self.key} is not JSON: {e}") from e

    async def write(self, entries: list[dict[str, Any]]) -> None:
        client = await self._get_client()
        try:
            await client.set(self.key, json.dumps(entries, ensure_ascii=False))
        except aioredis.RedisError as e:
            raise StorageError(f"Redis write failed: {e}") from e

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
