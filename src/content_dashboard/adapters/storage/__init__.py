"""Changelog persistence backends."""

from content_dashboard.adapters.storage.file_backend import FileChangelogBackend
from content_dashboard.adapters.storage.redis_backend import RedisChangelogBackend
from content_dashboard.config import Settings
from content_dashboard.core import ChangelogBackend


def build_backend(settings: Settings) -> ChangelogBackend:
    """Pick the configured backend once at startup."""
    backend = settings.storage.backend.lower()
    if backend == "redis":
        if not settings.redis_url:
            raise ValueError("STORAGE_BACKEND=redis requires REDIS_URL")
        return RedisChangelogBackend(settings.redis_url, settings.storage.redis_key)
    if backend == "file":
        return FileChangelogBackend(settings.storage.path)
    raise ValueError(f"Unknown storage backend: {settings.storage.backend}")


__all__ = ["FileChangelogBackend", "RedisChangelogBackend", "build_backend"]
