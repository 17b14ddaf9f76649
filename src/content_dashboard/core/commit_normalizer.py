"""Normalize commit records from push events and the commits API."""

from typing import Any

from content_dashboard.core.entities import Commit, CommitAuthor, now_timestamp


def _files_by_status(files: list[dict[str, Any]], status: str) -> list[str]:
    return [f.get("filename", "") for f in files if f.get("status") == status and f.get("filename")]


def normalize_commit(raw: dict[str, Any]) -> Commit:
    """
    Build a canonical commit from either payload shape.

    Push events carry `id`, `message`, `timestamp`, `url` and the
    `added`/`removed`/`modified` lists. The commits API nests message and
    author under `commit` and reports per-file `status` instead.
    """
    api_commit = raw.get("commit") or {}
    api_author = api_commit.get("author") or {}
    push_author = raw.get("author") if isinstance(raw.get("author"), dict) else {}

    files = raw.get("files") or []
    added = raw.get("added")
    removed = raw.get("removed")
    modified = raw.get("modified")
    if files and added is None and removed is None and modified is None:
        added = _files_by_status(files, "added")
        removed = _files_by_status(files, "removed")
        modified = [
            f.get("filename", "") for f in files
            if f.get("status") not in ("added", "removed") and f.get("filename")
        ]

    return Commit(
        id=raw.get("sha") or raw.get("id") or "",
        message=api_commit.get("message") or raw.get("message") or "",
        timestamp=api_author.get("date") or raw.get("timestamp") or now_timestamp(),
        url=raw.get("html_url") or raw.get("url") or "",
        author=CommitAuthor(
            name=api_author.get("name") or push_author.get("name") or "Unknown",
            email=api_author.get("email") or push_author.get("email") or "",
        ),
        added=list(added or []),
        removed=list(removed or []),
        modified=list(modified or []),
    )
