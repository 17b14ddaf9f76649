"""Business logic use cases."""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional

from content_dashboard.config import SummaryConfig
from content_dashboard.core import (
    ChangelogEntry,
    ChangelogStore,
    Commit,
    CommitFile,
    ContentItem,
    ContentSource,
    FilesChanged,
    ItemSource,
    LLMClient,
    SignatureError,
    VersionControlClient,
    detect_categories,
    filter_doc_files,
    normalize_commit,
    verify_signature,
)
from content_dashboard.core.entities import format_timestamp, now_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _sort_key(item: ContentItem) -> datetime:
    try:
        return parse_timestamp(item.published_at)
    except ValueError:
        return _EPOCH


class SummaryGenerator:
    """Produce a one-line description of a commit's documentation changes."""

    def __init__(
        self,
        llm_client: Optional[LLMClient],
        config: SummaryConfig,
        repository: str = "",
        max_tokens: Optional[int] = None,
    ) -> None:
        self.llm_client = llm_client
        self.config = config
        self.repository = repository
        self.max_tokens = max_tokens

    async def summarize(self, commit: Commit, doc_files: list[CommitFile]) -> str:
        """Summarize via the text-generation client, falling back to a template.

        Never raises.
        """
        if self.llm_client is None:
            logger.info("Text generation not configured, using fallback summary")
            return self.fallback(doc_files)

        try:
            summary = await asyncio.wait_for(
                self.llm_client.generate(
                    prompt=self.build_prompt(commit, doc_files),
                    system=self.config.system,
                    max_tokens=self.max_tokens,
                ),
                timeout=self.config.timeout,
            )
        except Exception as e:
            logger.warning("Summary generation failed for %s: %r", commit.id, e)
            return self.fallback(doc_files)

        summary = (summary or "").strip()
        return summary or self.fallback(doc_files)

    def build_prompt(self, commit: Commit, doc_files: list[CommitFile]) -> str:
        file_details = "\n".join(
            f"- {f.filename} ({f.status}): +{f.additions} -{f.deletions} lines"
            for f in doc_files
        )
        return self.config.user.format(
            repository=self.repository,
            message=commit.message,
            file_count=len(doc_files),
            author=commit.author.name,
            file_details=file_details,
        )

    def fallback(self, doc_files: list[CommitFile]) -> str:
        """Deterministic template summary, truncated to the configured length."""
        names = ", ".join(f.filename for f in doc_files)
        summary = f"Documentation changes in {len(doc_files)} file(s)"

        if self.config.detailed_fallback:
            for status in ("added", "modified", "removed"):
                count = sum(1 for f in doc_files if f.status == status)
                if count:
                    summary += f", {count} {status}"
            summary += f". Files: {names}"
        else:
            summary += f": {names}"

        limit = self.config.max_chars
        if len(summary) > limit:
            summary = summary[: limit - 3] + "..."
        return summary


class DocsChangelogService:
    """Turn documentation-touching commits into stored changelog entries."""

    def __init__(
        self,
        vcs_client: VersionControlClient,
        summary_generator: SummaryGenerator,
        store: ChangelogStore,
    ) -> None:
        self.vcs_client = vcs_client
        self.summary_generator = summary_generator
        self.store = store

    async def process_commit(self, commit: Commit) -> Optional[ChangelogEntry]:
        """Fetch file details for a commit and record it if it touches docs."""
        logger.info("Processing commit %s: %s", commit.id, commit.headline)
        details = await self.vcs_client.get_commit(commit.id)
        files = [CommitFile.from_api(f) for f in details.get("files") or []]
        return await self.record(commit, files)

    async def record(self, commit: Commit, files: list[CommitFile]) -> Optional[ChangelogEntry]:
        """Summarize and save a commit given its changed files."""
        doc_files = filter_doc_files(files)
        if not doc_files:
            logger.info("No documentation files changed in %s", commit.id)
            return None

        summary = await self.summary_generator.summarize(commit, doc_files)
        entry = ChangelogEntry(
            id=ChangelogEntry.id_for_commit(commit.id),
            title=f"Docs Update: {commit.headline}",
            description=summary,
            url=commit.url,
            published_at=self._published_at(commit.timestamp),
            author=commit.author.name,
            commit_id=commit.id,
            files_changed=self._files_changed(commit, doc_files),
            ai_summary=summary,
        )
        await self.store.save(entry)
        return entry

    async def process_batch(self, commits: list[Commit]) -> list[ChangelogEntry]:
        """Process commits one by one; a failing commit does not stop the batch."""
        entries = []
        for commit in commits:
            if not commit.id:
                logger.warning("Commit id is empty after normalization, skipping")
                continue
            try:
                entry = await self.process_commit(commit)
            except Exception as e:
                logger.error("Error processing commit %s: %s", commit.id, e)
                continue
            if entry is not None:
                entries.append(entry)
        return entries

    async def trigger_recent(self, branch: str, per_page: int = 10) -> list[dict[str, Any]]:
        """Process the latest commits on a branch and report the doc-touching ones."""
        commits = await self.vcs_client.list_commits(branch, per_page=per_page)
        logger.info("Found %d recent commits on %s", len(commits), branch)

        results = []
        for listed in commits:
            sha = listed.get("sha", "")
            try:
                details = await self.vcs_client.get_commit(sha)
                files = [CommitFile.from_api(f) for f in details.get("files") or []]
                doc_files = filter_doc_files(files)
                if not doc_files:
                    continue

                commit = normalize_commit(details)
                await self.record(commit, files)
                results.append({
                    "sha": commit.id,
                    "message": commit.message,
                    "author": commit.author.name,
                    "date": commit.timestamp,
                    "filesChanged": len(doc_files),
                    "files": [f.filename for f in doc_files],
                })
            except Exception as e:
                logger.error("Error processing commit %s: %s", sha, e)

        return results

    @staticmethod
    def _files_changed(commit: Commit, doc_files: list[CommitFile]) -> FilesChanged:
        """Doc paths split by change kind, from the commit lists or the fetched file statuses."""
        listed = FilesChanged(
            added=filter_doc_files(commit.added),
            removed=filter_doc_files(commit.removed),
            modified=filter_doc_files(commit.modified),
        )
        if listed.added or listed.removed or listed.modified:
            return listed
        # Commit list items carry no file lists
        return FilesChanged(
            added=[f.filename for f in doc_files if f.status == "added"],
            removed=[f.filename for f in doc_files if f.status == "removed"],
            modified=[f.filename for f in doc_files if f.status not in ("added", "removed")],
        )

    @staticmethod
    def _published_at(timestamp: str) -> str:
        try:
            return format_timestamp(parse_timestamp(timestamp))
        except ValueError:
            return timestamp


@dataclass
class WebhookResult:
    """Outcome of a webhook delivery."""

    state: str
    status_code: int
    payload: dict[str, Any]
    entries: list[ChangelogEntry] = field(default_factory=list)


class WebhookIngestService:
    """Verify, scope-check and process push deliveries."""

    def __init__(
        self,
        changelog_service: DocsChangelogService,
        secret: str,
        repository: str,
        branches: list[str],
    ) -> None:
        self.changelog_service = changelog_service
        self.secret = secret
        self.repository = repository
        self.branches = branches

    @property
    def accepted_refs(self) -> set[str]:
        return {f"refs/heads/{branch}" for branch in self.branches}

    def verify(self, body: bytes, signature: Optional[str]) -> None:
        """Raise SignatureError unless the body carries a valid signature."""
        if not signature:
            raise SignatureError("No signature provided")
        if not self.secret:
            raise SignatureError("Webhook secret not configured")
        if not verify_signature(body, signature, self.secret):
            raise SignatureError("Invalid signature")

    async def handle(self, body: bytes, signature: Optional[str]) -> WebhookResult:
        try:
            self.verify(body, signature)
        except SignatureError as e:
            logger.error("Rejected webhook delivery: %s", e)
            return WebhookResult("rejected", 401, {"error": str(e)})

        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error("Webhook body is not valid JSON: %s", e)
            return WebhookResult("rejected", 400, {"error": "Invalid JSON payload"})

        if not isinstance(payload, dict):
            return WebhookResult("rejected", 400, {"error": "Invalid JSON payload"})

        ref = payload.get("ref", "")
        if ref not in self.accepted_refs:
            logger.info("Ignoring push to branch %s", ref)
            return WebhookResult(
                "skipped", 200, {"message": f"Ignored non-{'/'.join(self.branches)} branch"}
            )

        full_name = (payload.get("repository") or {}).get("full_name", "")
        if full_name != self.repository:
            logger.info("Ignoring push to repository %s", full_name)
            repo_name = self.repository.split("/")[-1]
            return WebhookResult("skipped", 200, {"message": f"Ignored non-{repo_name} repository"})

        raw_commits = payload.get("commits") or []
        logger.info("Processing %d commits from %s", len(raw_commits), full_name)

        commits = [normalize_commit(raw) for raw in raw_commits if isinstance(raw, dict)]
        entries = await self.changelog_service.process_batch(commits)

        return WebhookResult(
            "accepted",
            200,
            {
                "message": "Webhook processed successfully",
                "commitsProcessed": len(raw_commits),
            },
            entries=entries,
        )


class ContentService:
    """Serve aggregated content with recency filtering and category tags."""

    def __init__(
        self,
        sources: dict[ContentSource, ItemSource],
        store: ChangelogStore,
        days_to_show: int = 90,
    ) -> None:
        self.sources = sources
        self.store = store
        self.days_to_show = days_to_show

    async def items(self, source: ContentSource, now: Optional[datetime] = None) -> list[ContentItem]:
        """Fetch one source's items within the rolling window, tagged."""
        item_source = self.sources.get(source)
        if item_source is None:
            return []

        since = (now or datetime.now(timezone.utc)) - timedelta(days=self.days_to_show)
        items = await item_source.fetch_items(since)
        for item in items:
            item.categories = detect_categories(item.title, item.description, item.source.value)
        return items

    async def docs_changelog(self, days: Optional[int] = None) -> list[ChangelogEntry]:
        entries = await self.store.recent(self.days_to_show if days is None else days)
        for entry in entries:
            entry.categories = sorted(
                set(entry.categories) | set(detect_categories(entry.title, entry.description, entry.source))
            )
        return entries

    async def all_content(self) -> list[ContentItem]:
        """Merge every source newest-first; a failing source is skipped."""
        merged: list[ContentItem] = []

        for source in self.sources:
            try:
                merged.extend(await self.items(source))
            except Exception as e:
                logger.warning("Source %s failed: %s", source.value, e)

        try:
            merged.extend(self._entry_to_item(e) for e in await self.docs_changelog())
        except Exception as e:
            logger.warning("Docs changelog unavailable: %s", e)

        merged.sort(key=_sort_key, reverse=True)
        return merged

    @staticmethod
    def _entry_to_item(entry: ChangelogEntry) -> ContentItem:
        return ContentItem(
            id=entry.id,
            title=entry.title,
            description=entry.description,
            url=entry.url,
            published_at=entry.published_at,
            source=ContentSource.DOCS,
            author=entry.author,
            categories=list(entry.categories),
            last_modified=entry.published_at,
        )


class CommitPoller:
    """Poll the docs repository and feed new commits through the pipeline."""

    def __init__(
        self,
        changelog_service: DocsChangelogService,
        vcs_client: VersionControlClient,
        branch: str,
        state_file: Path,
        per_page: int = 10,
    ) -> None:
        self.changelog_service = changelog_service
        self.vcs_client = vcs_client
        self.branch = branch
        self.state_file = state_file
        self.per_page = per_page

    def load_state(self) -> Optional[str]:
        """Return the last processed sha, if any."""
        if not self.state_file.exists():
            return None
        try:
            state = json.loads(self.state_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read poller state, starting fresh: %s", e)
            return None
        return state.get("lastProcessedSha")

    def save_state(self, sha: str) -> None:
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        self.state_file.write_text(
            json.dumps({"lastProcessedSha": sha, "lastUpdated": now_timestamp()}),
            encoding="utf-8",
        )

    async def poll_once(self) -> list[ChangelogEntry]:
        """Process commits newer than the last processed sha."""
        commits = await self.vcs_client.list_commits(self.branch, per_page=self.per_page)
        if not commits:
            logger.info("No commits found")
            return []

        latest_sha = commits[0].get("sha", "")
        last_sha = self.load_state()
        if last_sha == latest_sha:
            logger.info("No new commits since last check")
            return []

        new_commits = commits
        if last_sha:
            index = next((i for i, c in enumerate(commits) if c.get("sha") == last_sha), None)
            if index is not None:
                new_commits = commits[:index]

        logger.info("Found %d new commits", len(new_commits))
        # Oldest first so the store keeps newest-first order
        normalized = [normalize_commit(c) for c in reversed(new_commits)]
        entries = await self.changelog_service.process_batch(normalized)

        self.save_state(latest_sha)
        return entries

    async def run(self, interval_seconds: float, iterations: Optional[int] = None) -> None:
        """Poll forever, or `iterations` times."""
        count = 0
        while iterations is None or count < iterations:
            try:
                await self.poll_once()
            except Exception as e:
                logger.error("Polling failed: %s", e)
            count += 1
            if iterations is None or count < iterations:
                await asyncio.sleep(interval_seconds)
