"""Tests for commit summary generation."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from content_dashboard.config import SummaryConfig
from content_dashboard.core import Commit, CommitAuthor, CommitFile
from content_dashboard.use_cases import SummaryGenerator


@pytest.fixture
def commit() -> Commit:
    return Commit(
        id="abc123",
        message="Fix typo in intro",
        timestamp="2024-01-01T00:00:00Z",
        url="https://github.com/getsentry/sentry-docs/commit/abc123",
        author=CommitAuthor(name="Jane"),
        modified=["docs/intro.md"],
    )


@pytest.fixture
def doc_files() -> list[CommitFile]:
    return [CommitFile(filename="docs/intro.md", status="modified", additions=3, deletions=1)]


@pytest.mark.asyncio
async def test_uses_generated_text(commit: Commit, doc_files: list[CommitFile]) -> None:
    llm = AsyncMock()
    llm.generate.return_value = "  Fixed a typo in the introduction.  "
    generator = SummaryGenerator(llm, SummaryConfig(), repository="getsentry/sentry-docs")

    summary = await generator.summarize(commit, doc_files)

    assert summary == "Fixed a typo in the introduction."
    prompt = llm.generate.call_args.kwargs["prompt"]
    assert "getsentry/sentry-docs" in prompt
    assert "Fix typo in intro" in prompt
    assert "- docs/intro.md (modified): +3 -1 lines" in prompt


@pytest.mark.asyncio
async def test_falls_back_when_generation_fails(commit: Commit, doc_files: list[CommitFile]) -> None:
    llm = AsyncMock()
    llm.generate.side_effect = RuntimeError("503 from upstream")
    generator = SummaryGenerator(llm, SummaryConfig())

    summary = await generator.summarize(commit, doc_files)

    assert summary == "Documentation changes in 1 file(s): docs/intro.md"


@pytest.mark.asyncio
async def test_falls_back_on_empty_output(commit: Commit, doc_files: list[CommitFile]) -> None:
    llm = AsyncMock()
    llm.generate.return_value = "   "
    generator = SummaryGenerator(llm, SummaryConfig())

    assert await generator.summarize(commit, doc_files) == "Documentation changes in 1 file(s): docs/intro.md"


@pytest.mark.asyncio
async def test_falls_back_on_timeout(commit: Commit, doc_files: list[CommitFile]) -> None:
    async def slow(**kwargs) -> str:
        await asyncio.sleep(1)
        return "too late"

    llm = AsyncMock()
    llm.generate.side_effect = slow
    generator = SummaryGenerator(llm, SummaryConfig(timeout=0.01))

    assert await generator.summarize(commit, doc_files) == "Documentation changes in 1 file(s): docs/intro.md"


@pytest.mark.asyncio
async def test_without_client_uses_fallback(commit: Commit, doc_files: list[CommitFile]) -> None:
    generator = SummaryGenerator(None, SummaryConfig())

    assert await generator.summarize(commit, doc_files) == "Documentation changes in 1 file(s): docs/intro.md"


def test_detailed_fallback_counts_statuses() -> None:
    files = [
        CommitFile(filename="docs/a.md", status="added"),
        CommitFile(filename="docs/b.md", status="modified"),
        CommitFile(filename="docs/c.md", status="modified"),
        CommitFile(filename="docs/d.md", status="removed"),
    ]
    generator = SummaryGenerator(None, SummaryConfig(detailed_fallback=True))

    assert generator.fallback(files) == (
        "Documentation changes in 4 file(s), 1 added, 2 modified, 1 removed. "
        "Files: docs/a.md, docs/b.md, docs/c.md, docs/d.md"
    )


def test_fallback_is_truncated() -> None:
    files = [CommitFile(filename=f"docs/page-{i}.md") for i in range(50)]
    generator = SummaryGenerator(None, SummaryConfig(max_chars=80))

    summary = generator.fallback(files)

    assert len(summary) == 80
    assert summary.endswith("...")
