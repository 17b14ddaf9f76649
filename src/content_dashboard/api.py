"""HTTP API for the content dashboard."""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from content_dashboard.adapters.digest import MarkdownExporter, RSSFeedGenerator
from content_dashboard.adapters.github import GitHubClient
from content_dashboard.adapters.llm import ClaudeClient
from content_dashboard.adapters.sources import DocsPagesSource, RSSFeedSource, YouTubeSource
from content_dashboard.adapters.storage import build_backend
from content_dashboard.config import Settings
from content_dashboard.core import ChangelogStore, ContentSource
from content_dashboard.core.entities import now_timestamp
from content_dashboard.use_cases import (
    ContentService,
    DocsChangelogService,
    SummaryGenerator,
    WebhookIngestService,
)

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Services shared by the request handlers."""

    settings: Settings
    store: ChangelogStore
    github_client: GitHubClient
    changelog_service: DocsChangelogService
    webhook_service: WebhookIngestService
    content_service: ContentService
    markdown_exporter: MarkdownExporter
    rss_generator: RSSFeedGenerator


def build_context(settings: Settings, detailed_fallback: Optional[bool] = None) -> AppContext:
    """Construct every service from settings. Clients stay absent without credentials."""
    store = ChangelogStore(build_backend(settings), max_entries=settings.storage.max_entries)
    github_client = GitHubClient(
        repository=settings.repository,
        token=settings.github_token,
        api_base=settings.github.api_base,
        timeout=settings.github.timeout,
    )
    llm_client = ClaudeClient(settings) if settings.anthropic_api_key else None

    summary_config = settings.summary
    if detailed_fallback is not None:
        summary_config = replace(summary_config, detailed_fallback=detailed_fallback)

    changelog_service = DocsChangelogService(
        vcs_client=github_client,
        summary_generator=SummaryGenerator(
            llm_client,
            summary_config,
            repository=settings.repository,
            max_tokens=settings.claude.max_tokens,
        ),
        store=store,
    )

    feeds = settings.feeds
    content_service = ContentService(
        sources={
            ContentSource.BLOG: RSSFeedSource(feeds.blog_url, ContentSource.BLOG, timeout=feeds.timeout),
            ContentSource.YOUTUBE: YouTubeSource(
                settings.youtube_api_key,
                feeds.youtube_channel_id,
                max_results=feeds.youtube_max_results,
                timeout=feeds.timeout,
            ),
            ContentSource.DOCS: DocsPagesSource(feeds.docs_pages_file),
            ContentSource.CHANGELOG: RSSFeedSource(
                feeds.changelog_url, ContentSource.CHANGELOG, timeout=feeds.timeout
            ),
        },
        store=store,
        days_to_show=feeds.days_to_show,
    )

    return AppContext(
        settings=settings,
        store=store,
        github_client=github_client,
        changelog_service=changelog_service,
        webhook_service=WebhookIngestService(
            changelog_service,
            secret=settings.webhook_secret,
            repository=settings.repository,
            branches=settings.branches,
        ),
        content_service=content_service,
        markdown_exporter=MarkdownExporter(settings.site.name),
        rss_generator=RSSFeedGenerator(
            title=settings.site.feed_title,
            link=settings.site.feed_link,
            description=settings.site.feed_description,
            self_url=f"{settings.site.url.rstrip('/')}/api/docs/feed",
        ),
    )


def _failure(message: str, error: Exception) -> JSONResponse:
    logger.error("%s: %s", message, error)
    return JSONResponse({"error": message, "details": str(error)}, status_code=500)


def create_app(context: AppContext) -> FastAPI:
    """Build the FastAPI application around a prepared context."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await context.store.backend.close()

    app = FastAPI(title=context.settings.site.name, lifespan=lifespan)
    app.state.context = context

    @app.get("/health")
    async def health():
        return {"status": "healthy", "timestamp": now_timestamp()}

    async def _source_items(source: ContentSource, message: str):
        try:
            items = await context.content_service.items(source)
        except Exception as e:
            return _failure(message, e)
        return [item.to_dict() for item in items]

    @app.get("/api/blog")
    async def blog():
        return await _source_items(ContentSource.BLOG, "Failed to fetch blog posts")

    @app.get("/api/youtube")
    async def youtube():
        return await _source_items(ContentSource.YOUTUBE, "Failed to fetch YouTube videos")

    @app.get("/api/changelog")
    async def changelog():
        return await _source_items(ContentSource.CHANGELOG, "Failed to fetch changelog entries")

    @app.get("/api/docs")
    async def docs():
        return await _source_items(ContentSource.DOCS, "Failed to fetch docs pages")

    @app.get("/api/docs/changelog")
    async def docs_changelog(days: Optional[int] = None):
        try:
            entries = await context.content_service.docs_changelog(days)
        except Exception as e:
            return _failure("Failed to load docs changelog", e)
        return [entry.to_dict() for entry in entries]

    @app.get("/api/docs/feed")
    async def docs_feed():
        try:
            entries = await context.store.load()
        except Exception as e:
            return _failure("Failed to generate feed", e)
        return Response(
            content=context.rss_generator.generate(entries),
            media_type="application/rss+xml",
            headers={"Cache-Control": "public, s-maxage=3600, stale-while-revalidate=86400"},
        )

    @app.get("/api/export/markdown")
    async def export_markdown():
        try:
            items = await context.content_service.all_content()
        except Exception as e:
            return _failure("Failed to generate markdown export", e)
        return PlainTextResponse(
            context.markdown_exporter.generate(items, datetime.now(timezone.utc)),
            media_type="text/markdown; charset=utf-8",
            headers={"Content-Disposition": 'attachment; filename="content-export.md"'},
        )

    @app.post("/api/github/webhook")
    async def github_webhook(request: Request):
        body = await request.body()
        signature = request.headers.get("x-hub-signature-256")
        try:
            result = await context.webhook_service.handle(body, signature)
        except Exception as e:
            return _failure("Failed to process webhook", e)
        return JSONResponse(result.payload, status_code=result.status_code)

    @app.get("/api/github/webhook")
    async def github_webhook_status():
        return {"message": "GitHub webhook endpoint is active", "timestamp": now_timestamp()}

    @app.post("/api/github/trigger")
    async def github_trigger():
        if not context.settings.github_token:
            return JSONResponse({"error": "GitHub token not configured"}, status_code=400)
        try:
            results = await context.changelog_service.trigger_recent(
                context.settings.branches[0],
                per_page=context.settings.github.commits_per_page,
            )
        except Exception as e:
            return _failure("Failed to trigger GitHub processing", e)
        return {
            "message": "Manual trigger completed",
            "commitsProcessed": len(results),
            "results": results,
        }

    @app.get("/api/github/trigger")
    async def github_trigger_status():
        return {
            "message": "GitHub trigger endpoint is active",
            "usage": "POST to this endpoint to manually process recent commits",
            "timestamp": now_timestamp(),
        }

    return app
