"""CLI entry point for the content dashboard."""

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from content_dashboard.api import AppContext, build_context, create_app
from content_dashboard.config import Settings, get_settings
from content_dashboard.use_cases import CommitPoller

app = typer.Typer(help="Aggregate blog, video, changelog and docs content.")


def _setup(config: Path, verbose: bool) -> Settings:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return get_settings(config)


def _print_credentials(settings: Settings) -> None:
    print("\n🔑 Credentials:")
    checks = [
        (settings.github_token, "GITHUB_TOKEN", "commit details and manual trigger"),
        (settings.anthropic_api_key, "ANTHROPIC_API_KEY", "AI commit summaries (fallback template otherwise)"),
        (settings.webhook_secret, "GITHUB_WEBHOOK_SECRET", "webhook signature checks"),
        (settings.youtube_api_key, "YOUTUBE_API_KEY", "YouTube videos"),
    ]
    for value, name, purpose in checks:
        mark = "✓" if value else "✗"
        print(f"  {mark} {name} - {purpose}")
    print(f"  • Storage backend: {settings.storage.backend}")


@app.command()
def serve(
    host: str = "127.0.0.1",
    port: int = 3000,
    config: Path = typer.Option(Path("config.yaml"), help="Path to YAML config"),
    verbose: bool = False,
) -> None:
    """Run the HTTP API."""
    settings = _setup(config, verbose)
    _print_credentials(settings)
    uvicorn.run(create_app(build_context(settings)), host=host, port=port)


@app.command()
def poll(
    once: bool = typer.Option(False, "--once", help="Check once and exit"),
    config: Path = typer.Option(Path("config.yaml"), help="Path to YAML config"),
    verbose: bool = False,
) -> None:
    """Poll the docs repository for new commits."""
    settings = _setup(config, verbose)
    context = build_context(settings)
    poller = CommitPoller(
        context.changelog_service,
        context.github_client,
        branch=settings.branches[0],
        state_file=settings.poll.state_file,
        per_page=settings.github.commits_per_page,
    )

    print(f"\n🔍 Polling {settings.repository}@{settings.branches[0]}")
    if once:
        entries = asyncio.run(_poll_once(context, poller))
        print(f"✓ New changelog entries: {len(entries)}")
        return

    print(f"  • Interval: {settings.poll.interval_minutes} min")
    asyncio.run(_run_poller(context, poller, settings.poll_interval_seconds))


async def _poll_once(context: AppContext, poller: CommitPoller) -> list:
    try:
        return await poller.poll_once()
    finally:
        await context.store.backend.close()


async def _run_poller(context: AppContext, poller: CommitPoller, interval: float) -> None:
    try:
        await poller.run(interval)
    finally:
        await context.store.backend.close()


@app.command()
def trigger(
    count: Optional[int] = typer.Option(None, help="Number of recent commits to inspect"),
    seed: bool = typer.Option(False, "--seed", help="Backfill with the detailed fallback summary"),
    config: Path = typer.Option(Path("config.yaml"), help="Path to YAML config"),
    verbose: bool = False,
) -> None:
    """Process recent commits without a webhook."""
    settings = _setup(config, verbose)
    if not settings.github_token:
        print("✗ GITHUB_TOKEN is required")
        raise typer.Exit(code=1)

    per_page = count or (settings.github.seed_commits if seed else settings.github.commits_per_page)
    context = build_context(settings, detailed_fallback=True if seed else None)

    print(f"\n📥 Inspecting {per_page} commits from {settings.repository}")
    results = asyncio.run(_trigger(context, settings.branches[0], per_page))

    print(f"✓ Documentation commits processed: {len(results)}")
    for result in results:
        headline = result["message"].split("\n")[0]
        print(f"  • {result['sha'][:7]} {headline[:70]} ({result['filesChanged']} files)")


async def _trigger(context: AppContext, branch: str, per_page: int) -> list[dict]:
    try:
        return await context.changelog_service.trigger_recent(branch, per_page=per_page)
    finally:
        await context.store.backend.close()


@app.command()
def export(
    output: Optional[Path] = None,
    config: Path = typer.Option(Path("config.yaml"), help="Path to YAML config"),
    verbose: bool = False,
) -> None:
    """Write a markdown export of all content."""
    settings = _setup(config, verbose)
    context = build_context(settings)
    markdown = asyncio.run(_export(context))

    if output is None:
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        output = Path("exports") / f"{timestamp}_content.md"
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(markdown, encoding="utf-8")
    print(f"📄 Export saved to {output}")


async def _export(context: AppContext) -> str:
    try:
        items = await context.content_service.all_content()
        return context.markdown_exporter.generate(items, datetime.now(timezone.utc))
    finally:
        await context.store.backend.close()


if __name__ == "__main__":
    app()
