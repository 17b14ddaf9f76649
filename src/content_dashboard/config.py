"""Configuration management."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


@dataclass
class GitHubConfig:
    """Docs repository settings."""
    repository: str = "getsentry/sentry-docs"
    branches: list[str] = field(default_factory=lambda: ["main", "master"])
    api_base: str = "https://api.github.com"
    commits_per_page: int = 10
    seed_commits: int = 50
    timeout: float = 15.0


@dataclass
class ClaudeConfig:
    """Claude API settings."""
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 200
    temperature: float = 0.3
    max_retries: int = 3
    initial_retry_delay: float = 2.0
    request_delay: float = 0.5
    timeout: float = 20.0


@dataclass
class SummaryConfig:
    """Commit summary settings."""
    max_chars: int = 300
    detailed_fallback: bool = False
    timeout: float = 30.0
    system: str = (
        "You are a technical writer who creates concise technical summaries of "
        "documentation changes. State what changed, no fluff."
    )
    user: str = (
        "Summarize these documentation changes from the {repository} repository "
        "in 2-3 sentences:\n\n"
        "Commit Message: {message}\n"
        "Files Changed: {file_count}\n"
        "Author: {author}\n\n"
        "File Details:\n{file_details}"
    )


@dataclass
class StorageConfig:
    """Changelog persistence settings."""
    backend: str = "file"
    path: Path = Path("data/docs-changelog.json")
    redis_key: str = "docs-changelog"
    max_entries: int = 100


@dataclass
class FeedsConfig:
    """Content source settings."""
    blog_url: str = "https://blog.sentry.io/feed.xml"
    changelog_url: str = "https://sentry.io/changelog/feed.xml"
    youtube_channel_id: str = "UCJQJAI7IZDmYvQw8tJ9KZqg"
    youtube_max_results: int = 50
    docs_pages_file: Path = Path("data/docs-pages.json")
    days_to_show: int = 90
    timeout: float = 15.0


@dataclass
class PollConfig:
    """Commit poller settings."""
    interval_minutes: float = 5
    state_file: Path = Path("data/github-polling-state.json")


@dataclass
class SiteConfig:
    """Published feed metadata."""
    name: str = "Sentry Content Aggregator"
    url: str = "http://localhost:3000"
    feed_title: str = "Sentry Documentation Changelog"
    feed_link: str = "https://docs.sentry.io/changelog"
    feed_description: str = "Recent updates to Sentry documentation"


@dataclass
class Settings:
    """Application settings."""

    # Secrets (from environment only)
    github_token: Optional[str] = None
    anthropic_api_key: str = ""
    webhook_secret: str = ""
    redis_url: Optional[str] = None
    youtube_api_key: Optional[str] = None

    # Config sections
    github: GitHubConfig = field(default_factory=GitHubConfig)
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    feeds: FeedsConfig = field(default_factory=FeedsConfig)
    poll: PollConfig = field(default_factory=PollConfig)
    site: SiteConfig = field(default_factory=SiteConfig)

    @property
    def repository(self) -> str:
        return self.github.repository

    @property
    def branches(self) -> list[str]:
        return self.github.branches

    @property
    def days_to_show(self) -> int:
        return self.feeds.days_to_show

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll.interval_minutes * 60


_PATH_FIELDS = {"path", "docs_pages_file", "state_file"}


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _apply_section(section: object, values: dict) -> None:
    for key, value in values.items():
        if not hasattr(section, key):
            raise ValueError(f"Unknown config option: {key}")
        if key in _PATH_FIELDS:
            value = Path(value)
        setattr(section, key, value)


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)

    settings = Settings(
        github_token=os.getenv("GITHUB_TOKEN") or None,
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
        webhook_secret=os.getenv("GITHUB_WEBHOOK_SECRET", ""),
        redis_url=os.getenv("REDIS_URL") or None,
        youtube_api_key=os.getenv("YOUTUBE_API_KEY") or None,
    )

    for name in ("github", "claude", "summary", "storage", "feeds", "poll", "site"):
        if name in config:
            _apply_section(getattr(settings, name), config[name] or {})

    # Environment overrides for deployment-specific values
    if os.getenv("GITHUB_REPOSITORY"):
        settings.github.repository = os.environ["GITHUB_REPOSITORY"]
    if os.getenv("GITHUB_BRANCHES"):
        settings.github.branches = [
            b.strip() for b in os.environ["GITHUB_BRANCHES"].split(",") if b.strip()
        ]
    if os.getenv("POLL_INTERVAL_MINUTES"):
        settings.poll.interval_minutes = float(os.environ["POLL_INTERVAL_MINUTES"])
    if os.getenv("STORAGE_BACKEND"):
        settings.storage.backend = os.environ["STORAGE_BACKEND"]

    return settings
