"""Tests for configuration loading."""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from content_dashboard.config import Settings, get_settings

ENV_KEYS = {
    "GITHUB_TOKEN": "",
    "ANTHROPIC_API_KEY": "",
    "GITHUB_WEBHOOK_SECRET": "",
    "REDIS_URL": "",
    "YOUTUBE_API_KEY": "",
    "GITHUB_REPOSITORY": "",
    "GITHUB_BRANCHES": "",
    "POLL_INTERVAL_MINUTES": "",
    "STORAGE_BACKEND": "",
}


def test_defaults_without_config_file() -> None:
    with patch.dict("os.environ", ENV_KEYS):
        settings = get_settings(Path("/nonexistent/config.yaml"))

    assert settings.repository == "getsentry/sentry-docs"
    assert settings.branches == ["main", "master"]
    assert settings.storage.backend == "file"
    assert settings.storage.max_entries == 100
    assert settings.days_to_show == 90
    assert settings.poll_interval_seconds == 300
    assert settings.github_token is None
    assert settings.redis_url is None


def test_yaml_sections_are_applied() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        path.write_text(
            "github:\n"
            "  branches: [master]\n"
            "storage:\n"
            "  path: /tmp/changelog.json\n"
            "  max_entries: 20\n"
            "summary:\n"
            "  max_chars: 120\n"
        )

        with patch.dict("os.environ", ENV_KEYS):
            settings = get_settings(path)

    assert settings.branches == ["master"]
    assert settings.storage.path == Path("/tmp/changelog.json")
    assert settings.storage.max_entries == 20
    assert settings.summary.max_chars == 120


def test_unknown_option_is_rejected() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        path.write_text("storage:\n  bucket: nope\n")

        with patch.dict("os.environ", ENV_KEYS):
            with pytest.raises(ValueError, match="Unknown config option: bucket"):
                get_settings(path)


def test_environment_overrides() -> None:
    env = dict(
        ENV_KEYS,
        GITHUB_TOKEN="t0ken",
        ANTHROPIC_API_KEY="sk-test",
        GITHUB_WEBHOOK_SECRET="s3cret",
        REDIS_URL="rediss://cache:6380/0",
        GITHUB_BRANCHES="main, release ,",
        POLL_INTERVAL_MINUTES="2",
        STORAGE_BACKEND="redis",
    )

    with patch.dict("os.environ", env):
        settings = get_settings(Path("/nonexistent/config.yaml"))

    assert settings.github_token == "t0ken"
    assert settings.anthropic_api_key == "sk-test"
    assert settings.webhook_secret == "s3cret"
    assert settings.redis_url == "rediss://cache:6380/0"
    assert settings.branches == ["main", "release"]
    assert settings.poll_interval_seconds == 120
    assert settings.storage.backend == "redis"


def test_sections_are_independent_per_instance() -> None:
    first = Settings()
    first.github.branches.append("develop")

    assert Settings().branches == ["main", "master"]
