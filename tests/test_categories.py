"""Tests for keyword category detection."""

import pytest

from content_dashboard.core import CATEGORIES, detect_categories
from content_dashboard.core.categories import (
    get_category_by_id,
    get_category_color,
    get_category_name,
)


def test_detects_category_with_two_keyword_matches():
    """Two keywords from the mobile list select it."""
    result = detect_categories("New iOS SDK", "Better android support", "blog")

    assert "mobile" in result


def test_single_keyword_is_below_threshold():
    result = detect_categories("Flutter", "", "blog")

    assert result == ["business"]


def test_matching_is_case_insensitive():
    result = detect_categories("JAVASCRIPT AND TYPESCRIPT", "", "blog")

    assert "web" in result


def test_multiple_categories_can_match():
    result = detect_categories(
        "Tracing and profiling for React",
        "Improve frontend performance with our javascript SDK",
        "blog",
    )

    assert "web" in result
    assert "technical" in result


@pytest.mark.parametrize(
    "source,expected",
    [
        ("changelog", ["technical"]),
        ("docs", ["technical"]),
        ("blog", ["business"]),
        ("podcast", ["business"]),
        ("", ["business"]),
    ],
)
def test_source_fallback(source, expected):
    assert detect_categories("", "", source) == expected


def test_youtube_fallback_tutorial_is_technical():
    assert detect_categories("A quick guide", "", "youtube") == ["technical"]


def test_youtube_fallback_otherwise_business():
    assert detect_categories("Company offsite", "", "youtube") == ["business"]


@pytest.mark.parametrize(
    "title,description,source",
    [
        ("", "", ""),
        ("   ", "", "unknown"),
        ("zzz", "qqq", "youtube"),
        ("Game engine rendering", "Physics and audio", "docs"),
    ],
)
def test_result_is_never_empty(title, description, source):
    assert detect_categories(title, description, source)


def test_detection_is_deterministic():
    first = detect_categories("Seer agent release", "AI update for customers", "blog")
    second = detect_categories("Seer agent release", "AI update for customers", "blog")

    assert first == second


def test_category_lookups():
    assert get_category_by_id("web") is next(c for c in CATEGORIES if c.id == "web")
    assert get_category_by_id("missing") is None
    assert get_category_name("technical") == "Technical Content"
    assert get_category_name("missing") == "Other"
    assert get_category_color("gaming") == "bg-purple-600"
    assert get_category_color("missing") == "bg-gray-600"
