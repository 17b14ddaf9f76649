"""Keyword-based category detection for content items."""

from typing import Optional

from content_dashboard.core.entities import Category

CATEGORIES: tuple[Category, ...] = (
    Category(
        id="gaming",
        name="Gaming",
        color="bg-purple-600",
        keywords=(
            "unity", "godot", "game", "gaming", "player", "play", "gameplay", "sdk", "crash",
            "performance", "mobile game", "console", "steam", "epic", "nintendo", "playstation",
            "xbox", "indie game", "game engine", "rendering", "physics", "animation", "audio",
            "networking", "multiplayer",
        ),
        description="Content related to game development, gaming SDKs, and game performance",
    ),
    Category(
        id="mobile",
        name="Mobile",
        color="bg-blue-600",
        keywords=(
            "ios", "android", "mobile", "app", "smartphone", "tablet", "flutter", "react native",
            "swift", "kotlin", "java", "objective-c", "mobile sdk", "app store", "google play",
            "mobile performance", "mobile crash", "mobile analytics", "mobile monitoring",
            "mobile debugging", "mobile development",
        ),
        description="Content related to mobile app development, iOS/Android SDKs, and mobile performance",
    ),
    Category(
        id="web",
        name="Web",
        color="bg-green-600",
        keywords=(
            "web", "javascript", "typescript", "react", "vue", "angular", "node.js", "next.js",
            "frontend", "backend", "api", "html", "css", "browser", "chrome", "firefox", "safari",
            "edge", "webpack", "vite", "npm", "yarn", "web performance", "web vitals", "lighthouse",
            "pwa", "spa",
        ),
        description="Content related to web development, frontend frameworks, and web performance",
    ),
    Category(
        id="technical",
        name="Technical Content",
        color="bg-yellow-600",
        keywords=(
            "sdk", "api", "integration", "monitoring", "observability", "debugging", "performance",
            "error", "crash", "trace", "span", "metrics", "alerting", "dashboard", "logging",
            "tracing", "profiling", "optimization", "best practices", "tutorial", "how-to", "guide",
            "documentation", "code example", "mcp", "agent", "ai", "machine learning", "llm",
            "model", "training", "inference", "seer",
        ),
        description="Technical tutorials, SDK documentation, and development guides",
    ),
    Category(
        id="business",
        name="Business Content",
        color="bg-red-600",
        keywords=(
            "business", "product", "feature", "announcement", "release", "update", "roadmap",
            "strategy", "customer", "user", "market", "industry", "partnership", "acquisition",
            "funding", "growth", "analytics", "insights", "case study", "success story",
            "enterprise", "team", "company", "ai", "artificial intelligence", "machine learning",
            "llm", "agent", "mcp", "seer",
        ),
        description="Business announcements, product updates, and company news",
    ),
)

MATCH_THRESHOLD = 2

_SOURCE_FALLBACK = {
    "changelog": "technical",
    "docs": "technical",
    "blog": "business",
}

_TUTORIAL_MARKERS = ("tutorial", "how", "guide")


def detect_categories(title: str, description: str, source: str) -> list[str]:
    """
    Classify a title/description pair into category ids.

    A category is selected when at least two of its keywords occur as
    substrings of the lowercased text. When none qualifies the source
    decides. The result is never empty.
    """
    text = f"{title} {description}".lower()
    detected = [
        category.id
        for category in CATEGORIES
        if sum(1 for keyword in category.keywords if keyword.lower() in text) >= MATCH_THRESHOLD
    ]
    if detected:
        return detected

    if source == "youtube":
        if any(marker in text for marker in _TUTORIAL_MARKERS):
            return ["technical"]
        return ["business"]

    return [_SOURCE_FALLBACK.get(source, "business")]


def get_category_by_id(category_id: str) -> Optional[Category]:
    return next((c for c in CATEGORIES if c.id == category_id), None)


def get_category_color(category_id: str) -> str:
    category = get_category_by_id(category_id)
    return category.color if category else "bg-gray-600"


def get_category_name(category_id: str) -> str:
    category = get_category_by_id(category_id)
    return category.name if category else "Other"
