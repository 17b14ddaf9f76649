"""Markdown export of aggregated content."""

from datetime import datetime, timezone
from typing import Optional

from content_dashboard.core import ContentItem, ContentSource
from content_dashboard.core.entities import format_timestamp

_SECTIONS = (
    (ContentSource.BLOG, "📝 Blog Posts"),
    (ContentSource.YOUTUBE, "🎥 YouTube Videos"),
    (ContentSource.DOCS, "📚 Documentation"),
    (ContentSource.CHANGELOG, "🗒️ Changelog Updates"),
)

_SUMMARY_LABELS = {
    ContentSource.BLOG: "Blog Posts",
    ContentSource.YOUTUBE: "YouTube Videos",
    ContentSource.DOCS: "Documentation",
    ContentSource.CHANGELOG: "Changelog Updates",
}


class MarkdownExporter:
    """Generate a markdown document for LLM ingestion and sharing."""

    def __init__(self, site_name: str = "Sentry Content Aggregator") -> None:
        self.site_name = site_name

    def generate(self, items: list[ContentItem], generated_at: Optional[datetime] = None) -> str:
        """Generate markdown export grouped by source."""
        generated_at = generated_at or datetime.now(timezone.utc)

        lines = [
            f"# {self.site_name} - Export",
            "",
            f"Generated on: {format_timestamp(generated_at)}",
            f"Total items: {len(items)}",
            "",
        ]

        grouped = {source: [i for i in items if i.source == source] for source, _ in _SECTIONS}

        for source, heading in _SECTIONS:
            group = grouped[source]
            if not group:
                continue
            lines.extend([f"## {heading} ({len(group)})", ""])
            for index, item in enumerate(group, 1):
                lines.extend(self._format_item(index, item))

        lines.extend(["## 📊 Summary", ""])
        for source, _ in _SECTIONS:
            lines.append(f"- **{_SUMMARY_LABELS[source]}**: {len(grouped[source])}")
        lines.extend([
            f"- **Total Content Items**: {len(items)}",
            "",
            "---",
            f"*This export was generated by the {self.site_name} for LLM ingestion and analysis.*",
            "",
        ])

        return "\n".join(lines)

    def _format_item(self, index: int, item: ContentItem) -> list[str]:
        """Format single content item."""
        lines = [
            f"### {index}. {item.title}",
            f"- **URL**: {item.url}",
        ]

        if item.source == ContentSource.DOCS:
            lines.append(f"- **Last Modified**: {item.last_modified or item.published_at}")
        else:
            lines.append(f"- **Published**: {item.published_at}")

        if item.author:
            lines.append(f"- **Author**: {item.author}")
        if item.duration:
            lines.append(f"- **Duration**: {item.duration}")
        if item.categories:
            lines.append(f"- **Categories**: {', '.join(item.categories)}")
        if item.description:
            lines.append(f"- **Description**: {item.description}")

        lines.append("")
        return lines
