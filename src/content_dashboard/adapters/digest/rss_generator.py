"""RSS 2.0 feed of stored docs changelog entries."""

from email.utils import format_datetime

from content_dashboard.core import ChangelogEntry
from content_dashboard.core.entities import parse_timestamp

_XML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)


def escape_xml(value: str) -> str:
    for char, entity in _XML_ESCAPES:
        value = value.replace(char, entity)
    return value


def _pub_date(published_at: str) -> str:
    try:
        return format_datetime(parse_timestamp(published_at), usegmt=True)
    except ValueError:
        return ""


class RSSFeedGenerator:
    """Render changelog entries as an RSS 2.0 document."""

    def __init__(self, title: str, link: str, description: str, self_url: str) -> None:
        self.title = title
        self.link = link
        self.description = description
        self.self_url = self_url

    def generate(self, entries: list[ChangelogEntry]) -> str:
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">',
            "  <channel>",
            f"    <title>{escape_xml(self.title)}</title>",
            f"    <link>{escape_xml(self.link)}</link>",
            f"    <description>{escape_xml(self.description)}</description>",
            f'    <atom:link href="{escape_xml(self.self_url)}" rel="self" type="application/rss+xml"/>',
        ]
        for entry in entries:
            lines.extend([
                "    <item>",
                f"      <title>{escape_xml(entry.title)}</title>",
                f"      <link>{escape_xml(entry.url)}</link>",
                f"      <description>{escape_xml(entry.description or entry.ai_summary)}</description>",
                f"      <pubDate>{_pub_date(entry.published_at)}</pubDate>",
                f'      <guid isPermaLink="false">{escape_xml(entry.id)}</guid>',
                f"      <author>{escape_xml(entry.author)}</author>",
                "    </item>",
            ])
        lines.extend(["  </channel>", "</rss>", ""])
        return "\n".join(lines)
