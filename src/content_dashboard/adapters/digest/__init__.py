"""Export adapters."""

from content_dashboard.adapters.digest.markdown_generator import MarkdownExporter
from content_dashboard.adapters.digest.rss_generator import RSSFeedGenerator, escape_xml

__all__ = ["MarkdownExporter", "RSSFeedGenerator", "escape_xml"]
