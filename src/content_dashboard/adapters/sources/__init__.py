"""Source adapters for fetching items."""

from content_dashboard.adapters.sources.docs_pages_source import DocsPagesSource
from content_dashboard.adapters.sources.rss_source import RSSFeedSource, parse_feed
from content_dashboard.adapters.sources.youtube_source import YouTubeSource

__all__ = ["DocsPagesSource", "RSSFeedSource", "YouTubeSource", "parse_feed"]
