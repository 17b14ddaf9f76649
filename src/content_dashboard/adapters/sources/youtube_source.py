"""YouTube Data API source for channel videos."""

import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from content_dashboard.core import ContentItem, ContentSource, ItemSource, UpstreamError
from content_dashboard.core.entities import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)


class YouTubeSource(ItemSource):
    """List the latest videos of a channel via the search endpoint."""

    name = "YouTube"

    def __init__(
        self,
        api_key: Optional[str],
        channel_id: str,
        max_results: int = 50,
        timeout: float = 15.0,
    ) -> None:
        self.api_key = api_key
        self.channel_id = channel_id
        self.max_results = max_results
        self.timeout = timeout
        self.api_url = "https://www.googleapis.com/youtube/v3/search"

    async def fetch_items(self, since: Optional[datetime] = None) -> list[ContentItem]:
        if not self.api_key:
            raise UpstreamError("YouTube API key not configured")

        params = {
            "key": self.api_key,
            "channelId": self.channel_id,
            "part": "snippet",
            "order": "date",
            "maxResults": self.max_results,
            "type": "video",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.api_url, params=params)
        except httpx.RequestError as e:
            raise UpstreamError(f"YouTube request failed: {e}") from e

        if response.status_code != 200:
            raise UpstreamError(
                f"YouTube API error: {response.status_code}",
                status_code=response.status_code,
            )

        videos = []
        for raw in response.json().get("items", []):
            video = self._create_item(raw)
            if video is None:
                continue
            if since is not None and parse_timestamp(video.published_at) < since:
                continue
            videos.append(video)

        logger.info("Fetched %d YouTube videos", len(videos))
        return videos

    def _create_item(self, raw: dict) -> Optional[ContentItem]:
        video_id = (raw.get("id") or {}).get("videoId")
        snippet = raw.get("snippet") or {}
        if not video_id or not snippet.get("title"):
            logger.debug("Skipping search result without video id or title")
            return None

        try:
            published = parse_timestamp(snippet.get("publishedAt") or "")
        except ValueError:
            published = datetime.now(timezone.utc)
        thumbnails = snippet.get("thumbnails") or {}
        return ContentItem(
            id=video_id,
            title=snippet["title"],
            description=snippet.get("description", ""),
            url=f"https://www.youtube.com/watch?v={video_id}",
            published_at=format_timestamp(published),
            source=ContentSource.YOUTUBE,
            thumbnail=(thumbnails.get("medium") or {}).get("url"),
        )
