"""RSS 2.0 / Atom feed source for blog posts and product changelog."""

import hashlib
import html
import logging
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from html.entities import name2codepoint
from typing import Iterator, Optional
from xml.etree import ElementTree as ET

import httpx

from content_dashboard.core import ContentItem, ContentSource, ItemSource, UpstreamError
from content_dashboard.core.entities import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

_CDATA_RE = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_ENTITY_RE = re.compile(r"&([A-Za-z][A-Za-z0-9]*);")
_XML_ENTITIES = frozenset(("amp", "lt", "gt", "quot", "apos"))

_DESCRIPTION_TAGS = ("description", "summary", "content", "encoded")
_DATE_TAGS = ("pubDate", "updated", "published", "date")
_AUTHOR_TAGS = ("creator", "author")


def _local(tag: str) -> str:
    """Strip the `{namespace}` prefix ElementTree puts on tag names."""
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _numeric_entities(xml_text: str) -> str:
    """Rewrite named HTML entities as character references XML accepts."""

    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name in _XML_ENTITIES or name not in name2codepoint:
            return match.group(0)
        return f"&#{name2codepoint[name]};"

    return _ENTITY_RE.sub(replace, xml_text)


def clean_text(text: Optional[str]) -> str:
    """Drop CDATA wrappers and markup, decode entities, trim."""
    if not text:
        return ""
    text = _CDATA_RE.sub(r"\1", text)
    text = _TAG_RE.sub("", text)
    text = html.unescape(text)
    return text.strip()


def parse_date(value: Optional[str]) -> datetime:
    """Parse an RFC 822 or ISO-8601 date, falling back to now."""
    if value:
        value = value.strip()
        try:
            parsed = parsedate_to_datetime(value)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
        except (TypeError, ValueError, IndexError):
            pass
        try:
            return parse_timestamp(value)
        except ValueError:
            logger.debug("Unparseable feed date %r, using now", value)
    return datetime.now(timezone.utc)


def _child(element: ET.Element, names: tuple[str, ...]) -> Optional[ET.Element]:
    for name in names:
        for child in element:
            if _local(child.tag) == name:
                return child
    return None


def _element_text(element: Optional[ET.Element]) -> str:
    if element is None:
        return ""
    return "".join(element.itertext())


def _link(element: ET.Element) -> str:
    fallback = ""
    for child in element:
        if _local(child.tag) != "link":
            continue
        if child.text and child.text.strip():
            return child.text.strip()
        href = child.get("href", "").strip()
        if href and child.get("rel", "alternate") == "alternate":
            return href
        fallback = fallback or href
    return fallback


def _author(element: ET.Element) -> Optional[str]:
    node = _child(element, _AUTHOR_TAGS)
    if node is None:
        return None
    # Atom nests <name> inside <author>
    name = _child(node, ("name",))
    author = clean_text(_element_text(name if name is not None else node))
    return author or None


def _entries(root: ET.Element) -> Iterator[ET.Element]:
    for element in root.iter():
        if _local(element.tag) in ("item", "entry"):
            yield element


def parse_feed(xml_text: str, source: ContentSource) -> list[ContentItem]:
    """
    Parse RSS `<item>` and Atom `<entry>` elements into content items.

    Items without a title or link are skipped. Unparseable documents
    yield an empty list.
    """
    items: list[ContentItem] = []
    if not xml_text or not xml_text.strip():
        return items

    try:
        root = ET.fromstring(_numeric_entities(xml_text.strip()))
    except ET.ParseError as e:
        logger.warning("Error parsing %s feed: %s", source.value, e)
        return items

    for entry in _entries(root):
        title = clean_text(_element_text(_child(entry, ("title",))))
        url = _link(entry)
        if not title or not url:
            continue

        description = clean_text(_element_text(_child(entry, _DESCRIPTION_TAGS)))
        date_node = _child(entry, _DATE_TAGS)
        published = parse_date(date_node.text if date_node is not None else None)

        items.append(ContentItem(
            id=f"{source.value}-{hashlib.sha1(url.encode()).hexdigest()[:12]}",
            title=title,
            description=description,
            url=url,
            published_at=format_timestamp(published),
            source=source,
            author=_author(entry),
        ))

    return items


class RSSFeedSource(ItemSource):
    """Fetch and parse a single RSS or Atom feed."""

    def __init__(self, url: str, source: ContentSource, timeout: float = 15.0) -> None:
        self.url = url
        self.source = source
        self.timeout = timeout
        self.name = f"{source.value} feed"

    async def fetch_items(self, since: Optional[datetime] = None) -> list[ContentItem]:
        """Fetch the feed and return items newer than `since`."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(self.url)
        except httpx.RequestError as e:
            raise UpstreamError(f"Failed to fetch {self.source.value} feed: {e}") from e

        if response.status_code != 200:
            raise UpstreamError(
                f"Failed to fetch {self.source.value} feed: {response.status_code}",
                status_code=response.status_code,
            )

        items = parse_feed(response.text, self.source)
        logger.info("Parsed %d items from %s", len(items), self.url)

        if since is None:
            return items
        return [item for item in items if parse_timestamp(item.published_at) >= since]
