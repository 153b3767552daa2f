"""RSS 2.0 rendering of validated listing records."""

import logging
import mimetypes
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime

from tomatofeed.config import settings
from tomatofeed.scrapers.models import FeedSource, ListingRecord
from tomatofeed.utils.text import strip_xml_illegal

logger = logging.getLogger(__name__)

ATOM_NS = "http://www.w3.org/2005/Atom"
RSS_MEDIA_TYPE = "application/rss+xml; charset=utf-8"
GENERATOR = "tomatofeed"
DESCRIPTION_SEPARATOR = "<br/>"

# The listing pages carry no publish date, so every item gets the epoch
PLACEHOLDER_PUB_DATE = datetime(1970, 1, 1, tzinfo=timezone.utc)

ET.register_namespace("atom", ATOM_NS)


@dataclass(frozen=True)
class FeedEntry:
    """One rendered feed item."""

    title: str
    link: str
    description: str
    image_url: str | None = None


@dataclass(frozen=True)
class RenderedFeed:
    """A serialized feed document and the entries it contains."""

    feed_id: str
    title: str
    body: bytes
    entries: tuple[FeedEntry, ...]
    media_type: str = RSS_MEDIA_TYPE


def _or_empty(value: str | None) -> str:
    return "" if value is None else strip_xml_illegal(value)


def to_entry(record: ListingRecord) -> FeedEntry:
    """
    Map a validated record to a feed entry.

    Absent optional fields render as empty text. Characters that are not
    allowed in XML are dropped from every field.
    """
    if record.url is None:
        raise ValueError(f"Record '{record.title}' has no URL")

    title = (
        f"{_or_empty(record.title)} ({_or_empty(record.time_of_release)}, "
        f"{_or_empty(record.rating_score)})"
    )
    description = DESCRIPTION_SEPARATOR.join(
        _or_empty(text)
        for text in (record.synopsis, record.starring_text, record.director_text)
    )
    return FeedEntry(
        title=title,
        link=strip_xml_illegal(record.url),
        description=description,
        image_url=strip_xml_illegal(record.preview_image_url),
    )


def _enclosure_type(url: str) -> str:
    guessed, _ = mimetypes.guess_type(url)
    if guessed and guessed.startswith("image/"):
        return guessed
    return "image/jpeg"


def render_feed(
    records: list[ListingRecord],
    source: FeedSource,
    self_link: str,
    source_name: str | None = None,
    built_at: datetime | None = None,
) -> RenderedFeed:
    """
    Render records as an RSS 2.0 document.

    Args:
        records: Validated records; item order follows this list
        source: Feed source the records were scraped from
        self_link: Canonical URL of this feed (the incoming request URL)
        source_name: Upstream name used in feed text (defaults to settings)
        built_at: Build timestamp for lastBuildDate (defaults to now)

    Returns:
        RenderedFeed holding the UTF-8 encoded document
    """
    source_name = source_name or settings.source_name
    built_at = built_at or datetime.now(timezone.utc)

    feed_title = f"Hot on {source_name}: {source.label}"
    feed_id = f"hot-{source_name.lower()}-{source.label}"
    entries = tuple(to_entry(record) for record in records)

    rss = ET.Element("rss", {"version": "2.0"})
    channel = ET.SubElement(rss, "channel")

    ET.SubElement(channel, "title").text = feed_title
    ET.SubElement(channel, "link").text = self_link
    ET.SubElement(channel, "description").text = f"RSS version of {source.upstream_url}"
    ET.SubElement(channel, "lastBuildDate").text = format_datetime(built_at, usegmt=True)
    ET.SubElement(channel, "docs").text = "https://validator.w3.org/feed/docs/rss2.html"
    ET.SubElement(channel, "generator").text = GENERATOR
    ET.SubElement(channel, "copyright").text = f"Same as {source_name}"
    ET.SubElement(channel, f"{{{ATOM_NS}}}id").text = feed_id
    ET.SubElement(
        channel,
        f"{{{ATOM_NS}}}link",
        {"href": self_link, "rel": "self", "type": "application/rss+xml"},
    )

    pub_date = format_datetime(PLACEHOLDER_PUB_DATE, usegmt=True)
    for entry in entries:
        item = ET.SubElement(channel, "item")
        ET.SubElement(item, "title").text = entry.title
        ET.SubElement(item, "link").text = entry.link
        ET.SubElement(item, "guid", {"isPermaLink": "false"}).text = entry.link
        ET.SubElement(item, "pubDate").text = pub_date
        ET.SubElement(item, "description").text = entry.description
        if entry.image_url:
            ET.SubElement(
                item,
                "enclosure",
                {"url": entry.image_url, "length": "0", "type": _enclosure_type(entry.image_url)},
            )

    body = ET.tostring(rss, encoding="utf-8", xml_declaration=True)
    logger.debug(f"Rendered {feed_id} with {len(entries)} entries ({len(body)} bytes)")

    return RenderedFeed(feed_id=feed_id, title=feed_title, body=body, entries=entries)
