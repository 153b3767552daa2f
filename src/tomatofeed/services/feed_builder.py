"""Scrape, validate and render pipeline for one feed source."""

import logging

from tomatofeed.scrapers import get_scraper
from tomatofeed.scrapers.models import FeedSource
from tomatofeed.services.feed_renderer import RenderedFeed, render_feed
from tomatofeed.services.record_validator import (
    MissingUrl,
    NoElementsFound,
    ValidationResult,
    ValidRecords,
    validate_records,
)

logger = logging.getLogger(__name__)


async def scrape_and_validate(source: FeedSource) -> ValidationResult:
    """
    Scrape a feed source and validate the extracted records.

    Raises:
        UpstreamUnavailable: When the listing page cannot be fetched
    """
    scraper = get_scraper(source.key)
    if scraper is None:
        raise LookupError(f"No scraper registered for '{source.key}'")

    records = await scraper.get_records(source)
    return validate_records(records)


async def build_feed(
    source: FeedSource,
    self_link: str,
) -> RenderedFeed | NoElementsFound | MissingUrl:
    """
    Run the full pipeline for a feed source.

    Args:
        source: Feed source to scrape
        self_link: Canonical URL of the feed being built

    Returns:
        The rendered feed, or the validation failure that stopped it

    Raises:
        UpstreamUnavailable: When the listing page cannot be fetched
    """
    result = await scrape_and_validate(source)
    if not isinstance(result, ValidRecords):
        return result

    feed = render_feed(result.records, source, self_link)
    logger.info(f"Built {feed.feed_id} with {len(feed.entries)} entries")
    return feed
