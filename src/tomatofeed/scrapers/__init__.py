"""Feed source registry mapping routes to upstream pages and scrapers."""

from typing import Type

from tomatofeed.config import settings
from tomatofeed.scrapers.base import (
    BaseListingScraper,
    UpstreamTimeout,
    UpstreamUnavailable,
)
from tomatofeed.scrapers.models import TITLE_NOT_FOUND, FeedSource, ListingRecord
from tomatofeed.scrapers.rotten_tomatoes import RottenTomatoesScraper

# Registry mapping route keys to feed sources
FEED_SOURCES: dict[str, FeedSource] = {
    "movies": FeedSource(key="movies", label="Movies", upstream_url=settings.movies_url),
    "shows": FeedSource(key="shows", label="Shows", upstream_url=settings.shows_url),
}

# Registry mapping route keys to scraper classes
SCRAPER_REGISTRY: dict[str, Type[BaseListingScraper]] = {
    "movies": RottenTomatoesScraper,
    "shows": RottenTomatoesScraper,
}


def get_feed_source(key: str) -> FeedSource | None:
    """
    Get a feed source by route key.

    Args:
        key: The route key (e.g., "movies", "shows")

    Returns:
        Feed source or None if the key is unknown
    """
    return FEED_SOURCES.get(key)


def get_scraper(key: str) -> BaseListingScraper | None:
    """
    Get a scraper instance by route key.

    Args:
        key: The route key (e.g., "movies", "shows")

    Returns:
        Scraper instance or None if the key is unknown
    """
    scraper_class = SCRAPER_REGISTRY.get(key)
    if scraper_class:
        return scraper_class()
    return None


__all__ = [
    "FEED_SOURCES",
    "SCRAPER_REGISTRY",
    "TITLE_NOT_FOUND",
    "get_feed_source",
    "get_scraper",
    "BaseListingScraper",
    "FeedSource",
    "ListingRecord",
    "RottenTomatoesScraper",
    "UpstreamTimeout",
    "UpstreamUnavailable",
]
