"""Data models for scrapers."""

from dataclasses import dataclass

TITLE_NOT_FOUND = "<TITLE_NOT_FOUND>"


@dataclass(frozen=True)
class FeedSource:
    """
    Binding between a feed route and the upstream page it is scraped from.

    Each source is tied to one page layout; the scraper class decides which
    selectors apply.
    """

    key: str  # Route segment, e.g. "movies"
    label: str  # Human readable feed type, e.g. "Movies"
    upstream_url: str  # Listing page to scrape


@dataclass
class ListingRecord:
    """
    One item scraped from a listing page.

    Every field except ``title`` is optional. ``url`` is required for feed
    rendering but its absence is reported by the validator, not here.
    """

    title: str = TITLE_NOT_FOUND  # Falls back to the sentinel when the title link is missing
    time_of_release: str | None = None  # e.g. "2024", parentheses already stripped
    rating_score: str | None = None  # e.g. "92%", verbatim
    preview_image_url: str | None = None  # Poster image src
    synopsis: str | None = None
    starring_text: str | None = None
    director_text: str | None = None
    url: str | None = None  # Link target of the title link
