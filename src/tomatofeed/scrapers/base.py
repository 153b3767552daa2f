"""Base scraper interface for listing-page scrapers."""

import logging
from abc import ABC, abstractmethod

import httpx
from bs4 import BeautifulSoup, Tag

from tomatofeed.config import settings
from tomatofeed.scrapers.models import FeedSource, ListingRecord

logger = logging.getLogger(__name__)


class UpstreamUnavailable(Exception):
    """The upstream listing page could not be fetched."""

    status_code = 502

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url
        self.message = message


class UpstreamTimeout(UpstreamUnavailable):
    """The upstream listing page did not answer in time."""

    status_code = 504


class BaseListingScraper(ABC):
    """
    Abstract base class for listing-page scrapers.

    Subclasses declare the container selector and implement
    ``_parse_container`` for one item. The base class handles the HTTP
    fetch and walks the containers in document order.

    Unlike record-level problems, which only leave fields empty, upstream
    failures are raised as ``UpstreamUnavailable`` so the caller can answer
    with a gateway error.
    """

    CONTAINER_SELECTOR: str = ""

    async def get_records(self, source: FeedSource) -> list[ListingRecord]:
        """
        Fetch the source's listing page and extract one record per item.

        Args:
            source: Feed source to scrape

        Returns:
            Records in document order (possibly empty)

        Raises:
            UpstreamUnavailable: On network errors or a non-success status
            UpstreamTimeout: When the upstream does not answer in time
        """
        html = await self.fetch_html(source.upstream_url)
        records = self._parse_html(html)
        logger.info(f"{source.label}: Found {len(records)} records at {source.upstream_url}")
        return records

    async def fetch_html(self, url: str) -> str:
        """Fetch a page and return its body text."""
        try:
            async with httpx.AsyncClient(
                timeout=settings.scrape_timeout,
                headers={"User-Agent": settings.user_agent},
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text

        except httpx.TimeoutException as e:
            logger.error(f"Timed out fetching {url}: {e}")
            raise UpstreamTimeout(url, f"Timed out fetching {url}") from e

        except httpx.HTTPStatusError as e:
            logger.error(f"Upstream {url} returned {e.response.status_code}")
            raise UpstreamUnavailable(
                url, f"Upstream {url} returned {e.response.status_code}"
            ) from e

        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch {url}: {e}", exc_info=True)
            raise UpstreamUnavailable(url, f"Failed to fetch {url}") from e

    def _parse_html(self, html: str) -> list[ListingRecord]:
        """Parse listing HTML into records, one per container, in document order."""
        soup = BeautifulSoup(html, "html.parser")
        containers = soup.select(self.CONTAINER_SELECTOR)

        logger.debug(f"Found {len(containers)} containers for '{self.CONTAINER_SELECTOR}'")

        return [self._parse_container(container) for container in containers]

    @abstractmethod
    def _parse_container(self, container: Tag) -> ListingRecord:
        """
        Extract one record from a container node.

        Must not raise for missing fields; absent nodes map to None.
        """
        pass

    @staticmethod
    def _text(container: Tag, selector: str) -> str | None:
        """Text of the first node matching ``selector``, or None."""
        node = container.select_one(selector)
        if node is None:
            return None
        return node.get_text()

    @staticmethod
    def _attr(container: Tag, selector: str, attribute: str) -> str | None:
        """Attribute of the first node matching ``selector``, or None."""
        node = container.select_one(selector)
        if node is None:
            return None
        value = node.get(attribute)
        if isinstance(value, list):
            # Multi-valued attributes such as class come back as lists
            return " ".join(value)
        return value
