"""RottenTomatoes editorial guide scraper."""

import logging

from bs4 import Tag

from tomatofeed.scrapers.base import BaseListingScraper
from tomatofeed.scrapers.models import TITLE_NOT_FOUND, ListingRecord
from tomatofeed.utils.text import strip_parentheses, trim

logger = logging.getLogger(__name__)


class RottenTomatoesScraper(BaseListingScraper):
    """
    Scraper for the RottenTomatoes editorial "popular" guides.

    The movies and TV shows guides share one countdown layout: each item is
    a ``div.row.countdown-item`` inside the article body.
    """

    CONTAINER_SELECTOR = "div.articleContentBody div.row.countdown-item"

    TITLE_LINK_SELECTOR = ".article_movie_title a"
    YEAR_SELECTOR = ".start-year"
    SCORE_SELECTOR = ".tMeterScore"
    POSTER_SELECTOR = "img.article_poster"
    SYNOPSIS_SELECTOR = "div.synopsis"
    CAST_SELECTOR = "div.cast"
    DIRECTOR_SELECTOR = "div.director"

    def _parse_container(self, container: Tag) -> ListingRecord:
        title = self._text(container, self.TITLE_LINK_SELECTOR)

        record = ListingRecord(
            title=title if title is not None else TITLE_NOT_FOUND,
            time_of_release=strip_parentheses(self._text(container, self.YEAR_SELECTOR)),
            rating_score=self._text(container, self.SCORE_SELECTOR),
            preview_image_url=self._attr(container, self.POSTER_SELECTOR, "src"),
            synopsis=trim(self._text(container, self.SYNOPSIS_SELECTOR)),
            starring_text=trim(self._text(container, self.CAST_SELECTOR)),
            director_text=trim(self._text(container, self.DIRECTOR_SELECTOR)),
            url=self._attr(container, self.TITLE_LINK_SELECTOR, "href"),
        )
        logger.debug(f"Parsed record: {record.title} -> {record.url}")
        return record
