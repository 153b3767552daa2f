"""Structural validation of a scraped record batch."""

import logging
from dataclasses import dataclass

from tomatofeed.scrapers.models import ListingRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidRecords:
    """The batch passed every check; ``records`` is the input list, untouched."""

    records: list[ListingRecord]


@dataclass(frozen=True)
class NoElementsFound:
    """The container selector matched nothing."""

    @property
    def message(self) -> str:
        return "Found no elements!"


@dataclass(frozen=True)
class MissingUrl:
    """A record has no link to point a feed item at."""

    title: str

    @property
    def message(self) -> str:
        return f"Failed to find a URL for '{self.title}'"


ValidationResult = ValidRecords | NoElementsFound | MissingUrl


def validate_records(records: list[ListingRecord]) -> ValidationResult:
    """
    Check that a batch can be rendered as a feed.

    Checks run in order and stop at the first failure:
    1. The batch must not be empty.
    2. Every record must have a URL; the first record without one is reported.

    Args:
        records: Records in document order

    Returns:
        ValidRecords wrapping the same list, or the first failure found
    """
    if not records:
        logger.warning("Validation failed: no records extracted")
        return NoElementsFound()

    for record in records:
        if record.url is None:
            logger.warning(f"Validation failed: no URL for '{record.title}'")
            return MissingUrl(title=record.title)

    return ValidRecords(records=records)
