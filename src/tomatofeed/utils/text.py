"""Text clean-up helpers for scraped field values."""

import re


def strip_parentheses(text: str | None) -> str | None:
    """
    Remove one surrounding pair of parentheses from a scraped value.

    The pair is only removed when the text both starts with "(" and ends
    with ")"; anything else is returned unchanged.

    Examples:
        "(2024)" → "2024"
        "2024"   → "2024"
        "(2024"  → "(2024"
        None     → None

    Args:
        text: Raw text, or None when the source node was missing

    Returns:
        Text without the surrounding parentheses
    """
    if text is not None and text.startswith("(") and text.endswith(")"):
        return text[1:-1]
    return text


def trim(text: str | None) -> str | None:
    """Strip leading/trailing whitespace, passing None through."""
    if text is None:
        return None
    return text.strip()


# Anything outside the XML 1.0 Char production
_XML_ILLEGAL_CHARS = re.compile(
    r"[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


def strip_xml_illegal(text: str | None) -> str | None:
    """
    Remove characters that may not appear in an XML 1.0 document.

    Scraped pages occasionally carry control characters (e.g. "\\x0b" or
    "\\x1f") that ElementTree would write out verbatim, leaving a feed that
    readers refuse to parse.
    """
    if text is None:
        return None
    return _XML_ILLEGAL_CHARS.sub("", text)
