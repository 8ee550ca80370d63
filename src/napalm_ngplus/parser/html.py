"""Base HTML parsing utilities shared across all parsers."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag

_NUMBER_RE: re.Pattern[str] = re.compile(r"-?\d+(?:\.\d+)?")


def parse_html(html: str, parser: str = "lxml") -> BeautifulSoup:
    """Parse an HTML string and return a BeautifulSoup document.

    Args:
        html: Raw HTML content from the switch response.
        parser: Parser library to use (default: ``lxml``).

    Returns:
        Parsed BeautifulSoup document.
    """
    return BeautifulSoup(html, parser)


def normalize_text(s: str) -> str:
    """Strip surrounding whitespace and collapse internal runs.

    Args:
        s: Raw text extracted from an HTML element.

    Returns:
        Cleaned string with single spaces between words.
    """
    return re.sub(r"\s+", " ", s).strip()


def select_text(scope: Tag, selector: str) -> str:
    """Return the normalised text of the first match of *selector*, or ``""``."""
    node = scope.select_one(selector)
    return normalize_text(node.get_text()) if node is not None else ""


def select_value(scope: Tag, selector: str) -> str:
    """Return the ``value`` attribute of the first match of *selector*, or ``""``."""
    node = scope.select_one(selector)
    if node is None:
        return ""
    value = node.get("value")
    return str(value).strip() if value is not None else ""


def parse_number(text: str) -> float | None:
    """Return the first decimal number in *text* (``"53.2 V"`` -> ``53.2``)."""
    m = _NUMBER_RE.search(text)
    return float(m.group(0)) if m else None
