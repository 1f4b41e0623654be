"""Extract lists of strings from HTML pages with CSS selectors."""

from __future__ import annotations

from collections.abc import Callable

from bs4 import BeautifulSoup
from bs4.element import Tag

from tenvkit.download import RequestOption, fetch_bytes, no_check, no_display

Extractor = Callable[[Tag], str]

TEXT_PART = "#text"


def text_extractor(element: Tag) -> str:
    """Return the element's text without surrounding whitespace."""
    return element.get_text().strip()


def selection_extractor(part: str) -> Extractor:
    """Return an extractor for the element text ("#text") or for the attribute part."""
    if part == TEXT_PART:
        return text_extractor

    def extract_attr(element: Tag) -> str:
        value = element.get(part)
        if value is None:
            return ""
        if isinstance(value, list):
            value = " ".join(value)
        return value.strip()

    return extract_attr


def extract_list(data: bytes | str, selector: str, extractor: Extractor) -> list[str]:
    """Apply extractor to every element matching selector, keeping non-empty results."""
    document = BeautifulSoup(data, "html.parser")
    extracted = (extractor(element) for element in document.select(selector))
    return [value for value in extracted if value]


def request(call_url: str, selector: str, extractor: Extractor, *args: RequestOption) -> list[str]:
    """Download call_url and extract a list of strings from it."""
    data = fetch_bytes(call_url, no_display, no_check, *args)
    return extract_list(data, selector, extractor)