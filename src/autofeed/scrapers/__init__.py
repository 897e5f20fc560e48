"""Scrapers proposing article candidates and the lookup deciding which ones run."""

from __future__ import annotations

from typing import List, Type

from bs4 import BeautifulSoup

from autofeed.config import ScraperConfig

from .base import RawRecord, Scraper
from .html import Html
from .json_state import JsonState
from .schema import Schema
from .semantic_html import SemanticHtml

__all__ = [
    "Html",
    "JsonState",
    "NoScraperFound",
    "RawRecord",
    "SCRAPERS",
    "Schema",
    "Scraper",
    "SemanticHtml",
    "scrapers_for",
]

#: All scrapers in priority order. When two scrapers propose the same URL the
#: record of the scraper listed first is kept.
SCRAPERS: tuple[Type[Scraper], ...] = (Schema, JsonState, SemanticHtml, Html)


class NoScraperFound(Exception):
    """Raised when no enabled scraper is applicable to a document."""


def scrapers_for(document: BeautifulSoup, options: ScraperConfig | None = None) -> List[Type[Scraper]]:
    """Return the enabled scrapers applicable to *document*, in priority order.

    Raises :class:`NoScraperFound` when the list would be empty.
    """

    options = options or ScraperConfig()
    scrapers = [
        scraper
        for scraper in SCRAPERS
        if options.is_enabled(scraper.options_key)
        and scraper.is_applicable(document, options.for_scraper(scraper.options_key))
    ]
    if not scrapers:
        raise NoScraperFound("No scraper is enabled and applicable to the document")
    return scrapers
