"""Common interface of the article scrapers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Iterator

from bs4 import BeautifulSoup
from pydantic import BaseModel

from autofeed.extraction import document_base_url

__all__ = ["RawRecord", "Scraper"]

RawRecord = dict[str, Any]


class Scraper(ABC):
    """A strategy proposing raw article records for a parsed page.

    Subclasses set :attr:`options_key` (the key of their options below
    ``scraper`` in the configuration), decide through :meth:`is_applicable`
    whether the page carries the signal they look for and yield raw records
    from :meth:`__iter__`. Iteration is lazy and meant to be consumed once.
    """

    options_key: ClassVar[str]

    def __init__(
        self,
        document: BeautifulSoup,
        url: str,
        options: BaseModel | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.document = document
        self.url = url
        self.options = options
        self.logger = logger or logging.getLogger(type(self).__module__)
        self.base_url = document_base_url(document, url)

    @classmethod
    @abstractmethod
    def is_applicable(cls, document: BeautifulSoup, options: BaseModel | None = None) -> bool:
        """Return ``True`` when *document* carries anything this scraper can use."""

    @abstractmethod
    def records(self) -> Iterator[RawRecord]:
        """Yield raw records without the ``scraper`` attribution."""

    def __iter__(self) -> Iterator[RawRecord]:
        for record in self.records():
            record["scraper"] = type(self)
            yield record
