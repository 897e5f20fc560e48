"""Automatic article detection for arbitrary HTML pages."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from itertools import chain
from typing import Any, Iterable, List, Mapping

from bs4 import BeautifulSoup

from autofeed.cleanup import Cleanup
from autofeed.config import AutoSourceConfig
from autofeed.deduplicator import deduplicate
from autofeed.models import Article
from autofeed.scrapers import NoScraperFound, RawRecord, Scraper, scrapers_for

__all__ = ["AutoSource"]


def _scrape(scraper: Scraper) -> List[RawRecord]:
    return list(scraper)


class AutoSource:
    """Detect the articles of a page without any site specific configuration.

    Every applicable scraper runs on its own worker thread against the shared,
    read-only document. Their records are joined in scraper priority order,
    wrapped as :class:`~autofeed.models.Article`, deduplicated by URL and
    cleaned up.
    """

    def __init__(
        self,
        document: BeautifulSoup,
        url: str,
        headers: Mapping[str, str] | None = None,
        config: AutoSourceConfig | Mapping[str, Any] | None = None,
        *,
        logger: logging.Logger | None = None,
        max_workers: int | None = None,
    ) -> None:
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be >= 1.")

        self.document = document
        self.url = str(url)
        self.headers = dict(headers or {})
        if isinstance(config, AutoSourceConfig):
            self.config = config
        else:
            self.config = AutoSourceConfig.from_mapping(config)
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.max_workers = max_workers

    def articles(self) -> List[Article]:
        try:
            scrapers = scrapers_for(self.document, self.config.scraper)
        except NoScraperFound:
            self.logger.warning("No auto source scraper found for URL: %s", self.url)
            return []

        instances = [
            scraper(
                self.document,
                self.url,
                self.config.scraper.for_scraper(scraper.options_key),
                logger=self.logger,
            )
            for scraper in scrapers
        ]
        records = self._run(instances)

        articles = deduplicate(self._wrap(records))
        return Cleanup.from_config(self.url, self.config.cleanup)(articles)

    def _run(self, scrapers: List[Scraper]) -> Iterable[RawRecord]:
        """Run *scrapers* concurrently and return their records in scraper order.

        The first exception raised by a scraper propagates from here.
        """

        if not scrapers:
            return []

        worker_count = min(self.max_workers or os.cpu_count() or 1, len(scrapers))
        with ThreadPoolExecutor(max_workers=worker_count) as executor:
            results = list(executor.map(_scrape, scrapers))
        return chain.from_iterable(results)

    def _wrap(self, records: Iterable[RawRecord]) -> Iterable[Article]:
        for record in records:
            article = Article(**record)
            if not article.valid:
                self.logger.debug("Skipping invalid article candidate: %r", article)
                continue
            yield article
