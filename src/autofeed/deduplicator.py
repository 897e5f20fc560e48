"""Collapse articles proposed by several scrapers into one per URL."""

from __future__ import annotations

import logging
from typing import Iterable, List

from autofeed.models import Article

__all__ = ["deduplicate"]

logger = logging.getLogger(__name__)


def deduplicate(articles: Iterable[Article]) -> List[Article]:
    """Keep the first article seen for every sanitised URL.

    Later duplicates are discarded as they are, their fields are not merged
    into the kept article. Articles without a URL are dropped.
    """

    seen: set[str] = set()
    unique: List[Article] = []
    for article in articles:
        url = article.url
        if not url:
            logger.debug("Dropping article without url: %r", article)
            continue
        if url in seen:
            continue
        seen.add(url)
        unique.append(article)
    return unique
