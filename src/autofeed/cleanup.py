"""Heuristic filters removing noise from the detected articles."""

from __future__ import annotations

import logging
import re
from typing import List, Sequence
from urllib.parse import urlsplit

from autofeed.config import CleanupConfig
from autofeed.models import Article
from autofeed.utils import squish

__all__ = ["Cleanup"]

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_DANGLING_MARKER_RE = re.compile(r"<!--|-->")


def _host(url: str | None) -> str:
    return urlsplit(url or "").hostname or ""


def _strip_markers(text: str | None) -> str | None:
    if text is None:
        return None
    text = _DANGLING_MARKER_RE.sub(" ", _COMMENT_RE.sub(" ", text))
    return squish(text) or None


class Cleanup:
    """Ordered chain of filters applied to the deduplicated articles.

    The chain always runs in the order of :attr:`FILTERS`; a filter raising
    aborts the chain.
    """

    FILTERS: Sequence[str] = (
        "strip_markers",
        "keep_only_http_urls",
        "reject_different_domain",
        "keep_only_with_min_words_title",
    )

    def __init__(self, url: str, *, keep_different_domain: bool = True, min_words_title: int = 3) -> None:
        self.url = url
        self.keep_different_domain = keep_different_domain
        self.min_words_title = min_words_title

    @classmethod
    def from_config(cls, url: str, config: CleanupConfig | None = None) -> "Cleanup":
        config = config or CleanupConfig()
        return cls(
            url,
            keep_different_domain=config.keep_different_domain,
            min_words_title=config.min_words_title,
        )

    @classmethod
    def call(cls, articles: Sequence[Article], *, url: str, **options) -> List[Article]:
        return cls(url, **options)(articles)

    def __call__(self, articles: Sequence[Article]) -> List[Article]:
        result = list(articles)
        for name in self.FILTERS:
            before = len(result)
            result = getattr(self, name)(result)
            if len(result) != before:
                logger.debug("Cleanup %s removed %d articles", name, before - len(result))
        return result

    def strip_markers(self, articles: List[Article]) -> List[Article]:
        """Remove HTML comment markers and squish whitespace in titles and descriptions."""

        cleaned = []
        for article in articles:
            title = _strip_markers(article.fields.get("title"))
            description = article.fields.get("description")
            if isinstance(description, str):
                description = _COMMENT_RE.sub(" ", description).strip() or None
            if title != article.fields.get("title") or description != article.fields.get("description"):
                article = article.replace(title=title, description=description)
            cleaned.append(article)
        return cleaned

    def keep_only_http_urls(self, articles: List[Article]) -> List[Article]:
        return [article for article in articles if urlsplit(article.url or "").scheme in ("http", "https")]

    def reject_different_domain(self, articles: List[Article]) -> List[Article]:
        if self.keep_different_domain:
            return articles
        source_host = _host(self.url)
        return [article for article in articles if _host(article.url) == source_host]

    def keep_only_with_min_words_title(self, articles: List[Article]) -> List[Article]:
        """Drop articles whose title is shorter than ``min_words_title`` words.

        Articles without a title (valid through their description) are kept.
        """

        return [
            article
            for article in articles
            if not article.title or len(article.title.split()) >= self.min_words_title
        ]
