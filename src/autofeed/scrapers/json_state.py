"""Scraper reading articles from application state embedded in the page.

Server-rendered single page apps ship their initial state as JSON, either in
a dedicated ``<script type="application/json">`` element (Next.js'
``__NEXT_DATA__``, Nuxt's ``__NUXT_DATA__``...) or assigned to a global
(``window.__INITIAL_STATE__ = {...}``). The state is searched for lists of
objects that look like articles: a title-ish key and a link-ish key.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterator

from bs4 import BeautifulSoup
from pydantic import BaseModel

from autofeed.scrapers.base import RawRecord, Scraper
from autofeed.utils import build_absolute_url_from_relative, squish

__all__ = ["JsonState"]

logger = logging.getLogger(__name__)

STATE_SCRIPT_SELECTOR = 'script[type="application/json"], script#__NEXT_DATA__, script[data-state]'
STATE_ASSIGNMENT_RE = re.compile(
    r"window\.(?:__INITIAL_STATE__|__PRELOADED_STATE__|__APOLLO_STATE__|__NUXT__|__STATE__|__DATA__)\s*=\s*",
)

TITLE_KEYS = ("title", "headline", "name")
URL_KEYS = ("url", "link", "href", "permalink", "canonicalUrl", "path")
ID_KEYS = ("id", "uuid", "guid", "slug")
DESCRIPTION_KEYS = ("description", "summary", "excerpt", "teaser", "subtitle", "lead")
IMAGE_KEYS = ("image", "imageUrl", "image_url", "thumbnail", "thumbnailUrl", "cover", "picture")
PUBLISHED_KEYS = ("publishedAt", "published_at", "datePublished", "publishDate", "date", "createdAt", "created_at")
AUTHOR_KEYS = ("author", "authors", "byline")
CATEGORY_KEYS = ("categories", "tags", "section", "category")


def _decode_assignment(text: str) -> Any:
    match = STATE_ASSIGNMENT_RE.search(text)
    if match is None:
        return None
    decoder = json.JSONDecoder()
    value, _ = decoder.raw_decode(text, match.end())
    return value


def state_blobs(document: BeautifulSoup) -> Iterator[Any]:
    """Yield every decodable state blob of *document*; undecodable ones are skipped."""

    for script in document.select(STATE_SCRIPT_SELECTOR):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            yield json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.debug("Skipping malformed JSON state script: %s", exc)

    for script in document.find_all("script"):
        if script.get("type") not in (None, "", "text/javascript", "application/javascript"):
            continue
        raw = script.string or ""
        if "window." not in raw:
            continue
        try:
            value = _decode_assignment(raw)
        except json.JSONDecodeError as exc:
            logger.debug("Skipping undecodable state assignment: %s", exc)
            continue
        if value is not None:
            yield value


def _first(item: dict, keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = item.get(key)
        if value not in (None, "", [], {}):
            return value
    return None


def _text(value: Any, *keys: str) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, dict):
        for key in keys:
            found = _text(value.get(key), *keys)
            if found:
                return found
    if isinstance(value, list):
        for entry in value:
            found = _text(entry, *keys)
            if found:
                return found
    return None


def _looks_like_article(item: Any) -> bool:
    return (
        isinstance(item, dict)
        and isinstance(_first(item, TITLE_KEYS), str)
        and _text(_first(item, URL_KEYS), "href", "url") is not None
    )


def article_candidates(node: Any) -> Iterator[dict]:
    """Yield article shaped objects found in lists anywhere in *node*."""

    if isinstance(node, list):
        for entry in node:
            if _looks_like_article(entry):
                yield entry
            else:
                yield from article_candidates(entry)
    elif isinstance(node, dict):
        for value in node.values():
            yield from article_candidates(value)


class JsonState(Scraper):
    """Turn article-like objects of embedded JSON state into raw records."""

    options_key = "json_state"

    @classmethod
    def is_applicable(cls, document: BeautifulSoup, options: BaseModel | None = None) -> bool:
        return any(True for blob in state_blobs(document) for _ in article_candidates(blob))

    def records(self) -> Iterator[RawRecord]:
        for blob in state_blobs(self.document):
            for item in article_candidates(blob):
                yield self.to_record(item)

    def to_record(self, item: dict) -> RawRecord:
        url = build_absolute_url_from_relative(_text(_first(item, URL_KEYS), "href", "url"), self.base_url)
        image = _text(_first(item, IMAGE_KEYS), "url", "src", "href")
        authors = _first(item, AUTHOR_KEYS)
        if isinstance(authors, list):
            author = ", ".join(name for name in (_text(entry, "name") for entry in authors) if name)
        else:
            author = _text(authors, "name")

        categories = _first(item, CATEGORY_KEYS)
        if not isinstance(categories, list):
            categories = [categories] if categories is not None else []

        return {
            "id": _text(_first(item, ID_KEYS)) or url,
            "title": squish(_first(item, TITLE_KEYS)),
            "description": _text(_first(item, DESCRIPTION_KEYS)),
            "url": url,
            "image": build_absolute_url_from_relative(image, self.base_url) if image else None,
            "author": author or None,
            "published_at": _text(_first(item, PUBLISHED_KEYS)),
            "categories": [name for name in (_text(entry, "name", "title") for entry in categories) if name],
        }
