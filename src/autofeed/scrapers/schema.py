"""Scraper reading Schema.org objects from JSON-LD blocks."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterator
from urllib.parse import urlsplit

from bs4 import BeautifulSoup
from pydantic import BaseModel

from autofeed.scrapers.base import RawRecord, Scraper
from autofeed.utils import build_absolute_url_from_relative, squish

__all__ = ["ARTICLE_TYPES", "Schema"]

logger = logging.getLogger(__name__)

ARTICLE_TYPES = frozenset(
    {
        "AdvertiserContentArticle",
        "AnalysisNewsArticle",
        "Article",
        "AskPublicNewsArticle",
        "BackgroundNewsArticle",
        "BlogPosting",
        "DiscussionForumPosting",
        "LiveBlogPosting",
        "NewsArticle",
        "OpinionNewsArticle",
        "Report",
        "ReportageNewsArticle",
        "ReviewNewsArticle",
        "SatiricalArticle",
        "ScholarlyArticle",
        "SocialMediaPosting",
        "TechArticle",
    }
)

JSON_LD_SELECTOR = 'script[type="application/ld+json"]'


def _types_of(item: dict) -> set[str]:
    value = item.get("@type")
    values = value if isinstance(value, list) else [value]
    # "http://schema.org/NewsArticle" and "schema:NewsArticle" name the same type
    return {str(entry).rsplit("/", 1)[-1].rsplit(":", 1)[-1] for entry in values if entry}


def _walk(node: Any) -> Iterator[dict]:
    """Yield every article-typed object in a JSON-LD graph, depth first."""

    if isinstance(node, list):
        for entry in node:
            yield from _walk(entry)
    elif isinstance(node, dict):
        if _types_of(node) & ARTICLE_TYPES:
            yield node
        for key, value in node.items():
            if key != "@context":
                yield from _walk(value)


def json_ld_blocks(document: BeautifulSoup) -> Iterator[Any]:
    """Yield the decoded content of every JSON-LD block, skipping malformed ones."""

    for script in document.select(JSON_LD_SELECTOR):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            yield json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.debug("Skipping malformed JSON-LD block: %s", exc)


def _first_string(value: Any, *keys: str) -> str | None:
    """Return *value* when it is a string, else the first string found under *keys*."""

    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, list):
        for entry in value:
            found = _first_string(entry, *keys)
            if found:
                return found
        return None
    if isinstance(value, dict):
        for key in keys:
            found = _first_string(value.get(key), *keys)
            if found:
                return found
    return None


def _names(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, dict):
        name = value.get("name")
        return [name] if isinstance(name, str) else []
    if isinstance(value, list):
        return [name for entry in value for name in _names(entry)]
    return []


class Schema(Scraper):
    """Map Schema.org ``Article`` objects (and subtypes) to raw records.

    Fields: ``headline``/``name`` become the title, ``url`` (or
    ``mainEntityOfPage``) the URL, ``datePublished`` the publication date,
    ``author.name`` the author and ``keywords``/``articleSection`` the
    categories.
    """

    options_key = "schema"

    @classmethod
    def is_applicable(cls, document: BeautifulSoup, options: BaseModel | None = None) -> bool:
        return any(True for block in json_ld_blocks(document) for _ in _walk(block))

    def records(self) -> Iterator[RawRecord]:
        for block in json_ld_blocks(self.document):
            for item in _walk(block):
                record = self.to_record(item)
                if record is not None:
                    yield record

    def to_record(self, item: dict) -> RawRecord | None:
        url = _first_string(item.get("url")) or _first_string(item.get("mainEntityOfPage"), "@id", "url")
        if not url:
            self.logger.debug("Skipping schema object without url: %s", item.get("@id"))
            return None
        url = build_absolute_url_from_relative(url, self.base_url)

        image = _first_string(item.get("image"), "url", "contentUrl", "@id") or _first_string(
            item.get("thumbnailUrl")
        )
        authors = _names(item.get("author"))

        return {
            "id": self._id(item, url),
            "title": squish(_first_string(item.get("headline")) or _first_string(item.get("name"))) or None,
            "description": _first_string(item.get("description"))
            or _first_string(item.get("abstract"))
            or _first_string(item.get("articleBody")),
            "url": url,
            "image": build_absolute_url_from_relative(image, self.base_url) if image else None,
            "author": ", ".join(author.strip() for author in authors if author.strip()) or None,
            "published_at": _first_string(item.get("datePublished")) or _first_string(item.get("dateCreated")),
            "categories": self._categories(item),
        }

    @staticmethod
    def _id(item: dict, url: str) -> str:
        identifier = item.get("@id") or item.get("identifier")
        if isinstance(identifier, (str, int)) and str(identifier).strip():
            return str(identifier).strip()
        path = urlsplit(url).path.strip("/")
        return path or url

    @staticmethod
    def _categories(item: dict) -> list[str]:
        categories: list[str] = []
        keywords = item.get("keywords")
        if isinstance(keywords, str):
            categories.extend(keywords.split(","))
        elif isinstance(keywords, list):
            categories.extend(str(keyword) for keyword in keywords if isinstance(keyword, (str, int)))

        section = item.get("articleSection")
        if isinstance(section, str):
            categories.append(section)
        elif isinstance(section, list):
            categories.extend(str(entry) for entry in section if isinstance(entry, str))
        return categories
