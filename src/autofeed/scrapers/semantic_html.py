"""Scraper for pages marking their items up with semantic HTML."""

from __future__ import annotations

from collections import Counter
from typing import Iterator

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString
from pydantic import BaseModel

from autofeed.extraction import HEADING_TAGS, NON_CONTENT_TAGS, extract_article, text_of
from autofeed.scrapers.base import RawRecord, Scraper
from autofeed.utils import squish

__all__ = ["SemanticHtml"]

HEADING_LINK_SELECTOR = ", ".join(f"{heading} a[href]" for heading in HEADING_TAGS)


def _innermost_articles(document: BeautifulSoup) -> list[Tag]:
    return [article for article in document.find_all("article") if article.find("article") is None]


def _linked_headings(document: BeautifulSoup) -> list[Tag]:
    """Headings holding a link that are not inside any ``<article>``, in document order."""

    headings: list[Tag] = []
    seen: set[int] = set()
    for anchor in document.select(HEADING_LINK_SELECTOR):
        heading = anchor.find_parent(list(HEADING_TAGS))
        if heading is None or id(heading) in seen or heading.find_parent("article") is not None:
            continue
        seen.add(id(heading))
        headings.append(heading)
    return headings


def _heading_containers(document: BeautifulSoup) -> list[Tag]:
    """Container of every linked heading outside an ``<article>``.

    A heading sharing its parent with other linked headings is its own
    container, as is a heading directly below ``<body>``; otherwise the
    parent is.
    """

    headings = _linked_headings(document)
    per_parent = Counter(id(heading.parent) for heading in headings)

    containers: list[Tag] = []
    seen: set[int] = set()
    for heading in headings:
        parent = heading.parent
        if parent is None or parent.name == "body" or per_parent[id(parent)] > 1:
            container = heading
        else:
            container = parent
        if id(container) in seen:
            continue
        seen.add(id(container))
        containers.append(container)
    return containers


def section_text(heading: Tag) -> str:
    """Text following *heading* up to the next sibling heading."""

    parts: list[str] = []
    for sibling in heading.next_siblings:
        if isinstance(sibling, Tag):
            if sibling.name in HEADING_TAGS or sibling.find(list(HEADING_TAGS)) is not None:
                break
            if sibling.name not in NON_CONTENT_TAGS:
                parts.append(text_of(sibling))
        elif isinstance(sibling, NavigableString) and not isinstance(sibling, PreformattedString):
            parts.append(str(sibling))
    return squish(" ".join(parts))


class SemanticHtml(Scraper):
    """Extract one record per ``<article>`` element or linked heading block.

    Per container the nearest heading gives the title, the heading's link (or
    the first link) the URL, the remaining text the description and the DOM
    id (or one derived from the URL) the id.
    """

    options_key = "semantic_html"

    @classmethod
    def is_applicable(cls, document: BeautifulSoup, options: BaseModel | None = None) -> bool:
        return document.find("article") is not None or bool(document.select_one(HEADING_LINK_SELECTOR))

    def containers(self) -> list[Tag]:
        return _innermost_articles(self.document) + _heading_containers(self.document)

    def records(self) -> Iterator[RawRecord]:
        for container in self.containers():
            record = extract_article(container, self.base_url)
            if record is None:
                self.logger.debug("Dropping <%s> container without url or text", container.name)
                continue
            if container.name in HEADING_TAGS:
                record["description"] = section_text(container) or None
            yield record
