"""Scraper finding repeated structures in arbitrary HTML.

Listing pages repeat the markup of their items. Every element holding a link
gets a selector signature built from its own tag and classes and its
parent's tag, id and classes, e.g. ``ul.posts > li.post``. Signatures
shared by at least ``minimum_selector_frequency`` elements are ranked by
frequency and the ``use_top_selectors`` best are scraped, each matching
element being one article candidate.

An element matching several kept signatures (or nested in another
candidate) is emitted once per signature; deduplication happens later.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from bs4 import BeautifulSoup, Tag
from pydantic import BaseModel

from autofeed.config import HtmlScraperConfig
from autofeed.extraction import NON_CONTENT_TAGS, extract_article
from autofeed.scrapers.base import RawRecord, Scraper

__all__ = ["Html", "SelectorGroup", "count_selectors", "selector_signature", "top_selectors"]

IGNORED_TAGS = NON_CONTENT_TAGS | {"html", "body", "base", "meta", "link", "br", "hr", "iframe"}


def _tag_signature(tag: Tag, with_id: bool) -> tuple[str, int]:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    parts = [tag.name]
    specificity = 0
    element_id = tag.get("id")
    if with_id and isinstance(element_id, str) and element_id.strip():
        parts.append(f"#{element_id.strip()}")
        specificity += 1
    for class_name in sorted(set(classes)):
        parts.append(f".{class_name}")
        specificity += 1
    return "".join(parts), specificity


def selector_signature(element: Tag) -> tuple[str, int]:
    """Return the ``(selector, specificity)`` signature of *element*.

    The element's own id is left out, the parent's id is part of the signature.
    """

    own, specificity = _tag_signature(element, with_id=False)
    parent = element.parent
    if not isinstance(parent, Tag) or parent.name == "[document]":
        return own, specificity
    parent_signature, parent_specificity = _tag_signature(parent, with_id=True)
    return f"{parent_signature} > {own}", specificity + parent_specificity


@dataclass
class SelectorGroup:
    """Elements sharing one selector signature."""

    selector: str
    specificity: int
    first_seen: int
    elements: list[Tag] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.elements)


def _link_holders(document: BeautifulSoup) -> set[int]:
    """Return ``id()`` of every element that is, or contains, a link."""

    holders: set[int] = set()
    for anchor in document.find_all("a", href=True):
        holders.add(id(anchor))
        for ancestor in anchor.parents:
            if id(ancestor) in holders:
                break
            holders.add(id(ancestor))
    return holders


def count_selectors(document: BeautifulSoup) -> dict[str, SelectorGroup]:
    """Group every link holding element of *document* by selector signature."""

    holders = _link_holders(document)
    groups: dict[str, SelectorGroup] = {}
    for element in document.find_all(True):
        if element.name in IGNORED_TAGS or id(element) not in holders:
            continue
        if any(parent.name in NON_CONTENT_TAGS for parent in element.parents):
            continue
        selector, specificity = selector_signature(element)
        group = groups.get(selector)
        if group is None:
            group = groups[selector] = SelectorGroup(selector, specificity, len(groups))
        group.elements.append(element)
    return groups


def top_selectors(document: BeautifulSoup, minimum_frequency: int, top: int) -> list[SelectorGroup]:
    """Return the *top* most frequent groups appearing at least *minimum_frequency* times.

    Ties are broken by specificity, then by first appearance in the document.
    """

    frequent = [group for group in count_selectors(document).values() if group.count >= minimum_frequency]
    frequent.sort(key=lambda group: (-group.count, -group.specificity, group.first_seen))
    return frequent[:top]


class Html(Scraper):
    """Statistical scraper used as the fallback for every page."""

    options_key = "html"

    def __init__(self, document, url, options=None, *, logger=None) -> None:
        super().__init__(document, url, options or HtmlScraperConfig(), logger=logger)

    @classmethod
    def is_applicable(cls, document: BeautifulSoup, options: BaseModel | None = None) -> bool:
        return True

    def selectors(self) -> list[SelectorGroup]:
        return top_selectors(
            self.document,
            self.options.minimum_selector_frequency,
            self.options.use_top_selectors,
        )

    def records(self) -> Iterator[RawRecord]:
        for group in self.selectors():
            self.logger.debug("Scraping %d elements matching %s", group.count, group.selector)
            for element in group.elements:
                record = extract_article(element, self.base_url)
                if record is not None:
                    yield record
