"""Node-local heuristics turning one container element into a raw article record.

Both HTML scrapers hand every candidate container to :func:`extract_article`.
The parsed document is shared between scraper threads, so nothing here
modifies the tree.
"""

from __future__ import annotations

from typing import Iterable, Iterator
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from autofeed.utils import build_absolute_url_from_relative, checksum36, squish, titleized_url

__all__ = [
    "HEADING_TAGS",
    "NON_CONTENT_TAGS",
    "document_base_url",
    "extract_article",
    "find_heading",
    "find_link",
    "text_of",
]

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
NON_CONTENT_TAGS = frozenset({"script", "style", "noscript", "template", "svg", "head", "title"})
_UNUSABLE_HREF_PREFIXES = ("#", "javascript:", "mailto:", "tel:", "data:")


def document_base_url(document: BeautifulSoup, url: str) -> str:
    """Return the URL relative links of *document* resolve against."""

    base = document.find("base", href=True)
    if base is not None and base["href"].strip():
        return urljoin(url, base["href"].strip())
    return url


def _strings(node: Tag, skip: set[int]) -> Iterator[str]:
    for child in node.children:
        if isinstance(child, Tag):
            if id(child) in skip or child.name in NON_CONTENT_TAGS:
                continue
            yield from _strings(child, skip)
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            yield str(child)


def text_of(node: Tag, exclude: Iterable[Tag] = ()) -> str:
    """Visible text of *node* without comments, scripts and the *exclude* subtrees."""

    return squish(" ".join(_strings(node, {id(tag) for tag in exclude})))


def find_heading(container: Tag) -> Tag | None:
    if container.name in HEADING_TAGS:
        return container
    for heading in container.find_all(list(HEADING_TAGS)):
        if text_of(heading):
            return heading
    return None


def _usable_href(anchor: Tag | None) -> str | None:
    if anchor is None:
        return None
    href = anchor.get("href")
    if not isinstance(href, str):
        return None
    href = href.strip()
    if not href or href.lower().startswith(_UNUSABLE_HREF_PREFIXES):
        return None
    return href


def find_link(container: Tag, heading: Tag | None = None) -> Tag | None:
    """Pick the anchor most likely pointing at the article itself.

    A link inside (or around) the heading wins, then the container when it is
    a link itself, then the first usable link of the container.
    """

    if heading is not None:
        for anchor in heading.find_all("a", href=True):
            if _usable_href(anchor):
                return anchor
        parent = heading.find_parent("a", href=True)
        if parent is not None and _usable_href(parent):
            return parent

    if container.name == "a" and _usable_href(container):
        return container

    for anchor in container.find_all("a", href=True):
        if _usable_href(anchor):
            return anchor
    return None


def _image_source(image: Tag) -> str | None:
    for attribute in ("src", "data-src", "data-lazy-src", "data-original"):
        value = image.get(attribute)
        if isinstance(value, str) and value.strip() and not value.strip().startswith("data:"):
            return value.strip()
    srcset = image.get("srcset") or image.get("data-srcset")
    if isinstance(srcset, str) and srcset.strip():
        return srcset.split(",")[0].split()[0]
    return None


def find_image(container: Tag) -> str | None:
    for image in container.find_all("img"):
        source = _image_source(image)
        if source:
            return source
    for source in container.select("picture source[srcset]"):
        srcset = source.get("srcset", "").strip()
        if srcset:
            return srcset.split(",")[0].split()[0]
    return None


def find_published_at(container: Tag) -> str | None:
    time = container.find("time")
    if time is None:
        return None
    value = time.get("datetime")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return text_of(time) or None


def generate_id(container: Tag, heading: Tag | None, url: str) -> str:
    """Return the DOM id of the container (or its heading) or one derived from *url*."""

    for candidate in (container.get("id"), container.get("data-id"), heading.get("id") if heading else None):
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()

    parts = urlsplit(url)
    derived = parts.path.strip("/")
    if parts.query:
        derived = f"{derived}?{parts.query}"
    return derived or checksum36(url)


def extract_article(container: Tag, base_url: str) -> dict | None:
    """Return a raw record for *container*, or ``None`` when it lacks a URL or text."""

    heading = find_heading(container)
    anchor = find_link(container, heading)
    href = _usable_href(anchor)
    if not href:
        return None
    url = build_absolute_url_from_relative(href, base_url)

    if heading is not None:
        title = text_of(heading)
    else:
        title = text_of(anchor) or squish(anchor.get("title")) or titleized_url(url)

    exclude = [heading] if heading is not None and heading is not container else []
    description = text_of(container, exclude=exclude) if heading is not container else ""
    if not title and not description:
        return None

    image = find_image(container)
    return {
        "id": generate_id(container, heading, url),
        "title": title or None,
        "description": description or None,
        "url": url,
        "image": build_absolute_url_from_relative(image, base_url) if image else None,
        "published_at": find_published_at(container),
    }
