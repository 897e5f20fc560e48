"""Sanitise HTML fragments found in article descriptions.

The allow-list follows the usual "relaxed" profile: text-level and block
formatting, lists, tables, figures and images survive, everything able to
run code or pull in foreign documents is removed. Links and images are made
absolute against the article URL, links open without leaking a referrer and
images not already wrapped in a link are wrapped in one pointing at the
image source.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Comment, Tag

from autofeed.utils import build_absolute_url_from_relative, sanitize_url

__all__ = ["ALLOWED_TAGS", "contains_html", "sanitize_html"]

ALLOWED_TAGS = frozenset(
    {
        "a", "abbr", "b", "bdi", "bdo", "blockquote", "br", "caption", "cite",
        "code", "col", "colgroup", "data", "dd", "del", "dfn", "div", "dl", "dt",
        "em", "figcaption", "figure", "h1", "h2", "h3", "h4", "h5", "h6",
        "hgroup", "hr", "i", "img", "ins", "kbd", "li", "mark", "ol", "p",
        "picture", "pre", "q", "rp", "rt", "ruby", "s", "samp", "small",
        "source", "span", "strike", "strong", "sub", "summary", "sup", "table",
        "tbody", "td", "tfoot", "th", "thead", "time", "tr", "u", "ul", "var",
        "wbr",
    }
)

# Removed together with their content.
DROPPED_TAGS = frozenset(
    {
        "script", "style", "iframe", "object", "embed", "noscript", "template",
        "form", "input", "button", "select", "textarea", "svg", "math", "canvas",
        "audio", "video", "frame", "frameset", "link", "meta", "head", "title",
    }
)

GLOBAL_ATTRIBUTES = frozenset({"dir", "lang", "alt", "title", "translate"})

TAG_ATTRIBUTES = {
    "a": frozenset({"href"}),
    "blockquote": frozenset({"cite"}),
    "col": frozenset({"span", "width"}),
    "colgroup": frozenset({"span", "width"}),
    "data": frozenset({"value"}),
    "del": frozenset({"cite", "datetime"}),
    "img": frozenset({"align", "alt", "height", "src", "srcset", "width"}),
    "ins": frozenset({"cite", "datetime"}),
    "li": frozenset({"value"}),
    "ol": frozenset({"reversed", "start", "type"}),
    "q": frozenset({"cite"}),
    "source": frozenset({"media", "sizes", "src", "srcset", "type"}),
    "td": frozenset({"colspan", "rowspan"}),
    "th": frozenset({"colspan", "rowspan", "scope"}),
    "time": frozenset({"datetime"}),
    "ul": frozenset({"type"}),
}

URL_ATTRIBUTES = frozenset({"href", "src", "cite"})
ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto", ""})

ADD_ATTRIBUTES = {
    "a": {"rel": "nofollow noopener noreferrer", "target": "_blank"},
    "img": {"referrer-policy": "no-referrer"},
}

_WHITESPACE_RE = re.compile(r"\s+")


def contains_html(text: str | None) -> bool:
    """Return ``True`` when *text* holds at least one element."""

    if not text:
        return False
    fragment = BeautifulSoup(text, "html.parser")
    return any(isinstance(child, Tag) for child in fragment.children)


def _absolute(value: str, base_url: str) -> str | None:
    url = sanitize_url(value)
    if url is None:
        return None
    absolute = build_absolute_url_from_relative(url, base_url)
    scheme = absolute.split(":", 1)[0].lower() if ":" in absolute else ""
    if scheme not in ALLOWED_PROTOCOLS:
        return None
    return absolute


def _absolute_srcset(value: str, base_url: str) -> str:
    candidates = []
    for candidate in value.split(","):
        parts = candidate.split()
        if not parts:
            continue
        url = _absolute(parts[0], base_url)
        if url:
            candidates.append(" ".join([url, *parts[1:]]))
    return ", ".join(candidates)


def _clean_attributes(tag: Tag, base_url: str) -> None:
    allowed = GLOBAL_ATTRIBUTES | TAG_ATTRIBUTES.get(tag.name, frozenset())
    attributes = {}
    for name, value in tag.attrs.items():
        if name not in allowed:
            continue
        if isinstance(value, list):
            value = " ".join(value)
        if name in URL_ATTRIBUTES:
            value = _absolute(value, base_url)
            if value is None:
                continue
        elif name == "srcset":
            value = _absolute_srcset(value, base_url)
        attributes[name] = value
    attributes.update(ADD_ATTRIBUTES.get(tag.name, {}))
    tag.attrs = attributes


def _wrap_img_in_a(soup: BeautifulSoup, image: Tag) -> None:
    src = image.get("src")
    if not src or (image.parent is not None and image.parent.name == "a"):
        return
    link = soup.new_tag("a", href=src, **ADD_ATTRIBUTES["a"])
    image.wrap(link)


def sanitize_html(html: str | None, url: str) -> str | None:
    """Return a sanitised copy of *html* with URLs made absolute against *url*."""

    if not url:
        raise ValueError("url must be given to sanitize HTML")
    if not html:
        return None

    soup = BeautifulSoup(html, "html.parser")

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for tag in soup.find_all(True):
        if tag.decomposed:
            continue
        if tag.name in DROPPED_TAGS:
            tag.decompose()
        elif tag.name not in ALLOWED_TAGS:
            tag.unwrap()

    for tag in soup.find_all(True):
        _clean_attributes(tag, url)

    for image in soup.find_all("img"):
        _wrap_img_in_a(soup, image)

    return _WHITESPACE_RE.sub(" ", str(soup)).strip()
