"""Domain models used across the application."""

from __future__ import annotations

import logging
from datetime import datetime
from functools import cached_property
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Tuple

from dateutil.parser import parse as parse_date
from pydantic import BaseModel, ConfigDict, Field, model_validator

from autofeed.sanitizer import contains_html, sanitize_html
from autofeed.utils import checksum36, guess_content_type_from_url, sanitize_url

__all__ = ["Article", "Enclosure"]

logger = logging.getLogger(__name__)


class Enclosure(BaseModel):
    """Media file attached to an article."""

    model_config = ConfigDict(frozen=True)

    url: str
    content_type: Optional[str] = Field(default=None, description="MIME type, guessed from the URL when omitted")
    size: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _fill_content_type(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and not data.get("content_type"):
            data = {**data, "content_type": guess_content_type_from_url(data.get("url"))}
        return data


def remove_pattern_from_start(text: str, pattern: str, end_of_range: int | None = None) -> str:
    """Remove *pattern* from *text* when it starts before *end_of_range*.

    *end_of_range* defaults to half the length of *text*.
    """

    if not isinstance(text, str) or not isinstance(pattern, str) or not pattern:
        return text
    if end_of_range is None:
        end_of_range = int(len(text) * 0.5)

    index = text.find(pattern)
    if index == -1 or index >= end_of_range:
        return text
    return text[:index] + text[index + len(pattern):]


class Article:
    """An article candidate extracted from a page.

    The raw fields are kept in a read-only mapping. Derived values (``url``,
    ``guid``, ``description``...) are computed on first access and cached.
    Iterating over an article yields ``(key, value)`` pairs for every key in
    :attr:`PROVIDED_KEYS`.
    """

    PROVIDED_KEYS: Tuple[str, ...] = (
        "id",
        "title",
        "description",
        "url",
        "image",
        "author",
        "guid",
        "published_at",
        "enclosure",
        "categories",
        "scraper",
    )

    def __init__(self, **options: Any) -> None:
        fields = {key: value for key, value in options.items() if value is not None}
        self._fields: Mapping[str, Any] = MappingProxyType(fields)

        unknown_keys = [key for key in options if key not in self.PROVIDED_KEYS]
        if unknown_keys:
            logger.warning("Article: unknown keys found: %s", ", ".join(unknown_keys))

    @property
    def fields(self) -> Mapping[str, Any]:
        """Read-only view of the raw fields the article was built from."""

        return self._fields

    def replace(self, **changes: Any) -> "Article":
        """Return a new article with *changes* applied to the raw fields."""

        return Article(**{**self._fields, **changes})

    @property
    def valid(self) -> bool:
        """``True`` when the article has a URL, an id and a title or description."""

        return bool(self.url) and bool(self.title or self.description) and bool(self.id)

    @property
    def id(self) -> Optional[str]:
        value = self._fields.get("id")
        return str(value) if value is not None else None

    @property
    def title(self) -> Optional[str]:
        return self._fields.get("title")

    @property
    def author(self) -> Optional[str]:
        return self._fields.get("author")

    @property
    def scraper(self) -> Any:
        return self._fields.get("scraper")

    @cached_property
    def url(self) -> Optional[str]:
        return sanitize_url(self._fields.get("url"))

    @cached_property
    def image(self) -> Optional[str]:
        return sanitize_url(self._fields.get("image"))

    @cached_property
    def description(self) -> Optional[str]:
        description = self._fields.get("description")
        if not description or not str(description).strip():
            return None

        description = str(description)
        if self.title:
            description = remove_pattern_from_start(description, self.title)

        if contains_html(description) and self.url:
            return sanitize_html(description, self.url)
        return description.strip() or None

    @cached_property
    def guid(self) -> str:
        return checksum36(self._guid_source())

    @cached_property
    def enclosure(self) -> Optional[Enclosure]:
        value = self._fields.get("enclosure")
        if isinstance(value, Enclosure):
            return value
        if isinstance(value, Mapping):
            return Enclosure(**value)
        if value is None:
            return Enclosure(url=self.image) if self.image else None

        logger.warning("Article: unknown enclosure type: %s", type(value).__name__)
        return None

    @cached_property
    def categories(self) -> Tuple[str, ...]:
        raw = self._fields.get("categories") or ()
        if isinstance(raw, str):
            raw = (raw,)

        categories: list[str] = []
        for category in raw:
            cleaned = str(category).strip()
            if cleaned and cleaned not in categories:
                categories.append(cleaned)
        return tuple(categories)

    @cached_property
    def published_at(self) -> Optional[datetime]:
        value = self._fields.get("published_at")
        if isinstance(value, datetime):
            return value

        string = str(value).strip() if value is not None else ""
        if not string:
            return None
        try:
            return parse_date(string)
        except (ValueError, OverflowError):
            return None

    def _guid_source(self) -> str:
        raw = self._fields.get("guid")
        if isinstance(raw, (list, tuple)):
            joined = "".join(str(part).strip() for part in raw if part is not None)
            if joined:
                return joined
        return "#!/".join([self.url or "", self.id or ""])

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        for key in self.PROVIDED_KEYS:
            yield key, getattr(self, key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Article):
            return NotImplemented
        return list(self) == list(other)

    def __hash__(self) -> int:
        return hash((self.guid, self.title))

    def __repr__(self) -> str:
        return f"Article(id={self.id!r}, title={self.title!r}, url={self.url!r})"
