"""Feed channel metadata read from the page head and the response headers."""

from __future__ import annotations

import math
import re
from typing import Mapping, Optional

from bs4 import BeautifulSoup
from pydantic import BaseModel, Field

from autofeed.utils import build_absolute_url_from_relative, sanitize_url, squish, titleized_channel_url

__all__ = ["Channel", "ChannelInfo"]

DEFAULT_TTL = 360
_MAX_AGE_RE = re.compile(r"max-age=(\d+)")


class ChannelInfo(BaseModel):
    """Serialisable snapshot of a :class:`Channel`."""

    url: str
    title: str
    description: Optional[str] = None
    language: Optional[str] = None
    image: Optional[str] = None
    last_build_date: Optional[str] = None
    ttl: int = Field(default=DEFAULT_TTL, description="Minutes readers may cache the feed")


class Channel:
    """Lazily computed channel attributes of one fetched page."""

    def __init__(self, document: BeautifulSoup, *, url: str, headers: Mapping[str, str] | None = None) -> None:
        self.document = document
        self.url = url
        self.headers = {key.lower(): value for key, value in (headers or {}).items()}

    def _meta(self, **attributes: str) -> Optional[str]:
        tag = self.document.find("meta", attrs=attributes)
        if tag is None:
            return None
        content = tag.get("content")
        return content.strip() if isinstance(content, str) and content.strip() else None

    @property
    def title(self) -> str:
        tag = self.document.find("title")
        title = squish(tag.get_text()) if tag is not None else ""
        return title or titleized_channel_url(self.url)

    @property
    def language(self) -> Optional[str]:
        html = self.document.find("html")
        language = html.get("lang") if html is not None else None
        if isinstance(language, str) and language.strip():
            return language.strip()
        header = self.headers.get("content-language", "")
        return header.split(",")[0].strip() or None

    @property
    def description(self) -> Optional[str]:
        return self._meta(name="description") or self._meta(property="og:description")

    @property
    def image(self) -> Optional[str]:
        content = self._meta(property="og:image")
        if not content:
            return None
        return sanitize_url(build_absolute_url_from_relative(content, self.url))

    @property
    def last_build_date(self) -> Optional[str]:
        return self.headers.get("last-modified")

    @property
    def ttl(self) -> int:
        """``max-age`` of the ``cache-control`` header in whole minutes, rounded up."""

        match = _MAX_AGE_RE.search(self.headers.get("cache-control", ""))
        if match is None:
            return DEFAULT_TTL
        return max(math.ceil(int(match.group(1)) / 60), 1)

    def info(self) -> ChannelInfo:
        return ChannelInfo(
            url=self.url,
            title=self.title,
            description=self.description,
            language=self.language,
            image=self.image,
            last_build_date=self.last_build_date,
            ttl=self.ttl,
        )
