"""Fetch pages over HTTP and parse them for the scrapers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping

import requests
from bs4 import BeautifulSoup
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

__all__ = ["DEFAULT_HEADERS", "Fetcher", "Response", "parse"]

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/129.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
}

REQUEST_TIMEOUT = (10, 60)

_retry = Retry(
    total=3,
    connect=3,
    read=3,
    backoff_factor=1,
    status_forcelist=[429, 500, 502, 503, 504],
    allowed_methods={"GET"},
)


@dataclass(frozen=True)
class Response:
    """Body, headers and final URL of a fetched page."""

    body: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")


def parse(response: Response) -> BeautifulSoup:
    """Parse the body of *response* into a document the scrapers can query."""

    return BeautifulSoup(response.body, "lxml")


class Fetcher:
    """Thin wrapper around a :class:`requests.Session` retrying transient failures."""

    def __init__(self, session: requests.Session | None = None) -> None:
        if session is None:
            session = requests.Session()
            session.mount("https://", HTTPAdapter(max_retries=_retry))
            session.mount("http://", HTTPAdapter(max_retries=_retry))
        self._session = session
        self._session.headers.update(DEFAULT_HEADERS)

    def get(self, url: str, headers: Mapping[str, str] | None = None) -> Response:
        """GET *url*, following redirects; HTTP errors raise :class:`requests.HTTPError`."""

        logger.info("Fetching %s", url)
        response = self._session.get(url, headers=dict(headers or {}), timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return Response(
            body=response.text,
            url=str(response.url or url),
            headers={key.lower(): value for key, value in response.headers.items()},
        )
