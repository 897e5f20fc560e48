"""URL and text helpers shared by the scrapers, models and channel."""

from __future__ import annotations

import mimetypes
import re
import zlib
from urllib.parse import quote, unquote, urljoin, urlsplit, urlunsplit

__all__ = [
    "build_absolute_url_from_relative",
    "checksum36",
    "guess_content_type_from_url",
    "sanitize_url",
    "squish",
    "titleized_channel_url",
    "titleized_url",
]

_DEFAULT_PORTS = {"http": 80, "https": 443}
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"
_QUERY_SAFE = _PATH_SAFE + "?"
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def squish(text: str | None) -> str:
    """Collapse runs of whitespace into single spaces and strip the ends."""

    if not text:
        return ""
    return " ".join(str(text).split())


def _encode_host(host: str) -> str:
    if ":" in host:
        # IPv6 literal
        return f"[{host}]"
    return host.encode("idna").decode("ascii")


def sanitize_url(url: object) -> str | None:
    """Return a normalized URL string or ``None`` when *url* is empty or invalid.

    Whitespace anywhere in the value is removed, the host is lowercased and
    IDNA encoded, default ports are dropped and path, query and fragment are
    percent-encoded where needed. Existing escapes are kept as they are.
    """

    squished = "".join(str(url).split()) if url is not None else ""
    if not squished:
        return None

    try:
        parts = urlsplit(squished)
        netloc = ""
        if parts.netloc:
            host = parts.hostname or ""
            port = parts.port
            netloc = _encode_host(host) if host else ""
            if port is not None and _DEFAULT_PORTS.get(parts.scheme.lower()) != port:
                netloc = f"{netloc}:{port}"
            if parts.username:
                userinfo = parts.username
                if parts.password:
                    userinfo = f"{userinfo}:{parts.password}"
                netloc = f"{userinfo}@{netloc}"
    except (ValueError, UnicodeError):
        return None

    scheme = parts.scheme.lower()
    path = quote(parts.path, safe=_PATH_SAFE)
    if not path and scheme in _DEFAULT_PORTS and netloc:
        path = "/"
    query = quote(parts.query, safe=_QUERY_SAFE)
    fragment = quote(parts.fragment, safe=_QUERY_SAFE)

    return urlunsplit((scheme, netloc, path, query, fragment))


def build_absolute_url_from_relative(url: str, base_url: str) -> str:
    """Resolve *url* against *base_url*; absolute URLs are returned unchanged."""

    if urlsplit(url).scheme:
        return url
    return urljoin(base_url, url)


def titleized_channel_url(url: str) -> str:
    """Build a channel title such as ``www.example.com: Foobar Baz`` from *url*."""

    parts = urlsplit(url)
    segments = [segment for segment in parts.path.split("/") if segment]
    host = parts.hostname or ""
    if not segments:
        return host
    return f"{host}: {' '.join(segment.capitalize() for segment in segments)}"


def titleized_url(url: str) -> str:
    """Turn the path of *url* into words, e.g. ``/foo-bar/baz_qux.pdf`` -> ``Foo Bar Baz Qux``."""

    path = unquote(urlsplit(url).path)
    words: list[str] = []
    for segment in path.split("/"):
        stem = segment.rsplit(".", 1)[0] if "." in segment else segment
        words.extend(word.capitalize() for word in re.split(r"[-_\s]+", stem) if word)
    return " ".join(words)


def guess_content_type_from_url(url: str | None) -> str:
    """Guess a MIME type from the file extension of *url*."""

    path = urlsplit(str(url or "")).path
    content_type, _ = mimetypes.guess_type(path)
    return content_type or "application/octet-stream"


def checksum36(value: str) -> str:
    """Return the CRC-32 of *value* rendered in lowercase base 36."""

    number = zlib.crc32(value.encode("utf-8"))
    if number == 0:
        return "0"
    digits: list[str] = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))
