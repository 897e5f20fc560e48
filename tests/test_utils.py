from __future__ import annotations

import zlib

import pytest

from autofeed.utils import (
    build_absolute_url_from_relative,
    checksum36,
    guess_content_type_from_url,
    sanitize_url,
    squish,
    titleized_channel_url,
    titleized_url,
)


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        (None, None),
        (" ", None),
        ("http://example.com/ ", "http://example.com/"),
        ("http://ex.ampl/page?sc=345s#abc", "http://ex.ampl/page?sc=345s#abc"),
        ("https://example.com/sprite.svg#play", "https://example.com/sprite.svg#play"),
        ("mailto:bogus@void.space", "mailto:bogus@void.space"),
        ("http://übermedien.de", "http://xn--bermedien-p9a.de/"),
        ("http://www.詹姆斯.com/", "http://www.xn--8ws00zhy3a.com/"),
        ("http://EXAMPLE.com:80/path", "http://example.com/path"),
        ("https://example.com:8443/path", "https://example.com:8443/path"),
        ("https://example.com/über", "https://example.com/%C3%BCber"),
        ("https://example.com/a%20b", "https://example.com/a%20b"),
        (" https://example.com/a b ", "https://example.com/ab"),
        ("/relative/path", "/relative/path"),
    ],
)
def test_sanitize_url(url, expected) -> None:
    assert sanitize_url(url) == expected


def test_sanitize_url_returns_none_for_invalid_urls() -> None:
    assert sanitize_url("http://[invalid") is None
    assert sanitize_url("http://example..com/") is None


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("/sprite.svg#play", "https://example.com/sprite.svg#play"),
        ("/search?q=term", "https://example.com/search?q=term"),
        ("https://other.example/x", "https://other.example/x"),
    ],
)
def test_build_absolute_url_from_relative(url, expected) -> None:
    assert build_absolute_url_from_relative(url, "https://example.com") == expected


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("http://www.example.com", "www.example.com"),
        ("http://www.example.com/foobar", "www.example.com: Foobar"),
        ("http://www.example.com/foobar/baz", "www.example.com: Foobar Baz"),
    ],
)
def test_titleized_channel_url(url, expected) -> None:
    assert titleized_channel_url(url) == expected


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("http://www.example.com", ""),
        ("http://www.example.com/foobar/", "Foobar"),
        ("http://www.example.com/foobar/baz.txt", "Foobar Baz"),
        ("http://www.example.com/foo-bar/baz_qux.pdf", "Foo Bar Baz Qux"),
        ("http://www.example.com/foo%20bar/baz%20qux.php", "Foo Bar Baz Qux"),
        ("http://www.example.com/foo%20bar/baz%20qux-4711.html", "Foo Bar Baz Qux 4711"),
    ],
)
def test_titleized_url(url, expected) -> None:
    assert titleized_url(url) == expected


def test_guess_content_type_from_url() -> None:
    assert guess_content_type_from_url("https://example.com/image.jpg?size=large") == "image/jpeg"
    assert guess_content_type_from_url("https://example.com/image.png") == "image/png"
    assert guess_content_type_from_url("https://example.com/download") == "application/octet-stream"
    assert guess_content_type_from_url(None) == "application/octet-stream"


def test_checksum36_is_base36_crc32() -> None:
    value = "https://example.com/a#!/1"

    token = checksum36(value)

    assert token == checksum36(value)
    assert token == token.lower()
    assert int(token, 36) == zlib.crc32(value.encode("utf-8"))
    assert checksum36("") == "0"


def test_squish() -> None:
    assert squish("  Article \n 1\tTitle ") == "Article 1 Title"
    assert squish(None) == ""
