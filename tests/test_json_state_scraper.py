from __future__ import annotations

import json

from bs4 import BeautifulSoup

from autofeed.scrapers.json_state import JsonState

NEXT_DATA = {
    "props": {
        "pageProps": {
            "posts": [
                {
                    "id": 7,
                    "title": "First story from the state",
                    "url": "/posts/7",
                    "excerpt": "Intro text",
                    "image": {"url": "/img/7.png"},
                    "publishedAt": "2024-02-01",
                    "author": {"name": "Ann"},
                    "tags": [{"name": "tech"}, "science"],
                },
                {"id": 8, "title": "Second story from the state", "href": "https://example.com/posts/8"},
            ],
            "menu": [{"label": "Home", "target": "/"}],
        }
    }
}


def next_page(data: dict) -> BeautifulSoup:
    return BeautifulSoup(
        f'<html><body><script id="__NEXT_DATA__" type="application/json">{json.dumps(data)}</script></body></html>',
        "lxml",
    )


def test_is_applicable() -> None:
    assert JsonState.is_applicable(next_page(NEXT_DATA)) is True
    assert JsonState.is_applicable(next_page({"props": {"menu": [{"label": "Home"}]}})) is False
    assert JsonState.is_applicable(BeautifulSoup("<p>plain</p>", "lxml")) is False


def test_records_from_next_data() -> None:
    records = list(JsonState(next_page(NEXT_DATA), "https://example.com/"))

    assert len(records) == 2
    first, second = records
    assert first == {
        "id": "7",
        "title": "First story from the state",
        "description": "Intro text",
        "url": "https://example.com/posts/7",
        "image": "https://example.com/img/7.png",
        "author": "Ann",
        "published_at": "2024-02-01",
        "categories": ["tech", "science"],
        "scraper": JsonState,
    }
    assert second["id"] == "8"
    assert second["url"] == "https://example.com/posts/8"
    assert second["categories"] == []


def test_records_from_window_assignment() -> None:
    script = 'window.__INITIAL_STATE__ = {"articles": [{"headline": "Assigned story", "link": "/a"}]};'
    document = BeautifulSoup(f"<html><body><script>{script}</script></body></html>", "lxml")

    records = list(JsonState(document, "https://example.com/"))

    assert [(record["title"], record["url"]) for record in records] == [("Assigned story", "https://example.com/a")]


def test_malformed_state_is_skipped() -> None:
    document = BeautifulSoup(
        '<script type="application/json">{broken</script><script>window.__NUXT__=(function(a){return a})(1);</script>',
        "lxml",
    )

    assert JsonState.is_applicable(document) is False
    assert list(JsonState(document, "https://example.com/")) == []
