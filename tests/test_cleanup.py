from __future__ import annotations

from autofeed.cleanup import Cleanup
from autofeed.config import CleanupConfig
from autofeed.models import Article


def article(id: str, title: str | None = "A perfectly fine article title", url: str | None = None, **fields) -> Article:
    return Article(id=id, title=title, url=url or f"https://example.com/{id}", **fields)


def test_min_words_title() -> None:
    articles = [
        article("short", title="Hi there"),
        article("long", title="Five word article title here"),
    ]

    result = Cleanup.call(articles, url="https://example.com", min_words_title=5)

    assert [item.id for item in result] == ["long"]


def test_titleless_articles_are_kept() -> None:
    articles = [article("no-title", title=None, description="Only a description")]

    assert Cleanup("https://example.com")(articles) == articles


def test_reject_different_domain() -> None:
    articles = [
        article("local"),
        article("www", url="https://www.example.com/www"),
        article("foreign", url="https://other.example/foreign"),
    ]

    kept = Cleanup.call(articles, url="https://example.com", keep_different_domain=False)
    everything = Cleanup.call(articles, url="https://example.com")

    assert [item.id for item in kept] == ["local"]
    assert len(everything) == 3


def test_keep_only_http_urls() -> None:
    articles = [
        article("web"),
        article("mail", url="mailto:editor@example.com"),
        article("ftp", url="ftp://example.com/file"),
    ]

    assert [item.id for item in Cleanup("https://example.com")(articles)] == ["web"]


def test_strip_markers() -> None:
    articles = [
        article(
            "marked",
            title="Breaking   news <!-- promo --> about things -->",
            description="Body <!-- hidden --> text",
        )
    ]

    result = Cleanup("https://example.com")(articles)

    assert result[0].title == "Breaking news about things"
    assert "hidden" not in result[0].description
    assert result[0].id == "marked"


def test_strip_markers_keeps_untouched_articles() -> None:
    original = article("plain")

    assert Cleanup("https://example.com").strip_markers([original])[0] is original


def test_from_config() -> None:
    cleanup = Cleanup.from_config("https://example.com", CleanupConfig(keep_different_domain=False, min_words_title=1))

    assert cleanup.keep_different_domain is False
    assert cleanup.min_words_title == 1
