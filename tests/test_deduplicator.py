from __future__ import annotations

from autofeed.deduplicator import deduplicate
from autofeed.models import Article


def test_keeps_first_article_per_url() -> None:
    articles = [
        Article(id="a", title="First", url="https://example.com/post"),
        Article(id="b", title="Second", url="https://example.com/other"),
        Article(id="c", title="Duplicate", url=" https://EXAMPLE.com/post "),
    ]

    result = deduplicate(articles)

    assert [article.id for article in result] == ["a", "b"]


def test_duplicates_are_not_merged() -> None:
    first = Article(id="a", title="First", url="https://example.com/post")
    later = Article(id="b", title="Later", url="https://example.com/post", image="https://example.com/i.png")

    result = deduplicate([first, later])

    assert result == [first]
    assert result[0].image is None


def test_drops_articles_without_url() -> None:
    assert deduplicate([Article(id="a", title="No url")]) == []


def test_empty_input() -> None:
    assert deduplicate([]) == []
