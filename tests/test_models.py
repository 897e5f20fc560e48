from __future__ import annotations

import logging
from datetime import datetime, timezone

import pytest

from autofeed.models import Article, Enclosure, remove_pattern_from_start
from autofeed.utils import checksum36


def make_article(**overrides) -> Article:
    fields = {"id": "1", "title": "An article title", "url": "https://example.com/a"}
    fields.update(overrides)
    return Article(**fields)


@pytest.mark.parametrize(
    ("fields", "valid"),
    [
        ({"id": "1", "title": "Title", "url": "https://example.com/a"}, True),
        ({"id": "1", "description": "Only text", "url": "https://example.com/a"}, True),
        ({"id": "1", "title": "Title"}, False),
        ({"id": "1", "title": "Title", "url": "   "}, False),
        ({"title": "Title", "url": "https://example.com/a"}, False),
        ({"id": "1", "url": "https://example.com/a"}, False),
        ({"id": "1", "title": "", "description": "", "url": "https://example.com/a"}, False),
    ],
)
def test_valid(fields, valid) -> None:
    assert Article(**fields).valid is valid


def test_guid_is_deterministic() -> None:
    first = make_article()
    second = make_article(title="Another title")

    assert first.guid == first.guid
    assert first.guid == second.guid
    assert first.guid == checksum36("https://example.com/a#!/1")


def test_guid_uses_explicit_sources() -> None:
    article = make_article(guid=[" a ", "", "b", None])

    assert article.guid == checksum36("ab")


def test_guid_falls_back_when_sources_are_blank() -> None:
    assert make_article(guid=["  ", ""]).guid == make_article().guid


def test_url_and_image_are_sanitized() -> None:
    article = make_article(url=" https://example.com/a b ", image="http://übermedien.de/i.jpg")

    assert article.url == "https://example.com/ab"
    assert article.image == "http://xn--bermedien-p9a.de/i.jpg"


def test_invalid_url_becomes_none() -> None:
    article = make_article(url="http://[invalid")

    assert article.url is None
    assert article.valid is False


def test_description_strips_leading_title() -> None:
    article = make_article(title="Hello World", description="Hello World and more text here")

    assert article.description == "and more text here"


def test_description_keeps_title_found_late() -> None:
    article = make_article(title="Hello", description="Some text before Hello")

    assert article.description == "Some text before Hello"


def test_description_with_markup_is_sanitized() -> None:
    article = make_article(description='<p>Read <a href="/more">more</a></p><script>alert(1)</script>')

    assert "<script" not in article.description
    assert 'href="https://example.com/more"' in article.description
    assert 'rel="nofollow noopener noreferrer"' in article.description


def test_blank_description_is_none() -> None:
    assert make_article(description="   ").description is None


def test_remove_pattern_from_start() -> None:
    assert remove_pattern_from_start("Title body text here", "Title") == " body text here"
    assert remove_pattern_from_start("body text here Title", "Title") == "body text here Title"
    assert remove_pattern_from_start("text", "") == "text"


def test_categories_are_cleaned() -> None:
    article = make_article(categories=[" news", "tech", "news", "", "  "])

    assert article.categories == ("news", "tech")


def test_enclosure_is_built_from_image() -> None:
    article = make_article(image="https://example.com/image.jpg")

    assert article.enclosure == Enclosure(url="https://example.com/image.jpg", content_type="image/jpeg", size=0)


def test_enclosure_from_mapping() -> None:
    article = make_article(enclosure={"url": "https://example.com/episode.mp3", "size": 1024})

    assert article.enclosure.url == "https://example.com/episode.mp3"
    assert article.enclosure.content_type == "audio/mpeg"
    assert article.enclosure.size == 1024


def test_unknown_enclosure_type_logs_warning(caplog) -> None:
    article = make_article(enclosure=42)

    with caplog.at_level(logging.WARNING, logger="autofeed.models"):
        assert article.enclosure is None

    assert "unknown enclosure type: int" in caplog.text


def test_no_enclosure_without_image() -> None:
    assert make_article().enclosure is None


def test_published_at_is_parsed() -> None:
    article = make_article(published_at="2024-10-05T10:00:00Z")

    assert article.published_at == datetime(2024, 10, 5, 10, 0, tzinfo=timezone.utc)
    assert make_article(published_at="not a date").published_at is None
    assert make_article().published_at is None


def test_unknown_keys_log_warning(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="autofeed.models"):
        Article(id="1", title="Title", url="https://example.com/a", foo="bar")

    assert "Article: unknown keys found: foo" in caplog.text


def test_fields_are_read_only() -> None:
    article = make_article()

    with pytest.raises(TypeError):
        article.fields["title"] = "Changed"


def test_replace_returns_new_article() -> None:
    article = make_article()

    changed = article.replace(title="Changed title")

    assert changed.title == "Changed title"
    assert article.title == "An article title"
    assert changed.url == article.url


def test_equality_and_iteration() -> None:
    article = make_article()

    assert article == make_article()
    assert article != make_article(title="Other title")
    assert dict(article)["title"] == "An article title"
    assert list(dict(article)) == list(Article.PROVIDED_KEYS)
