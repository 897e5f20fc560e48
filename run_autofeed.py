"""Convenience script detecting the articles of a page and printing them as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import requests

# Ensure the src directory is on the Python path so the autofeed package can be imported
SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from autofeed.auto_source import AutoSource  # noqa: E402  (import after path setup)
from autofeed.channel import Channel  # noqa: E402
from autofeed.config import AutoSourceConfig  # noqa: E402
from autofeed.fetcher import Fetcher, parse  # noqa: E402


def _article_payload(article) -> dict:
    return {
        "id": article.id,
        "guid": article.guid,
        "title": article.title,
        "description": article.description,
        "url": article.url,
        "image": article.image,
        "author": article.author,
        "published_at": article.published_at.isoformat() if article.published_at else None,
        "categories": list(article.categories),
        "enclosure": article.enclosure.model_dump() if article.enclosure else None,
        "scraper": article.scraper.__name__ if article.scraper else None,
    }


def main(argv: list[str] | None = None) -> None:
    """Fetch the page given on the command line and print its channel and articles."""

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("url", help="Page to detect articles on")
    parser.add_argument("--config", type=Path, help="JSON file with auto source configuration")
    parser.add_argument("--workers", type=int, default=None, help="Number of scraper threads")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        config = AutoSourceConfig.from_file(args.config) if args.config else AutoSourceConfig()
    except (FileNotFoundError, ValueError) as exc:
        logging.error("Could not load auto source configuration: %s", exc)
        sys.exit(1)

    try:
        response = Fetcher().get(args.url)
    except requests.RequestException as exc:
        logging.error("Failed to fetch %s: %s", args.url, exc)
        sys.exit(1)

    document = parse(response)
    articles = AutoSource(
        document, response.url, response.headers, config, max_workers=args.workers
    ).articles()
    logging.info("Found %d articles", len(articles))

    channel = Channel(document, url=response.url, headers=response.headers)
    payload = {
        "channel": channel.info().model_dump(),
        "articles": [_article_payload(article) for article in articles],
    }
    print(json.dumps(payload, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
