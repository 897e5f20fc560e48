"""autofeed package detecting the articles of arbitrary HTML pages."""

from __future__ import annotations

from .auto_source import AutoSource
from .config import DEFAULT_CONFIG, AutoSourceConfig
from .models import Article, Enclosure
from .scrapers import NoScraperFound

__all__ = ["Article", "AutoSource", "AutoSourceConfig", "DEFAULT_CONFIG", "Enclosure", "NoScraperFound"]
