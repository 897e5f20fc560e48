"""Configuration models and helpers for automatic article detection."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, ValidationError

__all__ = [
    "AutoSourceConfig",
    "CleanupConfig",
    "DEFAULT_CONFIG",
    "HtmlScraperConfig",
    "JsonStateConfig",
    "SchemaScraperConfig",
    "ScraperConfig",
    "SemanticHtmlConfig",
]

_MODEL_CONFIG = ConfigDict(extra="forbid", frozen=True)


class SchemaScraperConfig(BaseModel):
    """Options for the Schema.org JSON-LD scraper."""

    model_config = _MODEL_CONFIG

    enabled: StrictBool = Field(default=True, description="Whether JSON-LD blocks are scraped")


class SemanticHtmlConfig(BaseModel):
    """Options for the semantic HTML scraper."""

    model_config = _MODEL_CONFIG

    enabled: StrictBool = Field(default=True, description="Whether <article> and heading containers are scraped")


class HtmlScraperConfig(BaseModel):
    """Options for the frequency based HTML scraper."""

    model_config = _MODEL_CONFIG

    enabled: StrictBool = Field(default=True, description="Whether repeated DOM structures are scraped")
    minimum_selector_frequency: StrictInt = Field(
        default=2,
        ge=1,
        description="Minimum number of elements sharing a selector signature before it is used",
    )
    use_top_selectors: StrictInt = Field(
        default=5,
        ge=1,
        description="How many of the most frequent selector signatures are scraped",
    )


class JsonStateConfig(BaseModel):
    """Options for the embedded JSON state scraper."""

    model_config = _MODEL_CONFIG

    enabled: StrictBool = Field(default=True, description="Whether embedded application state is scraped")


class ScraperConfig(BaseModel):
    """Per scraper configuration, keyed by each scraper's ``options_key``."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    schema_: SchemaScraperConfig = Field(default_factory=SchemaScraperConfig, alias="schema")
    semantic_html: SemanticHtmlConfig = Field(default_factory=SemanticHtmlConfig)
    html: HtmlScraperConfig = Field(default_factory=HtmlScraperConfig)
    json_state: JsonStateConfig = Field(default_factory=JsonStateConfig)

    def for_scraper(self, options_key: str) -> BaseModel:
        """Return the options of the scraper registered under *options_key*."""

        if options_key == "schema":
            return self.schema_
        return getattr(self, options_key)

    def is_enabled(self, options_key: str) -> bool:
        return bool(getattr(self.for_scraper(options_key), "enabled", False))


class CleanupConfig(BaseModel):
    """Options for the cleanup chain applied to detected articles."""

    model_config = _MODEL_CONFIG

    keep_different_domain: StrictBool = Field(
        default=True,
        description="Keep articles whose URL points to another host than the source page",
    )
    min_words_title: StrictInt = Field(
        default=3,
        ge=0,
        description="Drop articles whose title has fewer words than this",
    )


class AutoSourceConfig(BaseModel):
    """Top level configuration of the automatic source detection."""

    model_config = _MODEL_CONFIG

    scraper: ScraperConfig = Field(default_factory=ScraperConfig)
    cleanup: CleanupConfig = Field(default_factory=CleanupConfig)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "AutoSourceConfig":
        """Validate *data*, filling every omitted key with its default."""

        try:
            return cls.model_validate(dict(data or {}))
        except ValidationError as exc:
            raise ValueError(f"Auto source configuration is invalid:\n{exc}") from exc

    @classmethod
    def from_file(cls, path: Path | str) -> "AutoSourceConfig":
        """Load configuration data from a JSON file."""

        config_path = Path(path)
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Configuration file not found: {config_path}") from exc
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in configuration file: {config_path}") from exc

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Configuration file is invalid: {config_path}\n{exc}") from exc

    def dump(self, path: Path | str) -> None:
        """Persist the configuration to disk as JSON."""

        config_path = Path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(self.model_dump_json(indent=2, by_alias=True), encoding="utf-8")

    def merged(self, overrides: Mapping[str, Any]) -> "AutoSourceConfig":
        """Return a copy with *overrides* deep-merged over the current values."""

        return self.from_mapping(_deep_merge(self.model_dump(by_alias=True), overrides))


def _deep_merge(base: dict, overrides: Mapping[str, Any]) -> dict:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


DEFAULT_CONFIG = AutoSourceConfig()
