"""Configuration management."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from devops_digest.core import ConfigError, Priority, Source, SourceType


@dataclass
class ClaudeConfig:
    """Claude API settings."""
    model: str = "claude-3-5-haiku-latest"
    max_tokens: int = 500
    temperature: float = 0.2
    max_retries: int = 3
    initial_retry_delay: float = 1.0
    request_delay: float = 0.0
    timeout: float = 60.0


@dataclass
class CrawlerConfig:
    """Fetch settings."""
    rss_concurrency: int = 5
    web_concurrency: int = 3
    max_retries: int = 3
    timeout: float = 10.0
    probe_timeout: float = 5.0
    user_agent: str = "DevOps Daily News Crawler/1.0"


@dataclass
class PipelineConfig:
    """Stage settings."""
    window_days: int = 7
    max_per_source: int = 4
    max_per_category: int = 12
    classify_batch_size: int = 10
    summarize_batch_size: int = 10
    batch_delay: float = 1.0
    # Classifier summaries at least this long are reused instead of re-summarizing
    min_summary_length: int = 50
    min_priority: str = "low"


@dataclass
class PathsConfig:
    """Path settings."""
    sources_file: Path = Path("data/sources.yaml")
    output_dir: Path = Path("content/news")


@dataclass
class Settings:
    """Application settings."""

    # API key (from environment only)
    anthropic_api_key: str = ""

    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    crawler: CrawlerConfig = field(default_factory=CrawlerConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)

    @property
    def output_dir(self) -> Path:
        return self.paths.output_dir

    @property
    def sources_file(self) -> Path:
        return self.paths.sources_file

    @property
    def min_priority(self) -> Priority:
        try:
            return Priority(self.pipeline.min_priority)
        except ValueError as e:
            raise ConfigError(f"Unknown min_priority: {self.pipeline.min_priority!r}") from e


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"{config_path} must contain a mapping")
    return config


def _apply_section(section: Any, values: Any, name: str) -> None:
    if not isinstance(values, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping")
    for key, value in values.items():
        if not hasattr(section, key):
            raise ConfigError(f"Unknown setting '{name}.{key}'")
        setattr(section, key, value)


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)

    settings = Settings(anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""))

    for name in ("claude", "crawler", "pipeline"):
        if name in config:
            _apply_section(getattr(settings, name), config[name], name)

    if "paths" in config:
        _apply_section(settings.paths, config["paths"], "paths")
        settings.paths.sources_file = Path(settings.paths.sources_file)
        settings.paths.output_dir = Path(settings.paths.output_dir)

    return settings


def require_api_key(settings: Settings) -> str:
    """Model-assisted mode cannot start without a key."""
    if not settings.anthropic_api_key:
        raise ConfigError("ANTHROPIC_API_KEY environment variable is required (or run with --skip-ai)")
    return settings.anthropic_api_key


def _parse_source(raw: Any, index: int) -> Source:
    if not isinstance(raw, dict):
        raise ConfigError(f"Source #{index} must be a mapping")

    missing = [key for key in ("name", "type", "url") if not raw.get(key)]
    if missing:
        raise ConfigError(f"Source #{index} is missing {', '.join(missing)}")

    try:
        return Source(
            name=str(raw["name"]),
            type=SourceType(raw["type"]),
            url=str(raw["url"]),
            category=str(raw.get("category") or "Misc"),
            priority=Priority(raw.get("priority") or "medium"),
        )
    except ValueError as e:
        raise ConfigError(f"Source #{index} ({raw.get('name')}): {e}") from e


def load_sources(sources_path: Path) -> list[Source]:
    """Load the ordered source list from YAML."""
    if not sources_path.exists():
        raise ConfigError(f"Sources file not found: {sources_path}")

    try:
        with open(sources_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read sources from {sources_path}: {e}") from e

    raw_sources = data.get("sources") if isinstance(data, dict) else None
    if not isinstance(raw_sources, list):
        raise ConfigError(f"{sources_path} must define a 'sources' list")

    return [_parse_source(raw, index) for index, raw in enumerate(raw_sources, 1)]
