"""Tests for settings and source list loading."""

from pathlib import Path
from unittest.mock import patch

import pytest

from devops_digest.config import get_settings, load_sources, require_api_key
from devops_digest.core import ConfigError, Priority, SourceType


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_without_config_file(tmp_path: Path) -> None:
    with patch.dict("os.environ", {"ANTHROPIC_API_KEY": "test-key"}):
        settings = get_settings(tmp_path / "missing.yaml")

    assert settings.anthropic_api_key == "test-key"
    assert settings.pipeline.window_days == 7
    assert settings.pipeline.max_per_source == 4
    assert settings.pipeline.max_per_category == 12
    assert settings.crawler.rss_concurrency == 5
    assert settings.crawler.web_concurrency == 3
    assert settings.output_dir == Path("content/news")
    assert settings.min_priority == Priority.LOW


def test_yaml_overrides(tmp_path: Path) -> None:
    config = _write(tmp_path / "config.yaml", """
pipeline:
  window_days: 14
  min_priority: high
claude:
  model: claude-test
paths:
  output_dir: out/digests
""")

    settings = get_settings(config)

    assert settings.pipeline.window_days == 14
    assert settings.min_priority == Priority.HIGH
    assert settings.claude.model == "claude-test"
    assert settings.output_dir == Path("out/digests")


def test_unknown_setting_is_rejected(tmp_path: Path) -> None:
    config = _write(tmp_path / "config.yaml", "pipeline:\n  windowdays: 3\n")

    with pytest.raises(ConfigError, match="pipeline.windowdays"):
        get_settings(config)


def test_invalid_yaml_is_rejected(tmp_path: Path) -> None:
    config = _write(tmp_path / "config.yaml", "pipeline: [unclosed\n")

    with pytest.raises(ConfigError):
        get_settings(config)


def test_unknown_min_priority(tmp_path: Path) -> None:
    settings = get_settings(_write(tmp_path / "config.yaml", "pipeline:\n  min_priority: urgent\n"))

    with pytest.raises(ConfigError, match="urgent"):
        settings.min_priority


def test_require_api_key(tmp_path: Path) -> None:
    with patch.dict("os.environ", {"ANTHROPIC_API_KEY": ""}):
        settings = get_settings(tmp_path / "missing.yaml")

    with pytest.raises(ConfigError, match="ANTHROPIC_API_KEY"):
        require_api_key(settings)


def test_load_sources(tmp_path: Path) -> None:
    path = _write(tmp_path / "sources.yaml", """
sources:
  - name: Kubernetes Blog
    type: rss
    url: https://kubernetes.io/feed.xml
    category: Kubernetes
    priority: high
  - name: Some Site
    type: web
    url: https://site.example.com/blog
""")

    sources = load_sources(path)

    assert [source.name for source in sources] == ["Kubernetes Blog", "Some Site"]
    assert sources[0].priority == Priority.HIGH
    assert sources[1].type == SourceType.WEB
    assert sources[1].category == "Misc"
    assert sources[1].priority == Priority.MEDIUM


def test_bundled_sources_file_loads() -> None:
    path = Path(__file__).parent.parent / "data" / "sources.yaml"

    assert load_sources(path)


@pytest.mark.parametrize(
    "text, message",
    [
        ("other: []\n", "sources"),
        ("sources:\n  - name: X\n    type: rss\n", "missing url"),
        ("sources:\n  - name: X\n    type: gopher\n    url: https://x.com\n", "Source #1"),
        ("sources:\n  - name: X\n    type: rss\n    url: https://x.com\n    priority: top\n", "Source #1"),
        ("sources:\n  - just a string\n", "must be a mapping"),
    ],
)
def test_load_sources_rejects_bad_entries(tmp_path: Path, text: str, message: str) -> None:
    with pytest.raises(ConfigError, match=message):
        load_sources(_write(tmp_path / "sources.yaml", text))


def test_load_sources_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_sources(tmp_path / "nope.yaml")
