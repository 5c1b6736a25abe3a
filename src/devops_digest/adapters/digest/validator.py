"""Re-parse a rendered digest and check its output invariants."""

import re
from collections import Counter
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from devops_digest.adapters.digest.markdown_generator import READ_MORE_LABEL
from devops_digest.core.normalize import is_web_url

REQUIRED_FIELDS = ("title", "date", "summary")

_FRONT_MATTER = re.compile(r"\A---[ \t]*\n(.*?)\n---[ \t]*(?:\n|\Z)", re.DOTALL)
_TITLE = re.compile(r"^DevOps Weekly Digest - Week \d+, \d{4}$")
_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
# Backslash-escaped brackets are literal text, not link syntax
_LINK = re.compile(r"(?<!\\)\[(?P<text>(?:\\.|[^\]\\])*)\]\((?P<url>[^)\s]+)\)")


def split_front_matter(content: str) -> tuple[dict[str, Any], str]:
    """Return (front matter mapping, body). Raises ValueError if the block is missing or bad."""
    match = _FRONT_MATTER.match(content)
    if not match:
        raise ValueError("Missing front matter block")
    try:
        data = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid front matter: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Front matter must be a mapping")
    return data, content[match.end():]


def _check_front_matter(data: dict[str, Any]) -> list[str]:
    problems = [f"Missing front matter field: {name}" for name in REQUIRED_FIELDS if not data.get(name)]

    title = data.get("title")
    if title and not _TITLE.match(str(title)):
        problems.append(f"Invalid title format: {title!r}")

    raw_date = data.get("date")
    if isinstance(raw_date, date):
        raw_date = raw_date.isoformat()
    if raw_date:
        if not _DATE.match(str(raw_date)):
            problems.append(f"Invalid date format: {raw_date!r}")
        else:
            try:
                date.fromisoformat(str(raw_date))
            except ValueError:
                problems.append(f"Invalid date: {raw_date!r}")

    return problems


def validate_markdown(content: str) -> list[str]:
    """Return a list of problems; an empty list means the digest is valid."""
    try:
        data, body = split_front_matter(content)
    except ValueError as e:
        return [str(e)]

    problems = _check_front_matter(data)

    if not body.strip():
        problems.append("Empty content")

    links = list(_LINK.finditer(body))
    invalid = [m.group("url") for m in links if not is_web_url(m.group("url"))]
    if invalid:
        problems.append(f"Invalid URLs: {', '.join(invalid)}")

    item_urls = [m.group("url") for m in links if m.group("text") == READ_MORE_LABEL]
    duplicates = [url for url, count in Counter(item_urls).items() if count > 1]
    if duplicates:
        problems.append(f"Duplicate item URLs: {', '.join(duplicates)}")

    return problems


def validate_file(path: Path) -> list[str]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        return [f"Could not read {path}: {e}"]
    return validate_markdown(content)
