"""Duplicate removal by canonical URL, then by normalized title."""

import re
from typing import Iterable

import httpx

from devops_digest.core.dates import try_parse_timestamp
from devops_digest.core.entities import Item

TRACKING_PARAMS = ("utm_source", "utm_medium", "utm_campaign", "ref")

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def canonical_url(url: str) -> str:
    """Comparison key for a URL: tracking params and trailing slash removed, lowercased."""
    try:
        parsed = httpx.URL(url.strip())
        for param in TRACKING_PARAMS:
            parsed = parsed.copy_remove_param(param)
        canonical = str(parsed)
    except (httpx.InvalidURL, TypeError):
        return url.lower()
    if canonical.endswith("?"):
        canonical = canonical[:-1]
    if canonical.endswith("/"):
        canonical = canonical[:-1]
    return canonical.lower()


def title_key(title: str) -> str:
    """Comparison key for a title: lowercased, punctuation stripped, whitespace collapsed."""
    return _WHITESPACE.sub(" ", _PUNCTUATION.sub("", title.lower())).strip()


def dedupe_by_url(items: Iterable[Item]) -> list[Item]:
    """Keep the first item per canonical URL."""
    seen: set[str] = set()
    unique: list[Item] = []
    for item in items:
        key = canonical_url(item.url)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def _is_newer(candidate: Item, current: Item) -> bool:
    candidate_at = try_parse_timestamp(candidate.published_at)
    current_at = try_parse_timestamp(current.published_at)
    if candidate_at is None:
        return False
    if current_at is None:
        return True
    return candidate_at > current_at


def dedupe_by_title(items: Iterable[Item]) -> list[Item]:
    """Keep the most recent item per normalized title, in first-seen slot order."""
    by_title: dict[str, Item] = {}
    for item in items:
        key = title_key(item.title)
        existing = by_title.get(key)
        if existing is None or _is_newer(item, existing):
            by_title[key] = item
    return list(by_title.values())


def dedupe(items: Iterable[Item]) -> list[Item]:
    """Remove duplicates by URL first, then by title."""
    return dedupe_by_title(dedupe_by_url(items))
