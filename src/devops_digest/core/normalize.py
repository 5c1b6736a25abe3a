"""Item normalization. Pure functions, no I/O."""

import re
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional

import httpx

from devops_digest.core.dates import parse_timestamp, to_iso
from devops_digest.core.entities import Item

MAX_EXCERPT_LENGTH = 500

_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#039;", "'"),
    ("&amp;", "&"),
)
_WHITESPACE = re.compile(r"\s+")
_BRACKET_TAG = re.compile(r"\[.*?\]")
_HTML_TAG = re.compile(r"<[^>]*>")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def decode_entities(text: str) -> str:
    """Decode the five common HTML entities until the text stops changing."""
    while True:
        decoded = text
        for entity, char in _ENTITIES:
            decoded = decoded.replace(entity, char)
        if decoded == text:
            return decoded
        text = decoded


def strip_tags(text: str) -> str:
    return _HTML_TAG.sub("", text)


def _until_stable(clean: Callable[[str], str], text: str) -> str:
    # Removing a marker or tag can splice an entity back together
    while True:
        cleaned = clean(text)
        if cleaned == text:
            return cleaned
        text = cleaned


def _clean_title(title: str) -> str:
    title = decode_entities(collapse_whitespace(title))
    title = _BRACKET_TAG.sub("", title)
    return collapse_whitespace(title)


def _clean_excerpt(excerpt: str) -> str:
    text = collapse_whitespace(strip_tags(decode_entities(excerpt)))
    return text[:MAX_EXCERPT_LENGTH].strip()


def normalize_title(title: str) -> str:
    return _until_stable(_clean_title, title)


def normalize_excerpt(excerpt: str) -> str:
    if not excerpt:
        return ""
    return _until_stable(_clean_excerpt, excerpt)


def is_web_url(url: str) -> bool:
    """Absolute http(s) URL with a host."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError):
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.host)


def drop_unlinkable(items: Iterable[Item]) -> list[Item]:
    """Drop items whose URL cannot be rendered as a digest link."""
    return [item for item in items if is_web_url(item.url)]


def normalize_url(url: str) -> str:
    """Re-serialize through a URL parser; query parameters are kept."""
    try:
        return str(httpx.URL(url.strip()))
    except (httpx.InvalidURL, TypeError):
        return url


def normalize_item(item: Item, now: Optional[datetime] = None) -> Item:
    return replace(
        item,
        title=normalize_title(item.title),
        url=normalize_url(item.url),
        excerpt=normalize_excerpt(item.excerpt),
        published_at=to_iso(parse_timestamp(item.published_at, now)),
    )


def normalize(items: Iterable[Item], now: Optional[datetime] = None) -> list[Item]:
    """Normalize every item into a new list."""
    return [normalize_item(item, now) for item in items]
