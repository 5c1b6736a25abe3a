"""RSS/Atom feed collector."""

import asyncio
import calendar
import re
import time
from datetime import datetime, timezone
from typing import Any

import feedparser
import httpx
from bs4 import BeautifulSoup

from devops_digest.adapters.sources.fetcher import RetryingFetcher
from devops_digest.core import FetchError, Item, ItemCollector, Source, SourceType

EXCERPT_LENGTH = 500


def html_to_text(markup: str) -> str:
    """Strip markup and collapse whitespace."""
    if "<" in markup:
        markup = BeautifulSoup(markup, "html.parser").get_text(" ")
    return re.sub(r"\s+", " ", markup).strip()


def extract_excerpt(entry: Any) -> str:
    """Pick the richest non-empty text field of a feed entry.

    feedparser folds ``content:encoded`` into ``content`` and aliases
    ``description`` to ``summary``, so the order is: content blocks,
    description, summary.
    """
    candidates: list[str] = []
    for block in entry.get("content") or []:
        candidates.append(block.get("value") or "")
    candidates.append(entry.get("description") or "")
    candidates.append(entry.get("summary") or "")

    for candidate in candidates:
        text = html_to_text(candidate)
        if text:
            return text[:EXCERPT_LENGTH]
    return ""


def resolve_link(base: str, link: str) -> str:
    """Resolve a possibly relative entry link against the feed URL."""
    try:
        return str(httpx.URL(base).join(link))
    except httpx.InvalidURL:
        return link


def extract_published(entry: Any) -> str:
    """Entry timestamp as ISO string, or the raw date text for the normalizer to coerce."""
    for key in ("published_parsed", "updated_parsed", "created_parsed"):
        value = entry.get(key)
        if isinstance(value, time.struct_time):
            # feedparser returns these in UTC
            return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc).isoformat()
    for key in ("published", "updated", "created"):
        value = entry.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return datetime.now(timezone.utc).isoformat()


class RSSSource(ItemCollector):
    """Collect items from RSS/Atom feeds."""

    emoji = "📡"
    name = "RSS"

    def __init__(self, fetcher: RetryingFetcher) -> None:
        self.fetcher = fetcher

    async def collect(self, source: Source) -> list[Item]:
        """Fetch and parse one feed. Returns [] on any failure."""
        try:
            body = await self.fetcher.fetch(source.url)
            items, skipped = self.parse_feed(body, source)
        except FetchError as e:
            print(f"  ✗ {source.name}: {e}")
            return []
        except Exception as e:
            print(f"  ✗ {source.name}: failed to parse feed - {type(e).__name__}: {e}")
            return []

        detail = f" ({skipped} entries without title/link skipped)" if skipped else ""
        print(f"  ✓ {source.name}: {len(items)} items{detail}")
        return items

    def parse_feed(self, body: str, source: Source) -> tuple[list[Item], int]:
        """Parse a feed document into items, returning (items, skipped_count)."""
        feed = feedparser.parse(body)
        entries = feed.get("entries") or []
        if feed.get("bozo") and not entries:
            raise ValueError(f"Invalid RSS/Atom feed: {feed.get('bozo_exception')}")

        items: list[Item] = []
        skipped = 0
        for entry in entries:
            title = (entry.get("title") or "").strip()
            link = (entry.get("link") or "").strip()
            if not title or not link:
                skipped += 1
                continue

            items.append(Item(
                title=title,
                url=resolve_link(source.url, link),
                excerpt=extract_excerpt(entry),
                source=source.name,
                published_at=extract_published(entry),
                category=source.category,
                priority=source.priority,
            ))

        return items, skipped

    async def collect_all(self, sources: list[Source], concurrency: int = 5) -> list[Item]:
        """Collect all RSS-typed sources, ``concurrency`` at a time."""
        feeds = [s for s in sources if s.type == SourceType.RSS]
        return await collect_in_batches(self, feeds, concurrency)


async def collect_in_batches(
    collector: ItemCollector,
    sources: list[Source],
    concurrency: int,
) -> list[Item]:
    """Run ``collector`` over sources in sequential batches of bounded size."""
    items: list[Item] = []
    size = max(1, concurrency)
    for start in range(0, len(sources), size):
        batch = sources[start:start + size]
        results = await asyncio.gather(*(collector.collect(source) for source in batch))
        for result in results:
            items.extend(result)
    return items
