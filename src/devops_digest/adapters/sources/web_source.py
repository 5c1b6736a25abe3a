"""Web page source: discover the site's feed, then crawl it as RSS."""

from dataclasses import replace
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from devops_digest.adapters.sources.fetcher import RetryingFetcher
from devops_digest.adapters.sources.rss_source import RSSSource, collect_in_batches
from devops_digest.core import FetchError, Item, ItemCollector, Source, SourceType


class WebSource(ItemCollector):
    """Collect items from web pages that advertise (or hide) a feed."""

    emoji = "🌐"
    name = "Web"

    FEED_LINK_TYPES = ("application/rss+xml", "application/atom+xml")
    ANCHOR_HINTS = ("rss", "feed")
    COMMON_FEED_PATHS = ("/feed", "/rss", "/feed.xml", "/rss.xml", "/blog/feed")
    FEED_MARKERS = ("<rss", "<feed")

    def __init__(
        self,
        fetcher: RetryingFetcher,
        rss_source: Optional[RSSSource] = None,
        probe_timeout: float = 5.0,
    ) -> None:
        self.fetcher = fetcher
        self.rss_source = rss_source or RSSSource(fetcher)
        self.probe_timeout = probe_timeout

    async def collect(self, source: Source) -> list[Item]:
        """Discover a feed for the page and crawl it. No feed means []."""
        try:
            feed_url = await self.discover_feed(source.url)
        except Exception as e:
            print(f"  ✗ {source.name}: feed discovery failed - {type(e).__name__}: {e}")
            return []

        if not feed_url:
            print(f"  └─ {source.name}: no feed found")
            return []

        print(f"  └─ {source.name}: found feed {feed_url}")
        return await self.rss_source.collect(replace(source, type=SourceType.RSS, url=feed_url))

    async def discover_feed(self, url: str) -> Optional[str]:
        """Return an absolute feed URL for the page, or None."""
        try:
            html = await self.fetcher.fetch(url)
        except FetchError as e:
            print(f"  ✗ Could not load {url}: {e}")
            return None

        href = self.find_feed_link(html)
        if href:
            return _absolute(url, href)

        for path in self.COMMON_FEED_PATHS:
            candidate = _absolute(url, path)
            try:
                body = await self.fetcher.fetch(candidate, max_retries=1, timeout=self.probe_timeout)
            except FetchError:
                continue
            if any(marker in body for marker in self.FEED_MARKERS):
                return candidate

        return None

    def find_feed_link(self, html: str) -> Optional[str]:
        """Look for <link> feed declarations, then anchors mentioning rss/feed."""
        soup = BeautifulSoup(html, "html.parser")

        for link_type in self.FEED_LINK_TYPES:
            tag = soup.find("link", attrs={"type": link_type}, href=True)
            if tag:
                return tag["href"]

        for hint in self.ANCHOR_HINTS:
            tag = soup.find("a", href=lambda value, hint=hint: bool(value) and hint in value)
            if tag:
                return tag["href"]

        return None

    async def collect_all(self, sources: list[Source], concurrency: int = 3) -> list[Item]:
        """Collect all web-typed sources, ``concurrency`` at a time."""
        pages = [s for s in sources if s.type == SourceType.WEB]
        return await collect_in_batches(self, pages, concurrency)


def _absolute(base: str, href: str) -> str:
    return str(httpx.URL(base).join(href.strip()))
