"""Source adapters for collecting items."""

from devops_digest.adapters.sources.fetcher import RetryingFetcher
from devops_digest.adapters.sources.rss_source import RSSSource
from devops_digest.adapters.sources.web_source import WebSource

__all__ = ["RetryingFetcher", "RSSSource", "WebSource"]
