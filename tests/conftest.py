"""Shared test helpers."""

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from devops_digest.core import Item, Priority

NOW = datetime(2025, 11, 16, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_item() -> Callable[..., Item]:
    """Build an item published ``days_ago`` before NOW."""

    def _make(
        title: str = "Kubernetes v1.34 released",
        url: str = "https://kubernetes.io/blog/v134",
        days_ago: float = 1,
        source: str = "Kubernetes Blog",
        category: str | None = None,
        excerpt: str = "The release brings sidecar containers to GA and many fixes.",
        priority: Priority | None = None,
        **kwargs,
    ) -> Item:
        return Item(
            title=title,
            url=url,
            excerpt=excerpt,
            source=source,
            published_at=(NOW - timedelta(days=days_ago)).isoformat(),
            category=category,
            priority=priority,
            **kwargs,
        )

    return _make
