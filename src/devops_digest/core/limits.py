"""Date window, priority and per-group caps."""

from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from devops_digest.core.dates import is_within_last_days, try_parse_timestamp
from devops_digest.core.entities import DEFAULT_CATEGORY, Item, Priority

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def published_key(item: Item) -> datetime:
    return try_parse_timestamp(item.published_at) or _OLDEST


def sort_by_date(items: Iterable[Item]) -> list[Item]:
    """Most recent first."""
    return sorted(items, key=published_key, reverse=True)


def filter_recent(items: Iterable[Item], window_days: int = 7, now: Optional[datetime] = None) -> list[Item]:
    """Keep items published strictly after ``now - window_days``."""
    return [item for item in items if is_within_last_days(item.published_at, window_days, now)]


def filter_by_priority(items: Iterable[Item], min_priority: Priority = Priority.LOW) -> list[Item]:
    """Keep items whose source priority is at least ``min_priority``. Missing counts as low."""
    threshold = min_priority.rank
    return [item for item in items if (item.priority or Priority.LOW).rank >= threshold]


def _limit_per_group(items: Iterable[Item], key: Callable[[Item], str], max_per_group: int) -> list[Item]:
    groups: dict[str, list[Item]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)

    limited: list[Item] = []
    for group in groups.values():
        limited.extend(sort_by_date(group)[:max_per_group])
    return limited


def limit_per_source(items: Iterable[Item], max_per_source: int = 4) -> list[Item]:
    return _limit_per_group(items, lambda item: item.source, max_per_source)


def limit_per_category(items: Iterable[Item], max_per_category: int = 12) -> list[Item]:
    return _limit_per_group(items, lambda item: item.category or DEFAULT_CATEGORY, max_per_category)


def apply_limits(items: Iterable[Item], max_per_source: int = 4, max_per_category: int = 12) -> list[Item]:
    """Cap items per source, then per category, keeping the most recent of each group."""
    return limit_per_category(limit_per_source(items, max_per_source), max_per_category)
