"""Tests for date filtering, priority filtering and per-group limits."""

from collections import Counter
from dataclasses import replace
from datetime import timedelta

from devops_digest.core import Priority
from devops_digest.core.dates import try_parse_timestamp
from devops_digest.core.limits import (
    apply_limits,
    filter_by_priority,
    filter_recent,
    limit_per_category,
    limit_per_source,
    sort_by_date,
)


def test_filter_recent_keeps_last_seven_days(make_item, now) -> None:
    """Ten items spread over 14 days; only the last 7 days survive."""
    offsets = [0.5, 1.5, 3, 4.5, 6, 6.9, 8, 10, 12, 13.5]
    items = [
        make_item(title=f"Item {i}", url=f"https://x.com/{i}", days_ago=days)
        for i, days in enumerate(offsets)
    ]

    result = filter_recent(items, 7, now)

    assert [item.title for item in result] == [f"Item {i}" for i in range(6)]
    for item in result:
        assert try_parse_timestamp(item.published_at) > now - timedelta(days=7)


def test_filter_recent_boundary_is_exclusive(make_item, now) -> None:
    assert filter_recent([make_item(days_ago=7)], 7, now) == []


def test_filter_recent_drops_unparsable_dates(make_item, now) -> None:
    item = make_item()
    broken = replace(item, published_at="garbage")

    assert filter_recent([broken], 7, now) == []


def test_limit_per_source_keeps_most_recent(make_item) -> None:
    """Six items from one source, distinct categories: the four newest are kept."""
    items = [
        make_item(title=f"Item {i}", url=f"https://x.com/{i}", days_ago=i + 1, category=f"Cat {i}")
        for i in range(6)
    ]

    result = apply_limits(items, 4, 12)

    assert len(result) == 4
    assert sorted(item.title for item in result) == ["Item 0", "Item 1", "Item 2", "Item 3"]


def test_limit_per_category(make_item) -> None:
    items = [
        make_item(title=f"Item {i}", url=f"https://x.com/{i}", source=f"Source {i}", category="Security", days_ago=i)
        for i in range(15)
    ]

    result = limit_per_category(items, 12)

    assert len(result) == 12
    assert all(item.title != "Item 14" for item in result)


def test_missing_category_counts_as_misc(make_item) -> None:
    items = [
        make_item(title="a", url="https://x.com/a", source="A", category=None),
        make_item(title="b", url="https://x.com/b", source="B", category="Misc"),
    ]

    assert len(limit_per_category(items, 1)) == 1


def test_limit_invariants(make_item) -> None:
    items = [
        make_item(
            title=f"Item {i}",
            url=f"https://x.com/{i}",
            source=f"Source {i % 3}",
            category=f"Cat {i % 2}",
            days_ago=i / 10,
        )
        for i in range(40)
    ]

    result = apply_limits(items, 4, 12)
    by_source = Counter(item.source for item in result)
    by_category = Counter(item.category for item in result)

    assert all(count <= 4 for count in by_source.values())
    assert all(count <= 12 for count in by_category.values())


def test_source_limit_runs_before_category_limit(make_item) -> None:
    """A prolific source cannot take every slot of a category."""
    prolific = [
        make_item(title=f"P{i}", url=f"https://p.com/{i}", source="Prolific", category="CI/CD", days_ago=i / 10)
        for i in range(10)
    ]
    quiet = [make_item(title="Q", url="https://q.com/1", source="Quiet", category="CI/CD", days_ago=5)]

    result = apply_limits(prolific + quiet, 4, 5)

    assert "Q" in [item.title for item in result]
    assert limit_per_source(prolific, 4) == sort_by_date(prolific)[:4]


def test_filter_by_priority(make_item) -> None:
    items = [
        make_item(title="high", url="https://x.com/h", priority=Priority.HIGH),
        make_item(title="medium", url="https://x.com/m", priority=Priority.MEDIUM),
        make_item(title="low", url="https://x.com/l", priority=Priority.LOW),
        make_item(title="unset", url="https://x.com/u"),
    ]

    assert len(filter_by_priority(items, Priority.LOW)) == 4
    assert [item.title for item in filter_by_priority(items, Priority.MEDIUM)] == ["high", "medium"]
    assert [item.title for item in filter_by_priority(items, Priority.HIGH)] == ["high"]
