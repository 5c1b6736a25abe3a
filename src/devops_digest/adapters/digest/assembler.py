"""Group processed items into a Digest."""

from datetime import date
from typing import Iterable, Optional

from devops_digest.core import CATEGORY_ORDER, DEFAULT_CATEGORY, Digest, DigestMetadata, Item
from devops_digest.core.dates import digest_week, digest_year, format_iso_date, utc_now
from devops_digest.core.limits import sort_by_date

DIGEST_SUMMARY = (
    "⚡ Curated updates from Kubernetes, cloud native tooling, CI/CD, IaC, observability, "
    "and security - handpicked for DevOps professionals!"
)


def digest_title(week: int, year: int) -> str:
    return f"DevOps Weekly Digest - Week {week}, {year}"


def group_by_category(items: Iterable[Item]) -> dict[str, list[Item]]:
    """Group items in the fixed category order; unknown categories go to Misc."""
    categories: dict[str, list[Item]] = {name: [] for name in CATEGORY_ORDER}
    for item in items:
        category = item.category if item.category in categories else DEFAULT_CATEGORY
        categories[category].append(item)
    return {name: sort_by_date(group) for name, group in categories.items()}


def assemble_digest(items: Iterable[Item], day: Optional[date] = None) -> Digest:
    """Build the digest for the week containing ``day`` (today by default)."""
    day = day or utc_now().date()
    week = digest_week(day)
    year = digest_year(day)

    metadata = DigestMetadata(
        title=digest_title(week, year),
        date=format_iso_date(day),
        week=week,
        year=year,
        summary=DIGEST_SUMMARY,
    )
    return Digest(metadata=metadata, categories=group_by_category(items))


def digest_stats(digest: Digest) -> dict:
    """Totals, per-category counts and unique sources."""
    category_counts = {name: len(items) for name, items in digest.categories.items()}
    sources = sorted({item.source for item in digest.items})
    return {
        "total_items": sum(category_counts.values()),
        "category_counts": category_counts,
        "sources": sources,
    }
