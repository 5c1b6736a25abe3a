"""Business logic use cases."""

import asyncio
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from devops_digest.adapters.digest import assemble_digest, digest_stats, validate_markdown
from devops_digest.adapters.sources import RSSSource, WebSource
from devops_digest.core import (
    Classifier,
    Digest,
    DigestRenderer,
    DigestValidationError,
    Item,
    Priority,
    Source,
    Summarizer,
)
from devops_digest.core.dates import utc_now
from devops_digest.core.dedupe import dedupe
from devops_digest.core.limits import apply_limits, filter_by_priority, filter_recent
from devops_digest.core.normalize import drop_unlinkable, normalize

T = TypeVar("T")
R = TypeVar("R")


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)


async def run_in_batches(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    batch_size: int,
    delay: float = 0.0,
    label: str = "Processed",
) -> list[R]:
    """Run ``worker`` over items, ``batch_size`` in flight, sleeping ``delay`` between batches."""
    results: list[R] = []
    size = max(1, batch_size)
    for start in range(0, len(items), size):
        batch = items[start:start + size]
        results.extend(await asyncio.gather(*(worker(item) for item in batch)))
        print(f"  └─ {label} {min(start + size, len(items))}/{len(items)}")

        if delay > 0 and start + size < len(items):
            await asyncio.sleep(delay)
    return results


class CollectionService:
    """Crawl RSS and web sources with separate concurrency bounds."""

    def __init__(
        self,
        rss_source: RSSSource,
        web_source: WebSource,
        rss_concurrency: int = 5,
        web_concurrency: int = 3,
    ) -> None:
        self.rss_source = rss_source
        self.web_source = web_source
        self.rss_concurrency = rss_concurrency
        self.web_concurrency = web_concurrency

    async def collect(self, sources: list[Source]) -> list[Item]:
        print(f"\n{self.rss_source.emoji} RSS feeds")
        rss_items = await self.rss_source.collect_all(sources, self.rss_concurrency)
        print(f"  └─ Found {len(rss_items)} items from RSS feeds")

        print(f"\n{self.web_source.emoji} Web sources")
        web_items = await self.web_source.collect_all(sources, self.web_concurrency)
        print(f"  └─ Found {len(web_items)} items from web sources")

        return rss_items + web_items


class ClassificationService:
    """Classify items in batches and drop the excluded ones."""

    def __init__(self, classifier: Classifier, batch_size: int = 10, batch_delay: float = 1.0) -> None:
        self.classifier = classifier
        self.batch_size = batch_size
        # Spacing only matters when an external service is involved
        self.batch_delay = batch_delay if classifier.rate_limited else 0.0

    async def _classify_one(self, item: Item) -> Item:
        classification = await self.classifier.classify(item)
        return replace(
            item,
            include=classification.include,
            category=classification.category,
            tags=classification.tags,
            summary=classification.summary,
        )

    async def classify_items(self, items: list[Item]) -> list[Item]:
        classified = await run_in_batches(
            items, self._classify_one, self.batch_size, self.batch_delay, label="Classified"
        )
        included = [item for item in classified if item.include is not False]
        print(f"  ✓ {len(included)}/{len(items)} items included after classification")
        return included


class SummarizationService:
    """Summarize items in batches, reusing classifier summaries that are long enough."""

    def __init__(
        self,
        summarizer: Summarizer,
        batch_size: int = 10,
        batch_delay: float = 1.0,
        min_summary_length: int = 50,
    ) -> None:
        self.summarizer = summarizer
        self.batch_size = batch_size
        self.batch_delay = batch_delay if summarizer.rate_limited else 0.0
        self.min_summary_length = min_summary_length

    async def _summarize_one(self, item: Item) -> Item:
        if item.summary and len(item.summary) > self.min_summary_length:
            return item
        return replace(item, summary=await self.summarizer.summarize(item))

    async def summarize_items(self, items: list[Item]) -> list[Item]:
        return await run_in_batches(
            items, self._summarize_one, self.batch_size, self.batch_delay, label="Summarized"
        )


class DigestService:
    """Assemble, render, validate and save digests."""

    def __init__(self, renderer: DigestRenderer, output_dir: Path) -> None:
        self.renderer = renderer
        self.output_dir = output_dir

    def output_path(self, digest: Digest) -> Path:
        return self.output_dir / str(digest.metadata.year) / f"week-{digest.metadata.week}.md"

    def build(self, items: list[Item], now: Optional[datetime] = None) -> tuple[Digest, str]:
        """Assemble and render; raises DigestValidationError on a malformed document."""
        digest = assemble_digest(items, (now or utc_now()).date())
        print_stats(digest)

        markdown = self.renderer.render(digest)
        problems = validate_markdown(markdown)
        if problems:
            raise DigestValidationError(problems)
        print("✓ Markdown validation passed")
        return digest, markdown

    def save_digest(self, markdown: str, output_path: Path) -> None:
        """Save digest to file in one write."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(markdown, encoding="utf-8")
        print(f"Digest saved to {output_path}")


def print_stats(digest: Digest) -> None:
    stats = digest_stats(digest)
    print("\n📊 Digest Statistics:")
    print(f"  Total items: {stats['total_items']}")
    print(f"  Unique sources: {len(stats['sources'])}")
    print("\n  By category:")
    for category, count in stats["category_counts"].items():
        if count > 0:
            print(f"    {category}: {count}")


@dataclass
class PipelineResult:
    """Outcome of one run. ``digest`` is None when nothing fell inside the window."""

    digest: Optional[Digest] = None
    markdown: Optional[str] = None
    output_path: Optional[Path] = None


class DigestPipeline:
    """crawl -> normalize -> dedupe -> date-filter -> classify -> limit -> summarize -> assemble."""

    def __init__(
        self,
        collection_service: CollectionService,
        classification_service: ClassificationService,
        digest_service: DigestService,
        summarization_service: Optional[SummarizationService] = None,
        window_days: int = 7,
        max_per_source: int = 4,
        max_per_category: int = 12,
        min_priority: Priority = Priority.LOW,
    ) -> None:
        self.collection_service = collection_service
        self.classification_service = classification_service
        self.summarization_service = summarization_service
        self.digest_service = digest_service
        self.window_days = window_days
        self.max_per_source = max_per_source
        self.max_per_category = max_per_category
        self.min_priority = min_priority

    async def run(self, sources: list[Source], now: Optional[datetime] = None, write: bool = True) -> PipelineResult:
        now = now or utc_now()

        _banner("📥 STAGE 1: COLLECTING")
        items = await self.collection_service.collect(sources)
        print(f"\n✓ Collected {len(items)} items from {len(sources)} sources")

        _banner("🔧 STAGE 2: NORMALIZE / DEDUPE / FILTER")
        items = self.prepare(items, now)

        if not items:
            print(f"⚠️  No items found from the last {self.window_days} days. Nothing to publish.")
            return PipelineResult()

        _banner("🏷️  STAGE 3: CLASSIFYING")
        items = await self.classification_service.classify_items(items)
        if not items:
            print("⚠️  Every item was excluded by classification. Nothing to publish.")
            return PipelineResult()

        items = apply_limits(items, self.max_per_source, self.max_per_category)
        print(f"✓ {len(items)} items after limits")

        _banner("✍️  STAGE 4: SUMMARIZING")
        if self.summarization_service:
            items = await self.summarization_service.summarize_items(items)
        else:
            print("Using excerpts (summarization skipped)")

        _banner("📝 STAGE 5: ASSEMBLING DIGEST")
        digest, markdown = self.digest_service.build(items, now)

        result = PipelineResult(digest=digest, markdown=markdown)
        if write:
            result.output_path = self.digest_service.output_path(digest)
            self.digest_service.save_digest(markdown, result.output_path)
        return result

    def prepare(self, items: list[Item], now: datetime) -> list[Item]:
        """The pure stages between collection and classification."""
        items = normalize(items, now)
        print(f"✓ Normalized {len(items)} items")

        linkable = drop_unlinkable(items)
        if len(linkable) < len(items):
            print(f"⚠️  Dropped {len(items) - len(linkable)} items without an absolute http(s) link")
        items = linkable

        items = dedupe(items)
        print(f"✓ {len(items)} unique items")

        items = filter_recent(items, self.window_days, now)
        print(f"✓ {len(items)} items from the last {self.window_days} days")

        if self.min_priority != Priority.LOW:
            items = filter_by_priority(items, self.min_priority)
            print(f"✓ {len(items)} items at priority {self.min_priority.value} or above")
        return items
