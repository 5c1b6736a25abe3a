"""CLI entry point for the DevOps digest generator."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from devops_digest.adapters.classification import KeywordClassifier, LLMClassifier, LLMSummarizer
from devops_digest.adapters.digest import MarkdownDigestGenerator, validate_file
from devops_digest.adapters.llm import ClaudeClient
from devops_digest.adapters.sources import RetryingFetcher, RSSSource, WebSource
from devops_digest.config import Settings, get_settings, load_sources, require_api_key
from devops_digest.core import ConfigError, DigestValidationError, Source
from devops_digest.use_cases import (
    ClassificationService,
    CollectionService,
    DigestPipeline,
    DigestService,
    PipelineResult,
    SummarizationService,
)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2
EXIT_VALIDATION_ERROR = 3

cli = typer.Typer(help="Build the weekly DevOps news digest.", add_completion=False)


def build_pipeline(settings: Settings, skip_ai: bool) -> DigestPipeline:
    """Wire adapters for the selected run mode."""
    crawler = settings.crawler
    fetcher = RetryingFetcher(
        max_retries=crawler.max_retries,
        timeout=crawler.timeout,
        user_agent=crawler.user_agent,
    )
    rss_source = RSSSource(fetcher)
    web_source = WebSource(fetcher, rss_source, probe_timeout=crawler.probe_timeout)

    pipeline = settings.pipeline
    summarization_service = None
    if skip_ai:
        classifier = KeywordClassifier()
    else:
        llm_client = ClaudeClient(settings)
        classifier = LLMClassifier(llm_client, fallback=KeywordClassifier())
        summarization_service = SummarizationService(
            LLMSummarizer(llm_client),
            batch_size=pipeline.summarize_batch_size,
            batch_delay=pipeline.batch_delay,
            min_summary_length=pipeline.min_summary_length,
        )

    return DigestPipeline(
        collection_service=CollectionService(
            rss_source,
            web_source,
            rss_concurrency=crawler.rss_concurrency,
            web_concurrency=crawler.web_concurrency,
        ),
        classification_service=ClassificationService(
            classifier,
            batch_size=pipeline.classify_batch_size,
            batch_delay=pipeline.batch_delay,
        ),
        summarization_service=summarization_service,
        digest_service=DigestService(MarkdownDigestGenerator(), settings.output_dir),
        window_days=pipeline.window_days,
        max_per_source=pipeline.max_per_source,
        max_per_category=pipeline.max_per_category,
        min_priority=settings.min_priority,
    )


async def async_run(pipeline: DigestPipeline, sources: list[Source], dry_run: bool) -> PipelineResult:
    return await pipeline.run(sources, write=not dry_run)


@cli.command()
def run(
    skip_ai: bool = typer.Option(False, "--skip-ai", help="Keyword classification and excerpts, no API calls"),
    config: Path = typer.Option(Path("config.yaml"), "--config", help="Settings YAML"),
    sources: Optional[Path] = typer.Option(None, "--sources", help="Source list YAML"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", help="Digest output root"),
    days: Optional[int] = typer.Option(None, "--days", min=1, help="Date window in days"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the digest instead of writing it"),
) -> None:
    """Crawl sources and write this week's digest."""
    print("🚀 DevOps Weekly Digest Generator")
    if skip_ai:
        print("ℹ️  Running with --skip-ai (keyword classification, excerpt summaries)")

    # Configuration problems abort before any network activity
    try:
        settings = get_settings(config)
        if sources is not None:
            settings.paths.sources_file = sources
        if output_dir is not None:
            settings.paths.output_dir = output_dir
        if days is not None:
            settings.pipeline.window_days = days
        if not skip_ai:
            require_api_key(settings)
        source_list = load_sources(settings.sources_file)
        pipeline = build_pipeline(settings, skip_ai)
    except ConfigError as e:
        print(f"❌ Configuration error: {e}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    print(f"📋 Loaded {len(source_list)} sources from {settings.sources_file}")

    try:
        result = asyncio.run(async_run(pipeline, source_list, dry_run))
    except DigestValidationError as e:
        print("❌ Markdown validation failed:")
        for problem in e.problems:
            print(f"  • {problem}")
        raise typer.Exit(code=EXIT_VALIDATION_ERROR)

    if result.digest is None:
        raise typer.Exit(code=EXIT_OK)

    if dry_run:
        print()
        print(result.markdown)
    else:
        print(f"\n✨ Success! Generated digest for Week {result.digest.metadata.week}, {result.digest.metadata.year}")
        print(f"📄 File: {result.output_path}")


@cli.command()
def validate(path: Path = typer.Argument(..., help="Digest markdown file")) -> None:
    """Validate an existing digest file."""
    problems = validate_file(path)
    if problems:
        print(f"❌ {path} failed validation:")
        for problem in problems:
            print(f"  • {problem}")
        raise typer.Exit(code=EXIT_VALIDATION_ERROR)
    print(f"✓ {path} is valid")


def app() -> None:
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    app()
