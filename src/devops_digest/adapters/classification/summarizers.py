"""Item summarization strategies."""

from devops_digest.core import Item, LLMClient, LLMError, Summarizer

SUMMARIZATION_SYSTEM_PROMPT = """Write a compact, neutral technical summary.
1 sentence: what happened.
1 sentence: why DevOps engineers care.
If it's a release, add 1 short note about breaking changes or key features.
Maximum 3 lines total.
No marketing language. Be concise and technical."""

MAX_SUMMARY_LINES = 3
EXCERPT_FALLBACK_LENGTH = 200


def excerpt_fallback(item: Item) -> str:
    excerpt = item.excerpt[:EXCERPT_FALLBACK_LENGTH]
    return f"{excerpt}..." if excerpt else ""


def build_summary_prompt(item: Item) -> str:
    return (
        f"Title: {item.title}\n"
        f"Excerpt: {item.excerpt}\n"
        f"Source: {item.source}\n"
        f"Category: {item.category}\n"
        f"URL: {item.url}\n\n"
        "Write a technical summary."
    )


def clamp_lines(text: str, max_lines: int = MAX_SUMMARY_LINES) -> str:
    lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
    return "\n".join(lines[:max_lines])


class LLMSummarizer(Summarizer):
    """Summarize with the inference service, falling back to a truncated excerpt."""

    rate_limited = True

    def __init__(self, client: LLMClient) -> None:
        self.client = client

    async def summarize(self, item: Item) -> str:
        try:
            summary = clamp_lines(await self.client.complete(SUMMARIZATION_SYSTEM_PROMPT, build_summary_prompt(item)))
        except LLMError as e:
            print(f"  ⚠️  Summarization failed for '{item.title[:70]}': {e}")
            return excerpt_fallback(item)

        return summary or excerpt_fallback(item)
