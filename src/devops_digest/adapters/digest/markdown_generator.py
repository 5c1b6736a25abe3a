"""Markdown digest generator."""

import json
import re

from devops_digest.core import Digest, DigestRenderer, Item
from devops_digest.core.dates import format_display_date

CATEGORY_EMOJIS = {
    "Kubernetes": "⚓",
    "Cloud Native": "☁️",
    "CI/CD": "🔄",
    "IaC": "🏗️",
    "Observability": "📊",
    "Security": "🔐",
    "Databases": "💾",
    "Platforms": "🌐",
    "Misc": "📰",
}

READ_MORE_LABEL = "**🔗 Read more**"

_MARKDOWN_SPECIAL = re.compile(r"([\\\[\]])")

INTRO = (
    "> 📌 **Handpicked by DevOps Daily** - Your weekly dose of curated DevOps news and updates!\n"
    "\n"
    "---"
)


def _quote(value: str) -> str:
    # JSON strings are valid YAML double-quoted scalars
    return json.dumps(value, ensure_ascii=False)


def _link_target(url: str) -> str:
    return url.replace(" ", "%20").replace("(", "%28").replace(")", "%29")


def _escape_text(text: str) -> str:
    """Keep feed text from forming markdown links."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


class MarkdownDigestGenerator(DigestRenderer):
    """Render a digest as markdown with a YAML front-matter block."""

    def render(self, digest: Digest) -> str:
        """Generate markdown digest."""
        metadata = digest.metadata
        front_matter = "\n".join([
            "---",
            f"title: {_quote(metadata.title)}",
            f"date: {_quote(metadata.date)}",
            f"summary: {_quote(metadata.summary)}",
            "---",
        ])

        sections = []
        for category, items in digest.categories.items():
            if not items:
                continue
            emoji = CATEGORY_EMOJIS.get(category, "📰")
            entries = "\n\n".join(self._format_entry(item) for item in items)
            sections.append(f"## {emoji} {category}\n\n{entries}")

        body = "\n\n---\n\n".join(sections)
        return f"{front_matter}\n\n{INTRO}\n\n{body}\n"

    def _format_entry(self, item: Item) -> str:
        """Format single digest entry."""
        summary = _escape_text(item.summary or item.excerpt[:200])
        lines = [
            f"### 📄 {_escape_text(item.title)}",
            "",
            summary,
            "",
            f"**📅 {format_display_date(item.published_at)}** • **📰 {item.source}**",
        ]
        if item.tags:
            tags = ", ".join(f"`{tag}`" for tag in item.tags)
            lines.append(f"  🏷️ *{tags}*")
        lines.extend(["", f"[{READ_MORE_LABEL}]({_link_target(item.url)})"])
        return "\n".join(lines)
