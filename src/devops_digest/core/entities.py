"""Core domain entities."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SourceType(str, Enum):
    """How a source is crawled."""

    RSS = "rss"
    WEB = "web"


class Priority(str, Enum):
    """Advisory source priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


DEFAULT_CATEGORY = "Misc"

# Fixed digest layout order
CATEGORY_ORDER = (
    "Kubernetes",
    "Cloud Native",
    "CI/CD",
    "IaC",
    "Observability",
    "Security",
    "Databases",
    "Platforms",
    DEFAULT_CATEGORY,
)


@dataclass(frozen=True)
class Source:
    """One configured origin to crawl."""

    name: str
    type: SourceType
    url: str
    category: str = DEFAULT_CATEGORY
    priority: Priority = Priority.MEDIUM

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Source name cannot be empty")
        if not self.url:
            raise ValueError("Source URL cannot be empty")


@dataclass(frozen=True)
class Item:
    """One candidate piece of content.

    Items are never mutated; stages build new ones with ``dataclasses.replace``.
    ``published_at`` holds an ISO-8601 timestamp once the item is normalized.
    ``include`` is tri-state: None until classified, False means drop.
    """

    title: str
    url: str
    excerpt: str
    source: str
    published_at: str
    category: Optional[str] = None
    tags: tuple[str, ...] = ()
    summary: Optional[str] = None
    include: Optional[bool] = None
    priority: Optional[Priority] = None


@dataclass(frozen=True)
class Classification:
    """Include/category/tags/summary decision for one item."""

    include: bool
    category: str
    tags: tuple[str, ...] = ()
    summary: str = ""


@dataclass(frozen=True)
class DigestMetadata:
    """Front matter of a digest."""

    title: str
    date: str
    week: int
    year: int
    summary: str


@dataclass(frozen=True)
class Digest:
    """Final output: metadata plus items grouped by category in layout order."""

    metadata: DigestMetadata
    categories: dict[str, list[Item]] = field(default_factory=dict)

    @property
    def items(self) -> list[Item]:
        return [item for items in self.categories.values() for item in items]
