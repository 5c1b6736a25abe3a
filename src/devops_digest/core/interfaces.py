"""Core interfaces for adapters."""

from abc import ABC, abstractmethod

from devops_digest.core.entities import Classification, Digest, Item, Source


class ItemCollector(ABC):
    """Interface for collecting items from one configured source."""

    @abstractmethod
    async def collect(self, source: Source) -> list[Item]:
        """Collect items from source. Must not raise."""
        pass


class LLMClient(ABC):
    """Interface for text completion calls."""

    @abstractmethod
    async def complete(self, system: str, prompt: str, json_mode: bool = False) -> str:
        """Return the model's text response."""
        pass


class Classifier(ABC):
    """Interface for item classification strategies."""

    # Whether batches should be spaced out to respect external rate limits
    rate_limited: bool = False

    @abstractmethod
    async def classify(self, item: Item) -> Classification:
        """Classify a single item."""
        pass


class Summarizer(ABC):
    """Interface for item summarization strategies."""

    rate_limited: bool = False

    @abstractmethod
    async def summarize(self, item: Item) -> str:
        """Summarize a single item."""
        pass


class DigestRenderer(ABC):
    """Interface for rendering digests."""

    @abstractmethod
    def render(self, digest: Digest) -> str:
        """Render digest to a document."""
        pass
