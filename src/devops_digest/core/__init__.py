"""Core domain layer."""

from devops_digest.core.entities import (
    CATEGORY_ORDER,
    DEFAULT_CATEGORY,
    Classification,
    Digest,
    DigestMetadata,
    Item,
    Priority,
    Source,
    SourceType,
)
from devops_digest.core.errors import (
    ConfigError,
    DigestError,
    DigestValidationError,
    FetchError,
    LLMError,
    ResponseDecodeError,
)
from devops_digest.core.interfaces import (
    Classifier,
    DigestRenderer,
    ItemCollector,
    LLMClient,
    Summarizer,
)

__all__ = [
    "CATEGORY_ORDER",
    "DEFAULT_CATEGORY",
    "Classification",
    "Digest",
    "DigestMetadata",
    "Item",
    "Priority",
    "Source",
    "SourceType",
    "ConfigError",
    "DigestError",
    "DigestValidationError",
    "FetchError",
    "LLMError",
    "ResponseDecodeError",
    "Classifier",
    "DigestRenderer",
    "ItemCollector",
    "LLMClient",
    "Summarizer",
]
