"""Model-assisted classification with per-item keyword fallback."""

from typing import Any, Optional

from devops_digest.adapters.classification.keyword_classifier import (
    KeywordClassifier,
    event_exclusion,
    excerpt_summary,
    is_event_announcement,
)
from devops_digest.adapters.llm.json_parsing import decode_json_object
from devops_digest.core import (
    DEFAULT_CATEGORY,
    Classification,
    Classifier,
    Item,
    LLMClient,
    LLMError,
    ResponseDecodeError,
)

CLASSIFICATION_SYSTEM_PROMPT = """You are a DevOps editor. You classify news items into categories:
- Kubernetes: K8s core, distributions, tools
- Cloud Native: CNCF projects, containers, service mesh, networking
- CI/CD: Continuous integration/deployment, GitOps, pipelines
- IaC: Infrastructure as Code (Terraform, Pulumi, Ansible, etc.)
- Observability: Monitoring, logging, tracing, metrics
- Security: Container security, secrets management, policy enforcement
- Databases: SQL, NoSQL, data stores
- Platforms: Cloud providers, PaaS, hosting
- Misc: Everything else

Return strict JSON:
{
  "include": boolean,
  "category": "...",
  "tags": [],
  "summary": "1-2 sentences"
}

Include only technical, actionable updates.
Exclude: marketing fluff, company announcements without technical content, duplicate content."""


def build_classification_prompt(item: Item) -> str:
    return (
        f"Title: {item.title}\n"
        f"Excerpt: {item.excerpt}\n"
        f"Source: {item.source}\n"
        f"Date: {item.published_at}\n\n"
        "Classify this item and return only valid JSON."
    )


def _as_tags(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(tag).strip() for tag in value if str(tag).strip())


def classification_from_response(data: dict[str, Any], item: Item) -> Classification:
    """Fill gaps in a decoded response with safe defaults."""
    include = data.get("include")
    category = data.get("category")
    summary = data.get("summary")
    return Classification(
        include=include if isinstance(include, bool) else True,
        category=category.strip() if isinstance(category, str) and category.strip() else DEFAULT_CATEGORY,
        tags=_as_tags(data.get("tags")),
        summary=summary.strip() if isinstance(summary, str) and summary.strip() else excerpt_summary(item),
    )


class LLMClassifier(Classifier):
    """Classify items with the inference service, falling back to keywords per item."""

    rate_limited = True

    def __init__(self, client: LLMClient, fallback: Optional[KeywordClassifier] = None) -> None:
        self.client = client
        self.fallback = fallback or KeywordClassifier()

    async def classify(self, item: Item) -> Classification:
        # Event promos are dropped without spending a call
        if is_event_announcement(item.title):
            return event_exclusion(item)

        try:
            response = await self.client.complete(
                CLASSIFICATION_SYSTEM_PROMPT,
                build_classification_prompt(item),
                json_mode=True,
            )
            return classification_from_response(decode_json_object(response), item)
        except (LLMError, ResponseDecodeError) as e:
            print(f"  ⚠️  Classification failed for '{item.title[:70]}': {e} - using keywords")
            return self.fallback.classify_sync(item)
