"""Keyword-based classification, no external calls."""

import re

from devops_digest.core import DEFAULT_CATEGORY, Classification, Classifier, Item

FALLBACK_SUMMARY_LENGTH = 200

# Ordered: first matching signature wins
CATEGORY_SIGNATURES: tuple[tuple[str, re.Pattern], ...] = (
    ("Kubernetes", re.compile(r"\b(kubernetes|k8s|kubectl|helm|kube)\b")),
    ("Cloud Native", re.compile(r"\b(docker|container|cncf|cloud native|service mesh|istio|envoy)\b")),
    ("CI/CD", re.compile(r"(\bci/cd\b|\b(cicd|github actions|gitlab|jenkins|argo|flux)\b)")),
    ("IaC", re.compile(r"\b(terraform|pulumi|ansible|iac|infrastructure as code)\b")),
    ("Observability", re.compile(r"\b(monitoring|observability|prometheus|grafana|datadog|logging|tracing)\b")),
    ("Security", re.compile(r"\b(security|vulnerability|cve|secrets|compliance)\b")),
    ("Databases", re.compile(r"\b(database|postgres|mysql|mongodb|redis|sql)\b")),
    ("Platforms", re.compile(r"\b(aws|azure|gcp|cloud|platform)\b")),
)

_EVENT_PATTERN = re.compile(r"\b(conference|event|meetup)\s+\d{4}\b")


def is_event_announcement(title: str) -> bool:
    """Conference/meetup promos such as "KubeCon is coming!" or "Meetup 2025"."""
    lowered = title.lower()
    return "is coming!" in lowered or bool(_EVENT_PATTERN.search(lowered))


def excerpt_summary(item: Item) -> str:
    return item.excerpt[:FALLBACK_SUMMARY_LENGTH]


def event_exclusion(item: Item) -> Classification:
    return Classification(
        include=False,
        category=DEFAULT_CATEGORY,
        tags=("event",),
        summary=excerpt_summary(item),
    )


def match_category(text: str, default: str = DEFAULT_CATEGORY) -> str:
    lowered = text.lower()
    for category, pattern in CATEGORY_SIGNATURES:
        if pattern.search(lowered):
            return category
    return default


class KeywordClassifier(Classifier):
    """Classify items by matching title and excerpt against category signatures."""

    rate_limited = False

    def classify_sync(self, item: Item) -> Classification:
        if is_event_announcement(item.title):
            return event_exclusion(item)

        return Classification(
            include=True,
            category=match_category(f"{item.title} {item.excerpt}", item.category or DEFAULT_CATEGORY),
            tags=(),
            summary=excerpt_summary(item),
        )

    async def classify(self, item: Item) -> Classification:
        return self.classify_sync(item)
