"""Classification and summarization strategies."""

from devops_digest.adapters.classification.keyword_classifier import KeywordClassifier
from devops_digest.adapters.classification.llm_classifier import LLMClassifier
from devops_digest.adapters.classification.summarizers import LLMSummarizer

__all__ = ["KeywordClassifier", "LLMClassifier", "LLMSummarizer"]
