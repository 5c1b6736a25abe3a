"""Inference service adapters."""

from devops_digest.adapters.llm.claude_client import ClaudeClient
from devops_digest.adapters.llm.json_parsing import decode_json_object

__all__ = ["ClaudeClient", "decode_json_object"]
