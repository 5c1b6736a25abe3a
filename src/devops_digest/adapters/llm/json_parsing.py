"""Decoding JSON objects out of model responses."""

import json
import re
from typing import Any

from devops_digest.core import ResponseDecodeError

_CODE_BLOCK = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def _fix_json(text: str) -> str:
    """Remove trailing commas before } or ]."""
    return _TRAILING_COMMA.sub(r"\1", text)


def _outermost_object(text: str) -> str:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return ""
    return text[start:end + 1]


def decode_json_object(text: str) -> dict[str, Any]:
    """Decode a JSON object from a model response.

    Stage 1 is a strict ``json.loads`` of the whole response. Stage 2 is the
    lenient fallback: take the fenced code block if there is one, otherwise the
    span from the first ``{`` to the last ``}``, drop trailing commas and parse
    again. Anything that is not a JSON object raises ResponseDecodeError.
    """
    if not text or not text.strip():
        raise ResponseDecodeError("Empty response")

    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        block = _CODE_BLOCK.search(text)
        candidate = block.group(1).strip() if block else _outermost_object(text)
        if not candidate:
            raise ResponseDecodeError(f"No JSON object found in response: {text[:200]}")
        try:
            value = json.loads(_fix_json(candidate))
        except json.JSONDecodeError as e:
            raise ResponseDecodeError(f"Invalid JSON in response: {e}") from e

    if not isinstance(value, dict):
        raise ResponseDecodeError(f"Expected a JSON object, got {type(value).__name__}")
    return value
