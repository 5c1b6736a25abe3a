"""Claude API client used for classification and summarization."""

import asyncio
from typing import Any, Optional

import httpx

from devops_digest.config import Settings
from devops_digest.core import LLMClient, LLMError


class ClaudeClient(LLMClient):
    """Claude Messages API client implementation.

    Constructed once per run and handed to the classifier and summarizer.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.api_key = settings.anthropic_api_key
        self.model = settings.claude.model
        self.max_tokens = settings.claude.max_tokens
        self.temperature = settings.claude.temperature
        self.max_retries = settings.claude.max_retries
        self.initial_retry_delay = settings.claude.initial_retry_delay
        self.request_delay = settings.claude.request_delay
        self.timeout = settings.claude.timeout
        self.base_url = "https://api.anthropic.com/v1"
        self.transport = transport
        self._last_request_time = 0.0
        # Serializes request spacing across concurrent tasks of a batch
        self._rate_lock = asyncio.Lock()

    async def complete(self, system: str, prompt: str, json_mode: bool = False) -> str:
        """Return the text response.

        In JSON mode the assistant turn is prefilled with ``{`` so the model
        continues a JSON object; the brace is put back on the returned text.
        """
        messages: list[dict[str, Any]] = [{"role": "user", "content": prompt}]
        if json_mode:
            messages.append({"role": "assistant", "content": "{"})

        text = await self._call_api(system=system, messages=messages)
        return "{" + text if json_mode else text

    async def _call_api(self, system: str, messages: list[dict[str, Any]]) -> str:
        """Call Claude API with retry logic and rate limiting."""
        await self._wait_for_slot()

        last_exception: Optional[Exception] = None

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            for attempt in range(self.max_retries):
                try:
                    response = await client.post(
                        f"{self.base_url}/messages",
                        headers={
                            "x-api-key": self.api_key,
                            "anthropic-version": "2023-06-01",
                            "content-type": "application/json",
                        },
                        json={
                            "model": self.model,
                            "max_tokens": self.max_tokens,
                            "temperature": self.temperature,
                            "system": system,
                            "messages": messages,
                        },
                    )
                except httpx.RequestError as e:
                    last_exception = e
                    if attempt < self.max_retries - 1:
                        retry_delay = self.initial_retry_delay * (2 ** attempt)
                        print(f"  ⚠️  Network error, retrying after {retry_delay:.1f}s")
                        await asyncio.sleep(retry_delay)
                    continue

                if response.status_code == 200:
                    return self._extract_text(response)

                # Rate limit / server errors - retry with backoff
                if response.status_code == 429 or response.status_code >= 500:
                    retry_delay = self._get_retry_delay(response, attempt)
                    print(
                        f"  ⏳ Claude API {response.status_code}, retrying after {retry_delay:.1f}s "
                        f"(attempt {attempt + 1}/{self.max_retries})"
                    )
                    last_exception = LLMError(f"Claude API returned {response.status_code}")
                    if attempt < self.max_retries - 1:
                        await asyncio.sleep(retry_delay)
                    continue

                # Other client errors - fail immediately
                raise LLMError(f"Claude API returned {response.status_code}: {response.text[:200]}")

        raise LLMError(f"Claude API failed after {self.max_retries} attempts: {last_exception}")

    async def _wait_for_slot(self) -> None:
        """Ensure minimum delay between request starts, including within a batch."""
        async with self._rate_lock:
            loop = asyncio.get_running_loop()
            wait = self._last_request_time + self.request_delay - loop.time()
            if wait > 0:
                await asyncio.sleep(wait)
            self._last_request_time = loop.time()

    def _extract_text(self, response: httpx.Response) -> str:
        try:
            data = response.json()
            return "".join(
                block.get("text", "") for block in data["content"] if block.get("type", "text") == "text"
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise LLMError(f"Unexpected Claude API response: {e}") from e

    def _get_retry_delay(self, response: httpx.Response, attempt: int) -> float:
        """Calculate retry delay from response headers or use exponential backoff."""
        retry_after = response.headers.get("retry-after")
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass

        return self.initial_retry_delay * (2 ** attempt)
