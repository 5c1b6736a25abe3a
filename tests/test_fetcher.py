"""Tests for the retrying HTTP fetcher."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from devops_digest.adapters.sources import RetryingFetcher
from devops_digest.core import FetchError


def _counting_transport(responses: list) -> tuple[httpx.MockTransport, list[httpx.Request]]:
    """Transport that replays ``responses`` in order; exceptions are raised."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        result = responses[min(len(seen), len(responses)) - 1]
        if isinstance(result, Exception):
            raise result
        return result

    return httpx.MockTransport(handler), seen


@pytest.mark.asyncio
async def test_fetch_success() -> None:
    transport, seen = _counting_transport([httpx.Response(200, text="<rss></rss>")])
    fetcher = RetryingFetcher(transport=transport)

    body = await fetcher.fetch("https://example.com/feed")

    assert body == "<rss></rss>"
    assert len(seen) == 1
    assert seen[0].headers["User-Agent"] == "DevOps Daily News Crawler/1.0"


@pytest.mark.asyncio
async def test_fetch_retries_then_succeeds() -> None:
    transport, seen = _counting_transport([
        httpx.Response(503),
        httpx.ConnectError("boom"),
        httpx.Response(200, text="ok"),
    ])
    fetcher = RetryingFetcher(max_retries=3, backoff_base=1.0, transport=transport)

    with patch("devops_digest.adapters.sources.fetcher.asyncio.sleep", new=AsyncMock()) as sleep:
        body = await fetcher.fetch("https://example.com/feed")

    assert body == "ok"
    assert len(seen) == 3
    assert [call.args[0] for call in sleep.await_args_list] == [1.0, 2.0]


@pytest.mark.asyncio
async def test_fetch_exhausts_retries() -> None:
    transport, seen = _counting_transport([httpx.Response(404)])
    fetcher = RetryingFetcher(max_retries=3, transport=transport)

    with patch("devops_digest.adapters.sources.fetcher.asyncio.sleep", new=AsyncMock()) as sleep:
        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch("https://example.com/missing")

    assert len(seen) == 3
    assert exc_info.value.url == "https://example.com/missing"
    assert exc_info.value.attempts == 3
    # No sleep after the final attempt
    assert sleep.await_count == 2


@pytest.mark.asyncio
async def test_fetch_per_call_retry_override() -> None:
    transport, seen = _counting_transport([httpx.Response(500)])
    fetcher = RetryingFetcher(max_retries=3, transport=transport)

    with patch("devops_digest.adapters.sources.fetcher.asyncio.sleep", new=AsyncMock()) as sleep:
        with pytest.raises(FetchError):
            await fetcher.fetch("https://example.com/feed", max_retries=1, timeout=5.0)

    assert len(seen) == 1
    sleep.assert_not_awaited()
