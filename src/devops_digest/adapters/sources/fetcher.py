"""HTTP fetching with retry and exponential backoff."""

import asyncio
from typing import Optional

import httpx

from devops_digest.core import FetchError

DEFAULT_USER_AGENT = "DevOps Daily News Crawler/1.0"


class RetryingFetcher:
    """GET a URL as text, retrying every failure until the budget runs out.

    Timeouts, non-2xx responses and network errors are all treated the same.
    Between attempts it sleeps ``backoff_base * 2 ** attempt`` seconds.
    """

    def __init__(
        self,
        max_retries: int = 3,
        timeout: float = 10.0,
        backoff_base: float = 1.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.max_retries = max_retries
        self.timeout = timeout
        self.backoff_base = backoff_base
        self.user_agent = user_agent
        self.transport = transport

    async def fetch(
        self,
        url: str,
        max_retries: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """Return the response body, or raise FetchError."""
        attempts = max(1, max_retries if max_retries is not None else self.max_retries)
        last_exception: Optional[Exception] = None

        async with httpx.AsyncClient(
            timeout=timeout if timeout is not None else self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        ) as client:
            for attempt in range(attempts):
                try:
                    response = await client.get(url)
                    response.raise_for_status()
                    return response.text
                except (httpx.HTTPError, httpx.InvalidURL) as e:
                    last_exception = e
                    print(f"  ⚠️  Attempt {attempt + 1}/{attempts} failed for {url}: {e}")

                if attempt < attempts - 1:
                    await asyncio.sleep(self.backoff_base * (2 ** attempt))

        raise FetchError(url, attempts, last_exception)
