"""Fetch Layer: single-attempt HTTP GET of a page's markup.

The Fetch Layer makes no decisions about the content it retrieves. A timeout,
transport error or non-2xx response is returned as a failed ``FetchResult``;
it is never raised.
"""

from __future__ import annotations

import asyncio
import hashlib
from dataclasses import dataclass
from enum import Enum

import httpx

from argus.config.settings import FetchConfig


class FetchStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    TIMEOUT = "timeout"


@dataclass
class FetchResult:
    """Outcome of one page fetch."""

    status: FetchStatus
    url: str
    html: str = ""
    status_code: int | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status == FetchStatus.SUCCESS

    @property
    def content_hash(self) -> str:
        return hashlib.sha256(self.html.encode()).hexdigest()[:16]


class PageFetcher:
    """httpx-based page fetcher.

    Contract:
    - One GET per call, no retries
    - Fixed user agent and timeout from ``FetchConfig``
    - At most ``max_in_flight`` requests outstanding at once
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or FetchConfig()
        self._client = client
        self._owns_client = client is None
        self._in_flight = asyncio.Semaphore(self._config.max_in_flight)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.timeout_s),
                limits=httpx.Limits(
                    max_connections=self._config.max_in_flight * 2,
                    max_keepalive_connections=self._config.max_in_flight,
                ),
                follow_redirects=self._config.follow_redirects,
            )
        return self._client

    async def fetch(self, url: str) -> FetchResult:
        client = self._get_client()
        headers = {"User-Agent": self._config.user_agent}
        async with self._in_flight:
            try:
                response = await client.get(
                    url, headers=headers, timeout=self._config.timeout_s
                )
            except httpx.TimeoutException as exc:
                return FetchResult(
                    status=FetchStatus.TIMEOUT,
                    url=url,
                    detail=f"Timed out after {self._config.timeout_s:g}s: {exc}",
                )
            except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
                return FetchResult(status=FetchStatus.FAILURE, url=url, detail=str(exc))

        if not response.is_success:
            return FetchResult(
                status=FetchStatus.FAILURE,
                url=url,
                status_code=response.status_code,
                detail=f"HTTP {response.status_code} {response.reason_phrase}".strip(),
            )

        return FetchResult(
            status=FetchStatus.SUCCESS,
            url=str(response.url),
            html=response.text,
            status_code=response.status_code,
            detail=f"Fetched {url}",
        )

    async def aclose(self) -> None:
        """Close the underlying client if this fetcher created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
