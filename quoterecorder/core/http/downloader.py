"""HTTP download primitive with fixed-interval retries."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx

from quoterecorder.core.config import FetchConfig
from quoterecorder.core.exceptions import FetchError
from quoterecorder.core.patterns.retry import RetryConfig, RetryExecutor


class ResilientDownloader:
    """Download text bodies, retrying transport errors and non-2xx responses.

    The caller may pass its own :class:`httpx.AsyncClient`; it is then the
    caller's to close.
    """

    def __init__(
        self,
        config: FetchConfig,
        client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.config = config
        self._client = client
        self._owns_client = client is None
        self._sleep = sleep

    @property
    def retry_config(self) -> RetryConfig:
        return RetryConfig(
            max_attempts=self.config.retry_times,
            base_delay=self.config.retry_interval_seconds,
            max_delay=self.config.retry_interval_seconds,
            retry_on_exceptions=(httpx.HTTPError,),
        )

    async def __aenter__(self) -> ResilientDownloader:
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout),
                follow_redirects=True,
                headers={"User-Agent": self.config.user_agent},
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _get_text(self, url: str, params: Mapping[str, Any] | None) -> str:
        client = self._ensure_client()
        response = await client.get(url, params=params)
        response.raise_for_status()
        return response.text

    async def download_text(self, url: str, params: Mapping[str, Any] | None = None) -> str:
        """GET ``url`` and return the decoded body.

        Raises:
            FetchError: every attempt failed.
        """

        retry = RetryExecutor(self.retry_config, sleep=self._sleep)
        try:
            return await retry.execute(self._get_text, url, params)
        except httpx.HTTPError as exc:
            status_code = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
            raise FetchError(
                f"download failed after {retry.attempt_count} attempts: {exc}",
                url=url,
                attempts=retry.attempt_count,
                status_code=status_code,
            ) from exc


__all__ = ["ResilientDownloader"]
