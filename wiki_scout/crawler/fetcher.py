# wiki_scout/crawler/fetcher.py
"""
Fetcher module: streams listing batches over HTTP with retry/backoff and timeout.
"""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Sequence

from aiohttp import ClientError, ClientResponse, ClientSession, ClientTimeout
from yarl import URL

from wiki_scout.config import ExtractorConfig
from wiki_scout.errors import FetchError
from wiki_scout.logger import logger

RETRY_STATUS: Sequence[int] = (429, 500, 502, 503, 504)
CHUNK_SIZE = 64 * 1024


class Fetcher:
    """Opens one listing response at a time and hands out its body as byte chunks."""

    def __init__(
        self,
        session: ClientSession,
        config: ExtractorConfig,
        retry_status: Sequence[int] = RETRY_STATUS,
        backoff: float = 1.0,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        self.session = session
        self.config = config
        self._retry_status = retry_status
        self._backoff = backoff
        self._chunk_size = chunk_size

    @asynccontextmanager
    async def stream(self, url: str) -> AsyncIterator[AsyncIterator[bytes]]:
        """
        Open *url* and yield an async iterator over its body.

        The response is released on exit, also when the consumer stops early.
        Raises FetchError once retries are exhausted or on a non-retryable status;
        a connection lost while reading the body surfaces as FetchError from the iterator.
        """
        resp = await self._request(url)
        try:
            yield self._body(resp, url)
        finally:
            resp.release()

    async def _body(self, resp: ClientResponse, url: str) -> AsyncIterator[bytes]:
        try:
            async for chunk in resp.content.iter_chunked(self._chunk_size):
                yield chunk
        except (ClientError, asyncio.TimeoutError) as exc:
            logger.warning("Body of %s interrupted: %s", url, exc)
            raise FetchError(f"Body of {url} interrupted: {type(exc).__name__}: {exc}") from exc

    async def _request(self, url: str) -> ClientResponse:
        timeout = ClientTimeout(total=self.config.timeout)
        attempts = 0
        while True:
            status: Optional[int] = None
            try:
                # cursor is already percent-encoded, keep the query as is
                resp = await self.session.get(URL(url, encoded=True), timeout=timeout)
            except (ClientError, asyncio.TimeoutError) as exc:
                reason = f"{type(exc).__name__}: {exc}"
            else:
                if resp.status < 400:
                    return resp
                status = resp.status
                resp.release()
                if status not in self._retry_status:
                    raise FetchError(f"HTTP {status} for {url}", status)
                reason = f"HTTP {status}"

            attempts += 1
            if attempts > self.config.retry_times:
                logger.warning("Failed %s: %s", url, reason)
                raise FetchError(f"Giving up on {url} after {attempts} attempts: {reason}", status)
            # exponential backoff, cap at 60s
            delay = min(2**attempts, 60) * self._backoff
            logger.debug("Retry %d/%d for %s after %.2f s", attempts, self.config.retry_times, url, delay)
            await asyncio.sleep(delay)
