from __future__ import annotations

import asyncio
import time
from typing import Any, Optional

import httpx

from quote_ratio.core.exceptions import UpstreamBadResponse, UpstreamRateLimited
from quote_ratio.core.log import get_logger
from quote_ratio.core.request_spec import JsonRpcSpec, RequestSpec

logger = get_logger(__name__)


class TokenBucket:
    """Caps outgoing requests at ``rate_per_sec``, allowing a one-second burst."""

    def __init__(self, rate_per_sec: float) -> None:
        self.rate_per_sec = max(rate_per_sec, 0.1)
        self.capacity = self.rate_per_sec
        self.tokens = self.capacity
        self.last_refill = time.monotonic()
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        while True:
            async with self._lock:
                now = time.monotonic()
                self.tokens = min(self.capacity, self.tokens + (now - self.last_refill) * self.rate_per_sec)
                self.last_refill = now
                if self.tokens >= 1.0:
                    self.tokens -= 1.0
                    return
                wait_time = (1.0 - self.tokens) / self.rate_per_sec
            await asyncio.sleep(wait_time)


class RpcHttpClient:
    """POSTs JSON-RPC payloads with rate limiting and bounded retries.

    429 and 5xx responses and transport errors are retried up to ``max_retries``
    times; ``max_retries=0`` makes every one of them fatal on first sight.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        rps: float = 10.0,
        max_retries: int = 0,
        backoff_base: float = 0.5,
        backoff_max: float = 8.0,
        async_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self.backoff_base = max(0.1, backoff_base)
        self.backoff_max = max(backoff_max, self.backoff_base)
        self._client = async_client
        self._owns_client = async_client is None
        self._rate_limiter = TokenBucket(rate_per_sec=rps)

    async def __aenter__(self) -> "RpcHttpClient":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(self, spec: RequestSpec | JsonRpcSpec) -> Any:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)

        request_spec = spec.to_request_spec() if isinstance(spec, JsonRpcSpec) else spec
        last_error: Optional[BaseException] = None
        for attempt in range(self.max_retries + 1):
            await self._rate_limiter.acquire()
            retry_after: Optional[str] = None
            try:
                resp = await self._client.request(
                    request_spec.method,
                    request_spec.build_url(include_query=False),
                    params=request_spec.normalized_query(),
                    headers=request_spec.headers,
                    json=request_spec.json,
                )
            except httpx.HTTPError as exc:
                last_error = exc
            else:
                if resp.status_code == 429:
                    last_error = UpstreamRateLimited("RPC rate limited", status_code=resp.status_code)
                elif resp.status_code >= 500:
                    last_error = UpstreamBadResponse("RPC upstream error", status_code=resp.status_code)
                elif resp.status_code >= 400:
                    raise UpstreamBadResponse("RPC request rejected", status_code=resp.status_code)
                else:
                    try:
                        return resp.json()
                    except ValueError as exc:
                        raise UpstreamBadResponse("RPC returned invalid JSON") from exc
                retry_after = resp.headers.get("Retry-After")

            if attempt >= self.max_retries:
                break
            await self._sleep_backoff(attempt, retry_after)

        if last_error:
            raise last_error
        raise RuntimeError("RPC request failed without a response")

    async def _sleep_backoff(self, attempt: int, retry_after: Optional[str] = None) -> None:
        if retry_after:
            try:
                delay = float(retry_after)
            except ValueError:
                delay = None
            if delay is not None:
                logger.info("rpc_retry", attempt=attempt + 1, delay_sec=delay, reason="retry-after")
                await asyncio.sleep(delay)
                return
        delay = min(self.backoff_max, self.backoff_base * (2**attempt))
        logger.info("rpc_retry", attempt=attempt + 1, delay_sec=delay)
        await asyncio.sleep(delay)


__all__ = ["RpcHttpClient", "TokenBucket"]
