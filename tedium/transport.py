"""
HTTP layer for the GitHub REST API.

One ``httpx.AsyncClient`` per run. Requests are retried on rate limiting,
server errors and connection failures; GET responses are revalidated
against the ``ResponseCache`` with ETags, and a 304 costs nothing against
GitHub's rate limit.
"""

import asyncio
import random
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

import httpx

from tedium.cache import ResponseCache
from tedium.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    TediumError,
    ValidationError,
)
from tedium.logging import log_http_request, log_http_response


@dataclass
class RetryConfig:
    """
    When and how long to back off.

    The wait before retry ``n`` (0-based) is ``backoff_factor ** n`` seconds
    with +/- ``jitter`` spread, capped at ``max_backoff``. A ``Retry-After``
    header wins when ``respect_retry_after`` is set.
    """

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0
    jitter: float = 0.1

    def should_retry(self, status_code: int, attempt: int) -> bool:
        return attempt < self.max_retries and status_code in self.retry_on

    def backoff(self, attempt: int, retry_after: str | None = None) -> float:
        if retry_after and self.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass
        wait = self.backoff_factor**attempt
        wait += random.uniform(-1, 1) * wait * self.jitter
        return min(wait, self.max_backoff)


_ERRORS_BY_STATUS: dict[int, type[TediumError]] = {
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
}


def rate_limit_wait(response: httpx.Response) -> int:
    """Seconds until the rate limit lifts, from the response headers."""
    retry_after = response.headers.get("Retry-After", "")
    if retry_after.isdigit():
        return int(retry_after)
    reset = response.headers.get("X-RateLimit-Reset", "")
    if reset.isdigit():
        return max(0, int(reset) - int(time.time())) + 1
    return 60


def error_from_response(response: httpx.Response) -> TediumError:
    """
    Map an error response onto the exception hierarchy.

    GitHub signals an exhausted primary rate limit with a 403 and
    ``X-RateLimit-Remaining: 0``, which is reported as ``RateLimitedError``
    rather than an authorization failure.
    """
    try:
        data = response.json()
    except ValueError:
        data = None
    if not isinstance(data, dict):
        data = {}

    status = response.status_code
    code = f"HTTP_{status}"
    message = data.get("message") or f"HTTP {status}"
    if data.get("errors"):
        message = f"{message}: {data['errors']}"
    request_id = response.headers.get("X-GitHub-Request-Id")

    rate_limited = status == 429 or (
        status == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
    )
    if rate_limited:
        return RateLimitedError(code, message, rate_limit_wait(response), request_id)
    if status >= 500:
        return ServerError(code, message, request_id)
    return _ERRORS_BY_STATUS.get(status, ValidationError)(code, message, request_id)


class AsyncHTTPTransport:
    """
    Authenticated, retrying, caching JSON client.

    Example:
        ```python
        transport = AsyncHTTPTransport("https://api.github.com", token)
        repos = await transport.request("GET", "/orgs/PolymerElements/repos", params={"page": 1})
        ```
    """

    USER_AGENT = "tedium/0.1"

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        cache: ResponseCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: API root, e.g. "https://api.github.com"
            token: Personal access token, sent as a bearer credential
            timeout: Per-request timeout in seconds
            retry_config: Retry policy (default: RetryConfig())
            cache: ETag cache for GET requests (optional)
            transport: httpx transport override, used by tests to stub the network
        """
        self.base_url = base_url.rstrip("/")
        self.retry_config = retry_config or RetryConfig()
        self.cache = cache
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": "application/vnd.github.v3+json",
                "Authorization": f"Bearer {token}",
                "User-Agent": self.USER_AGENT,
            },
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            TediumError: The mapped error once retries are exhausted, or
                straight away for statuses that are not retried.
        """
        key = cache_key(path, params)
        cached = self.cache.get(key) if method == "GET" and self.cache is not None else None
        headers = {"If-None-Match": cached[0]} if cached is not None else {}

        async def send() -> httpx.Response:
            log_http_request(method, self.base_url + path, headers=headers, body=body)
            return await self._client.request(
                method, path, params=params, json=body, headers=headers
            )

        response = await self._send_with_retry(send)

        if cached is not None and response.status_code == 304:
            log_http_response(304, key, from_cache=True)
            return cached[1]

        data = response.json() if response.content else {}
        etag = response.headers.get("ETag")
        if method == "GET" and etag and self.cache is not None:
            self.cache.put(key, etag, data)
        return data

    async def _send_with_retry(
        self, send: Callable[[], Awaitable[httpx.Response]]
    ) -> httpx.Response:
        policy = self.retry_config
        attempt = 0
        while True:
            started = time.monotonic()
            try:
                response = await send()
            except httpx.RequestError as e:
                if attempt >= policy.max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e
                await asyncio.sleep(policy.backoff(attempt))
                attempt += 1
                continue

            log_http_response(
                response.status_code,
                str(response.request.url),
                elapsed_ms=(time.monotonic() - started) * 1000,
            )
            if response.status_code < 400:
                return response
            if not policy.should_retry(response.status_code, attempt):
                raise error_from_response(response)

            await asyncio.sleep(policy.backoff(attempt, response.headers.get("Retry-After")))
            attempt += 1


def cache_key(path: str, params: dict[str, Any] | None) -> str:
    """Stable key for a request: the path plus sorted query parameters."""
    if not params:
        return path
    return f"{path}?{urlencode(sorted(params.items()))}"


__all__ = [
    "AsyncHTTPTransport",
    "RetryConfig",
    "cache_key",
    "error_from_response",
    "rate_limit_wait",
]
