"""
GitHub API client used by tedium.

Only the handful of endpoints a batch run touches are wrapped: reading
repositories, finding out who the token belongs to, opening pull requests
and editing their issue side (assignees, labels).
"""

from types import TracebackType

import httpx

from tedium.cache import ResponseCache
from tedium.clients import (
    AsyncIssuesClient,
    AsyncPullsClient,
    AsyncReposClient,
    AsyncUsersClient,
)
from tedium.exceptions import ConfigurationError
from tedium.transport import AsyncHTTPTransport, RetryConfig


class AsyncGitHubClient:
    """
    Resource clients sharing one transport.

    Example:
        ```python
        async with AsyncGitHubClient(token, cache=ResponseCache()) as github:
            me = await github.users.get_authenticated()
            page = await github.repos.list_for_org("PolymerElements", page=1)
        ```

    Closing the client also closes the response cache it was given.
    """

    DEFAULT_BASE_URL = "https://api.github.com"

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        cache: ResponseCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not token:
            raise ConfigurationError("a GitHub token is required")
        self.base_url = base_url
        self.transport = AsyncHTTPTransport(
            base_url,
            token,
            timeout=timeout,
            retry_config=retry_config,
            cache=cache,
            transport=transport,
        )
        self.repos = AsyncReposClient(self.transport)
        self.users = AsyncUsersClient(self.transport)
        self.pulls = AsyncPullsClient(self.transport)
        self.issues = AsyncIssuesClient(self.transport)

    async def close(self) -> None:
        await self.transport.close()
        if self.transport.cache is not None:
            self.transport.cache.close()

    async def __aenter__(self) -> "AsyncGitHubClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


__all__ = ["AsyncGitHubClient"]
