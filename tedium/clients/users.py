"""Async users resource client."""

from typing import TYPE_CHECKING

from tedium.clients.repos import parse_user
from tedium.types.repos import User

if TYPE_CHECKING:
    from tedium.transport import AsyncHTTPTransport


class AsyncUsersClient:
    """Async client for user operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def get_authenticated(self) -> User:
        """Get the user the token belongs to."""
        data = await self.transport.request("GET", "/user")
        return parse_user(data)
