"""tedium async resource clients for the GitHub REST API."""

from tedium.clients.issues import AsyncIssuesClient
from tedium.clients.pulls import AsyncPullsClient
from tedium.clients.repos import AsyncReposClient
from tedium.clients.users import AsyncUsersClient

__all__ = [
    "AsyncReposClient",
    "AsyncUsersClient",
    "AsyncPullsClient",
    "AsyncIssuesClient",
]
