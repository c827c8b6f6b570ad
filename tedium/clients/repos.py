"""Async repositories resource client."""

from typing import TYPE_CHECKING, Any

from tedium.types.repos import Repository, User

if TYPE_CHECKING:
    from tedium.transport import AsyncHTTPTransport


class AsyncReposClient:
    """Repository reads: single repositories and paged listings."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def get(self, owner: str, repo: str) -> Repository:
        """
        Fetch one repository.

        Args:
            owner: Login of the owning user or organization
            repo: Repository name

        Returns:
            Repository object
        """
        data = await self.transport.request("GET", f"/repos/{owner}/{repo}")
        return parse_repository(data)

    async def list_for_org(
        self, org: str, per_page: int = 100, page: int = 1
    ) -> list[Repository]:
        """
        List one page of an organization's repositories.

        Args:
            org: Organization login
            per_page: Page size (GitHub caps this at 100)
            page: 1-based page number

        Returns:
            List of Repository objects, shorter than ``per_page`` on the last page
        """
        data = await self.transport.request(
            "GET",
            f"/orgs/{org}/repos",
            params={"per_page": per_page, "page": page},
        )
        return [parse_repository(repo) for repo in data]

    async def list_for_user(
        self, user: str, per_page: int = 100, page: int = 1
    ) -> list[Repository]:
        """
        List one page of a user's public repositories.

        Args:
            user: User login
            per_page: Page size (GitHub caps this at 100)
            page: 1-based page number

        Returns:
            List of Repository objects
        """
        data = await self.transport.request(
            "GET",
            f"/users/{user}/repos",
            params={"per_page": per_page, "page": page},
        )
        return [parse_repository(repo) for repo in data]


def parse_user(data: dict[str, Any]) -> User:
    """Parse a user (or organization) object from an API response."""
    return User(
        login=data["login"],
        id=data.get("id", 0),
        type=data.get("type", "User"),
    )


def parse_repository(data: dict[str, Any]) -> Repository:
    """Parse a repository object from an API response."""
    return Repository(
        id=data.get("id", 0),
        name=data["name"],
        full_name=data.get("full_name") or f"{data['owner']['login']}/{data['name']}",
        owner=parse_user(data["owner"]),
        clone_url=data["clone_url"],
        default_branch=data.get("default_branch", "master"),
        private=data.get("private", False),
        archived=data.get("archived", False),
        fork=data.get("fork", False),
    )
