"""Async issues resource client."""

from typing import TYPE_CHECKING, Any

from tedium.types.pulls import Issue

if TYPE_CHECKING:
    from tedium.transport import AsyncHTTPTransport


class AsyncIssuesClient:
    """Async client for issue operations. Pull requests are issues too."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def edit(
        self,
        owner: str,
        repo: str,
        number: int,
        assignee: str | None = None,
        labels: list[str] | None = None,
    ) -> Issue:
        """
        Edit an issue or pull request.

        Args:
            owner: Repository owner login
            repo: Repository name
            number: Issue or pull request number
            assignee: Login to assign (optional)
            labels: Labels to set, replacing existing ones (optional)

        Returns:
            The updated Issue
        """
        payload: dict[str, Any] = {}
        if assignee is not None:
            payload["assignees"] = [assignee]
        if labels is not None:
            payload["labels"] = labels

        data = await self.transport.request(
            "PATCH", f"/repos/{owner}/{repo}/issues/{number}", body=payload
        )
        return Issue(
            number=data["number"],
            title=data.get("title", ""),
            state=data.get("state", "open"),
            assignees=[a["login"] for a in data.get("assignees") or []],
            labels=[label["name"] for label in data.get("labels") or []],
        )
