"""Async pull requests resource client."""

from typing import TYPE_CHECKING, Any

from tedium.types.pulls import PullRequest

if TYPE_CHECKING:
    from tedium.transport import AsyncHTTPTransport


class AsyncPullsClient:
    """Opens pull requests."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        self.transport = transport

    async def create(
        self,
        owner: str,
        repo: str,
        title: str,
        head: str,
        base: str,
        body: str | None = None,
    ) -> PullRequest:
        """Open a pull request merging ``head`` into ``base``."""
        payload: dict[str, str] = {"title": title, "head": head, "base": base}
        if body:
            payload["body"] = body

        data = await self.transport.request(
            "POST", f"/repos/{owner}/{repo}/pulls", body=payload
        )
        return parse_pull_request(data)


def parse_pull_request(data: dict[str, Any]) -> PullRequest:
    head = data.get("head") or {}
    base = data.get("base") or {}
    return PullRequest(
        number=data["number"],
        title=data.get("title", ""),
        state=data.get("state", "open"),
        head=head.get("ref", ""),
        base=base.get("ref", ""),
        html_url=data.get("html_url", ""),
    )
