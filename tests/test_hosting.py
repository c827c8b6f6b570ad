"""
Tests for the GitHub resource clients and the hosting-service adapter.
"""

import asyncio
import json
from typing import Any

import httpx
import pytest

from tedium.element import RepositoryDescriptor
from tedium.exceptions import ConfigurationError, NotFoundError
from tedium.github import AsyncGitHubClient
from tedium.hosting import GitHubHostingService
from tedium.transport import RetryConfig


def _repo_json(name: str, owner: str = "PolymerElements") -> dict[str, Any]:
    return {
        "id": 1,
        "name": name,
        "full_name": f"{owner}/{name}",
        "owner": {"login": owner, "id": 2, "type": "Organization"},
        "clone_url": f"https://github.com/{owner}/{name}.git",
        "default_branch": "master",
    }


class FakeGitHub:
    """Routes requests to canned responses and records them."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.org_repos = [_repo_json(f"el-{i}") for i in range(3)]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/user":
            return httpx.Response(200, json={"login": "tedium-bot", "id": 9, "type": "User"})
        if path == "/repos/Polymer/polymer":
            return httpx.Response(200, json=_repo_json("polymer", owner="Polymer"))
        if path == "/users/tedium-bot/repos":
            return httpx.Response(200, json=[_repo_json("fork-of-el", owner="tedium-bot")])
        if path == "/orgs/PolymerElements/repos":
            page = int(request.url.params["page"])
            per_page = int(request.url.params["per_page"])
            start = (page - 1) * per_page
            return httpx.Response(200, json=self.org_repos[start : start + per_page])
        if path.endswith("/pulls") and request.method == "POST":
            payload = json.loads(request.content)
            return httpx.Response(
                201,
                json={
                    "number": 42,
                    "title": payload["title"],
                    "state": "open",
                    "head": {"ref": payload["head"]},
                    "base": {"ref": payload["base"]},
                    "html_url": "https://github.com/o/r/pull/42",
                },
            )
        if path.endswith("/issues/42") and request.method == "PATCH":
            payload = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "number": 42,
                    "title": "Automatic cleanup!",
                    "state": "open",
                    "assignees": [{"login": login} for login in payload["assignees"]],
                    "labels": [{"name": name} for name in payload["labels"]],
                },
            )
        return httpx.Response(404, json={"message": "Not Found"})


def _with_hosting(fake: FakeGitHub, body):
    async def run():
        client = AsyncGitHubClient(
            "ghp_testtoken0123456789",
            base_url="https://api.github.test",
            retry_config=RetryConfig(max_retries=0),
            transport=httpx.MockTransport(fake),
        )
        async with client:
            return await body(GitHubHostingService(client))

    return asyncio.run(run())


def test_client_requires_token() -> None:
    with pytest.raises(ConfigurationError):
        AsyncGitHubClient("")


def test_authenticated_login() -> None:
    fake = FakeGitHub()
    assert _with_hosting(fake, lambda hosting: hosting.authenticated_login()) == "tedium-bot"


def test_get_repository_maps_to_descriptor() -> None:
    descriptor = _with_hosting(
        FakeGitHub(), lambda hosting: hosting.get_repository("Polymer", "polymer")
    )
    assert descriptor == RepositoryDescriptor(
        name="polymer", owner="Polymer", clone_url="https://github.com/Polymer/polymer.git"
    )


def test_list_organization_pages() -> None:
    fake = FakeGitHub()

    async def body(hosting: GitHubHostingService):
        first = await hosting.list_organization("PolymerElements", per_page=2, page=1)
        second = await hosting.list_organization("PolymerElements", per_page=2, page=2)
        return first, second

    first, second = _with_hosting(fake, body)

    assert [d.name for d in first] == ["el-0", "el-1"]
    assert [d.name for d in second] == ["el-2"]
    assert fake.requests[0].url.params["per_page"] == "2"


def test_unknown_repository_raises_not_found() -> None:
    with pytest.raises(NotFoundError):
        _with_hosting(FakeGitHub(), lambda hosting: hosting.get_repository("nobody", "nothing"))


def test_pull_request_then_assign_and_label() -> None:
    fake = FakeGitHub()

    async def body(hosting: GitHubHostingService) -> int:
        number = await hosting.create_pull_request(
            "PolymerElements", "el-0", title="Automatic cleanup!", head="auto-cleanup", base="master"
        )
        await hosting.assign_and_label(
            "PolymerElements", "el-0", number, assignee="tedium-bot", labels=["autogenerated"]
        )
        return number

    assert _with_hosting(fake, body) == 42

    create, edit = fake.requests
    assert create.method == "POST"
    assert create.url.path == "/repos/PolymerElements/el-0/pulls"
    assert json.loads(create.content) == {
        "title": "Automatic cleanup!",
        "head": "auto-cleanup",
        "base": "master",
    }
    assert edit.method == "PATCH"
    assert edit.url.path == "/repos/PolymerElements/el-0/issues/42"
    assert json.loads(edit.content) == {"assignees": ["tedium-bot"], "labels": ["autogenerated"]}


def test_issue_edit_parses_response() -> None:
    fake = FakeGitHub()

    async def body(hosting: GitHubHostingService):
        return await hosting.client.issues.edit(
            "PolymerElements", "el-0", 42, assignee="tedium-bot", labels=["autogenerated"]
        )

    issue = _with_hosting(fake, body)

    assert issue.assignees == ["tedium-bot"]
    assert issue.labels == ["autogenerated"]


def test_list_for_user_parses_repositories() -> None:
    async def body(hosting: GitHubHostingService):
        return await hosting.client.repos.list_for_user("tedium-bot")

    repos = _with_hosting(FakeGitHub(), body)

    assert [repo.full_name for repo in repos] == ["tedium-bot/fork-of-el"]
    assert repos[0].owner.login == "tedium-bot"
    assert repos[0].default_branch == "master"
