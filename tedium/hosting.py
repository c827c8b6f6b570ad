"""Adapts the GitHub client to the capabilities the batch engine uses."""

from tedium.element import RepositoryDescriptor
from tedium.github import AsyncGitHubClient
from tedium.types.repos import Repository


def to_descriptor(repo: Repository) -> RepositoryDescriptor:
    return RepositoryDescriptor(
        name=repo.name, owner=repo.owner.login, clone_url=repo.clone_url
    )


class GitHubHostingService:
    """``RepositoryLister`` and ``PullRequestPublisher`` backed by GitHub."""

    def __init__(self, client: AsyncGitHubClient) -> None:
        self.client = client

    async def get_repository(self, owner: str, name: str) -> RepositoryDescriptor:
        return to_descriptor(await self.client.repos.get(owner, name))

    async def list_organization(
        self, organization: str, per_page: int, page: int
    ) -> list[RepositoryDescriptor]:
        repos = await self.client.repos.list_for_org(
            organization, per_page=per_page, page=page
        )
        return [to_descriptor(repo) for repo in repos]

    async def authenticated_login(self) -> str:
        user = await self.client.users.get_authenticated()
        return user.login

    async def create_pull_request(
        self, owner: str, repo: str, title: str, head: str, base: str
    ) -> int:
        pr = await self.client.pulls.create(owner, repo, title=title, head=head, base=base)
        return pr.number

    async def assign_and_label(
        self, owner: str, repo: str, number: int, assignee: str, labels: list[str]
    ) -> None:
        await self.client.issues.edit(
            owner, repo, number, assignee=assignee, labels=labels
        )


__all__ = ["GitHubHostingService", "to_descriptor"]
