"""Finds the repositories a batch run works on."""

from tedium.element import RepositoryDescriptor
from tedium.interfaces import RepositoryLister
from tedium.logging import get_logger

logger = get_logger("discovery")


def dedupe_by_name(repos: list[RepositoryDescriptor]) -> list[RepositoryDescriptor]:
    """Keep the first repository seen for each name, preserving order."""
    seen: set[str] = set()
    deduped: list[RepositoryDescriptor] = []
    for repo in repos:
        if repo.name in seen:
            continue
        seen.add(repo.name)
        deduped.append(repo)
    return deduped


class RepositoryDiscovery:
    """
    The root repository plus every repository of an organization.

    GitHub's pagination is not entirely consistent and sometimes repeats a
    repository across page boundaries, so the result is deduplicated by name.
    Any listing failure propagates: there is no partial discovery.
    """

    def __init__(
        self,
        lister: RepositoryLister,
        root_owner: str,
        root_name: str,
        organization: str,
        page_size: int = 100,
    ) -> None:
        self.lister = lister
        self.root_owner = root_owner
        self.root_name = root_name
        self.organization = organization
        self.page_size = page_size

    async def discover(self) -> list[RepositoryDescriptor]:
        root = await self.lister.get_repository(self.root_owner, self.root_name)
        repos = [root]

        page = 1
        while True:
            results = await self.lister.list_organization(
                self.organization, self.page_size, page
            )
            repos.extend(results)
            logger.debug(f"page {page} of {self.organization}: {len(results)} repos")
            if len(results) < self.page_size:
                break
            page += 1

        deduped = dedupe_by_name(repos)
        if len(deduped) != len(repos):
            logger.debug(f"dropped {len(repos) - len(deduped)} duplicate listings")
        logger.info(f"Discovered {len(deduped)} repos in {self.organization}")
        return deduped


__all__ = ["RepositoryDiscovery", "dedupe_by_name"]
