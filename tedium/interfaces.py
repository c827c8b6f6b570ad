"""
Capabilities the batch engine needs from the outside world.

The engine only talks to these protocols. ``tedium.hosting`` and
``tedium.git`` provide the real adapters; ``tedium.testing`` provides
in-memory ones.
"""

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from tedium.element import RepositoryDescriptor

if TYPE_CHECKING:
    from tedium.element import WorkingRepository
    from tedium.git import Checkout, Credentials


class RepositoryLister(Protocol):
    """Read side of the hosting service used by discovery."""

    async def get_repository(self, owner: str, name: str) -> RepositoryDescriptor: ...

    async def list_organization(
        self, organization: str, per_page: int, page: int
    ) -> list[RepositoryDescriptor]: ...


class PullRequestPublisher(Protocol):
    """Write side of the hosting service used by the publish pipeline."""

    async def authenticated_login(self) -> str: ...

    async def create_pull_request(
        self, owner: str, repo: str, title: str, head: str, base: str
    ) -> int: ...

    async def assign_and_label(
        self, owner: str, repo: str, number: int, assignee: str, labels: list[str]
    ) -> None: ...


class SourceControl(Protocol):
    """Working-copy primitives."""

    async def clone(self, url: str, path: Path) -> "Checkout": ...

    async def open(self, path: Path) -> "Checkout": ...

    async def head_commit(self, checkout: "Checkout") -> str: ...

    async def create_branch(self, checkout: "Checkout", name: str, commit: str) -> None: ...

    async def checkout_branch(self, checkout: "Checkout", name: str) -> None: ...

    async def push(
        self, checkout: "Checkout", refspec: str, credentials: "Credentials"
    ) -> None: ...

    async def has_changes(self, checkout: "Checkout") -> bool: ...

    async def commit_all(self, checkout: "Checkout", message: str) -> str: ...


class AnalysisSession(Protocol):
    """An analyzer that has been started from an entry point."""

    async def metadata_tree(self, path: Path) -> None: ...

    def annotate(self) -> Any: ...


class Analyzer(Protocol):
    """Static-analysis engine."""

    async def analyze(
        self, entry_point: Path, filter: Callable[[str], bool]
    ) -> AnalysisSession: ...


class CleanupPass(Protocol):
    """
    One transformation over a checked-out repository.

    A pass edits files under ``repo.directory`` and may set ``repo.dirty``
    and ``repo.needs_review``.
    """

    async def __call__(self, repo: "WorkingRepository") -> None: ...


__all__ = [
    "RepositoryLister",
    "PullRequestPublisher",
    "SourceControl",
    "AnalysisSession",
    "Analyzer",
    "CleanupPass",
]
