"""
Pytest fixtures and factories for tedium testing.

Provides common fixtures for testing code built on the batch engine.
"""

from collections.abc import Generator
from pathlib import Path

import pytest

from tedium.config import Settings
from tedium.element import RepositoryDescriptor, WorkingRepository, working_directory
from tedium.git import Checkout, Credentials
from tedium.testing.mock import MockAnalyzer, MockHostingService, MockSourceControl


def create_descriptor(name: str, owner: str = "PolymerElements") -> RepositoryDescriptor:
    """Build a descriptor with a GitHub-style clone URL."""
    return RepositoryDescriptor(
        name=name,
        owner=owner,
        clone_url=f"https://github.com/{owner}/{name}.git",
    )


def create_descriptors(
    count: int, prefix: str = "element", owner: str = "PolymerElements"
) -> list[RepositoryDescriptor]:
    """``count`` descriptors named ``<prefix>-000``, ``<prefix>-001``, ..."""
    return [create_descriptor(f"{prefix}-{i:03d}", owner) for i in range(count)]


def create_working_repository(
    name: str,
    work_dir: str | Path = "repos",
    dirty: bool = False,
    needs_review: bool = False,
) -> WorkingRepository:
    descriptor = create_descriptor(name)
    directory = working_directory(work_dir, descriptor)
    return WorkingRepository(
        directory=directory,
        descriptor=descriptor,
        checkout=Checkout(directory),
        dirty=dirty,
        needs_review=needs_review,
    )


# ============================================================================
# Mock Collaborator Fixtures
# ============================================================================


@pytest.fixture
def mock_hosting() -> Generator[MockHostingService, None, None]:
    """
    Provide a MockHostingService with the root repository registered.

    Example:
        ```python
        def test_discovery(mock_hosting):
            mock_hosting.configure_org_pages("PolymerElements", [create_descriptors(3)])
            ...
        ```
    """
    hosting = MockHostingService(login="tedium-bot")
    hosting.add_repository(create_descriptor("polymer", owner="Polymer"))
    yield hosting
    hosting.reset()


@pytest.fixture
def mock_source_control() -> Generator[MockSourceControl, None, None]:
    source_control = MockSourceControl()
    yield source_control
    source_control.reset()


@pytest.fixture
def mock_analyzer() -> MockAnalyzer:
    return MockAnalyzer()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials.for_token("ghp_testtoken0123456789")


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temporary directory, no delays, no exclusions."""
    return Settings(
        work_dir=tmp_path / "repos",
        token_path=tmp_path / "token",
        cache_path=None,
        clone_delay=0.0,
        pull_request_delay=0.0,
        excluded_dirs=frozenset(),
    )
