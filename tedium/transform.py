"""Applies cleanup passes to one repository at a time."""

from collections.abc import Iterable
from pathlib import Path

from tedium.element import WorkingRepository
from tedium.exceptions import ErrorKind, RepositoryError
from tedium.interfaces import CleanupPass, SourceControl
from tedium.logging import get_logger

logger = get_logger("transform")


def pass_name(cleanup_pass: CleanupPass) -> str:
    return getattr(cleanup_pass, "__name__", type(cleanup_pass).__name__)


class CleanupPipeline:
    """
    Runs cleanup passes in order against a working copy.

    Each pass edits files on disk. Whatever a pass leaves uncommitted is
    committed on the working branch straight after it, and the repository is
    marked dirty, so every pass's change lands as its own commit.
    """

    def __init__(
        self,
        passes: Iterable[CleanupPass],
        source_control: SourceControl,
        commit_message: str = "Automatic cleanup!",
    ) -> None:
        self.passes = list(passes)
        self.source_control = source_control
        self.commit_message = commit_message

    async def run(self, repo: WorkingRepository) -> None:
        for cleanup_pass in self.passes:
            await cleanup_pass(repo)
            if await self.source_control.has_changes(repo.checkout):
                name = pass_name(cleanup_pass)
                await self.source_control.commit_all(
                    repo.checkout, f"{self.commit_message}\n\n{name}"
                )
                logger.debug(f"{repo.directory}: {name} changed files")
                repo.dirty = True


class TransformRunner:
    """Runs the pipeline for a repository unless its directory is excluded."""

    def __init__(
        self, pipeline: CleanupPipeline, excluded_dirs: Iterable[str] = ()
    ) -> None:
        self.pipeline = pipeline
        self.excluded_dirs = frozenset(excluded_dirs)

    def is_excluded(self, repo: WorkingRepository) -> bool:
        return Path(repo.directory).name in self.excluded_dirs

    async def run(self, repo: WorkingRepository) -> None:
        """
        Transform ``repo`` in place.

        Raises:
            RepositoryError: Wrapping whatever a pass raised, with the
                repository attached.
        """
        try:
            await self.pipeline.run(repo)
        except Exception as e:
            raise RepositoryError(ErrorKind.TRANSFORM, repo, e) from e


__all__ = ["CleanupPipeline", "TransformRunner", "pass_name"]
