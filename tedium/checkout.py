"""Brings every discovered repository to a known local state."""

import asyncio
import shutil
from collections.abc import Awaitable
from pathlib import Path
from typing import TypeVar

from tedium.element import RepositoryDescriptor, WorkingRepository, working_directory
from tedium.interfaces import SourceControl
from tedium.logging import get_logger
from tedium.rate import RateGovernor

logger = get_logger("checkout")

T = TypeVar("T")


async def gather_with_progress(aws: list[Awaitable[T]], label: str) -> list[T]:
    """
    Like ``asyncio.gather`` but logs how many awaitables have finished.

    Results keep input order. The first failure cancels everything still
    running and propagates once those tasks have unwound, so nothing keeps
    working in the background after this returns.
    """
    total = len(aws)
    done = 0

    async def track(aw: Awaitable[T]) -> T:
        nonlocal done
        result = await aw
        done += 1
        logger.info(f"{label} {done}/{total}")
        return result

    tasks = [asyncio.ensure_future(track(aw)) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class CheckoutManager:
    """Clones or opens working copies and creates the working branch."""

    def __init__(
        self,
        source_control: SourceControl,
        rate: RateGovernor,
        work_dir: str | Path,
        branch_name: str = "auto-cleanup",
        clone_delay: float = 0.1,
    ) -> None:
        self.source_control = source_control
        self.rate = rate
        self.work_dir = Path(work_dir)
        self.branch_name = branch_name
        self.clone_delay = clone_delay

    def reset_work_dir(self) -> None:
        """Delete and recreate the working directory. Nothing survives a run."""
        if self.work_dir.exists():
            shutil.rmtree(self.work_dir)
        self.work_dir.mkdir(parents=True)

    async def checkout(self, descriptor: RepositoryDescriptor) -> WorkingRepository:
        target = working_directory(self.work_dir, descriptor)
        if target.exists():
            handle = await self.source_control.open(target)
        else:
            await self.rate.wait(self.clone_delay)
            handle = await self.source_control.clone(descriptor.clone_url, target)
        return WorkingRepository(directory=target, descriptor=descriptor, checkout=handle)

    async def checkout_all(
        self, descriptors: list[RepositoryDescriptor]
    ) -> list[WorkingRepository]:
        """Check out every repository concurrently and wait for all of them."""
        return await gather_with_progress(
            [self.checkout(descriptor) for descriptor in descriptors],
            "Cloning repos...",
        )

    async def prepare(self, repo: WorkingRepository) -> None:
        """Create the working branch from HEAD and switch to it."""
        commit = await self.source_control.head_commit(repo.checkout)
        await self.source_control.create_branch(repo.checkout, self.branch_name, commit)
        await self.source_control.checkout_branch(repo.checkout, self.branch_name)


__all__ = ["CheckoutManager", "gather_with_progress"]
