"""
Tests for concurrent checkout and working-branch preparation.
"""

import asyncio
from pathlib import Path

import pytest

from tedium.checkout import CheckoutManager, gather_with_progress
from tedium.exceptions import GitCommandError
from tedium.git import Checkout
from tedium.rate import RateGovernor
from tedium.testing import MockSourceControl, create_descriptors, create_working_repository


async def _no_sleep(_: float) -> None:
    return None


def _manager(source_control: MockSourceControl, work_dir: Path, **kwargs) -> CheckoutManager:
    return CheckoutManager(source_control, RateGovernor(sleep=_no_sleep), work_dir, **kwargs)


def test_reset_work_dir_wipes_previous_contents(tmp_path: Path) -> None:
    work_dir = tmp_path / "repos"
    (work_dir / "stale").mkdir(parents=True)
    (work_dir / "stale" / "file.html").write_text("<html></html>")

    _manager(MockSourceControl(), work_dir).reset_work_dir()

    assert work_dir.is_dir()
    assert list(work_dir.iterdir()) == []


def test_reset_work_dir_creates_missing_directory(tmp_path: Path) -> None:
    work_dir = tmp_path / "nested" / "repos"

    _manager(MockSourceControl(), work_dir).reset_work_dir()

    assert work_dir.is_dir()


def test_checkout_all_clones_every_repository(tmp_path: Path) -> None:
    source_control = MockSourceControl()
    manager = _manager(source_control, tmp_path)
    descriptors = create_descriptors(5)

    repos = asyncio.run(manager.checkout_all(descriptors))

    assert [repo.descriptor for repo in repos] == descriptors
    assert [repo.directory for repo in repos] == [tmp_path / d.name for d in descriptors]
    assert all(repo.push_outcome.value == "unattempted" for repo in repos)
    assert source_control.call_count("clone") == 5
    assert not source_control.was_called("open")


def test_existing_directory_is_opened_not_cloned(tmp_path: Path) -> None:
    source_control = MockSourceControl()
    descriptor = create_descriptors(1)[0]
    (tmp_path / descriptor.name).mkdir()

    repo = asyncio.run(_manager(source_control, tmp_path).checkout(descriptor))

    assert repo.checkout.path == tmp_path / descriptor.name
    assert source_control.call_count("open") == 1
    assert not source_control.was_called("clone")


def test_clones_are_rate_governed(tmp_path: Path) -> None:
    sleeps: list[float] = []

    async def record(seconds: float) -> None:
        sleeps.append(seconds)

    manager = CheckoutManager(
        MockSourceControl(),
        RateGovernor(clock=lambda: 0.0, sleep=record),
        tmp_path,
        clone_delay=0.1,
    )

    asyncio.run(manager.checkout_all(create_descriptors(3)))

    assert sleeps == pytest.approx([0.1, 0.2, 0.3])


def test_one_failed_clone_fails_the_fan_out(tmp_path: Path) -> None:
    source_control = MockSourceControl()
    source_control.configure_path_error(
        "clone", "element-002", GitCommandError(["git", "clone"], 128, "not found")
    )

    with pytest.raises(GitCommandError):
        asyncio.run(_manager(source_control, tmp_path).checkout_all(create_descriptors(4)))


def test_gather_with_progress_keeps_input_order() -> None:
    async def value(n: int, delay: float) -> int:
        await asyncio.sleep(delay)
        return n

    async def run() -> list[int]:
        return await gather_with_progress(
            [value(1, 0.03), value(2, 0.0), value(3, 0.01)], "Counting..."
        )

    assert asyncio.run(run()) == [1, 2, 3]


def test_prepare_branches_from_head(tmp_path: Path) -> None:
    source_control = MockSourceControl(head="abc123")
    manager = _manager(source_control, tmp_path, branch_name="auto-cleanup")
    repo = create_working_repository("paper-input", work_dir=tmp_path)

    asyncio.run(manager.prepare(repo))

    assert [call.method for call in source_control.get_calls()] == [
        "head_commit",
        "create_branch",
        "checkout_branch",
    ]
    assert source_control.get_calls("create_branch")[0].args[1:] == ("auto-cleanup", "abc123")
    assert source_control.get_calls("checkout_branch")[0].args[1] == "auto-cleanup"


class SlowCloneSourceControl(MockSourceControl):
    """Clones of ``slow`` hang until cancelled."""

    def __init__(self, slow: str) -> None:
        super().__init__()
        self.slow = slow
        self.cancelled: list[str] = []
        self.finished: list[str] = []

    async def clone(self, url: str, path: Path) -> Checkout:
        checkout = await super().clone(url, path)
        if Path(path).name == self.slow:
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                self.cancelled.append(self.slow)
                raise
            self.finished.append(self.slow)
        return checkout


def test_failed_clone_cancels_clones_still_running(tmp_path: Path) -> None:
    source_control = SlowCloneSourceControl("element-000")
    source_control.configure_path_error(
        "clone", "element-001", GitCommandError(["git", "clone"], 128, "not found")
    )

    async def run() -> None:
        with pytest.raises(GitCommandError):
            await _manager(source_control, tmp_path).checkout_all(create_descriptors(3))
        # Nothing is left to finish after the fan-out has raised
        assert source_control.cancelled == ["element-000"]

    asyncio.run(asyncio.wait_for(run(), timeout=3))
    assert source_control.finished == []


def test_gather_with_progress_cancels_siblings_before_raising() -> None:
    unwound: list[str] = []

    async def slow() -> int:
        try:
            await asyncio.sleep(5)
        finally:
            unwound.append("slow")
        return 1

    async def fail() -> int:
        await asyncio.sleep(0.01)
        raise RuntimeError("boom")

    async def run() -> list[str]:
        with pytest.raises(RuntimeError):
            await gather_with_progress([slow(), fail()], "Cloning...")
        return list(unwound)

    assert asyncio.run(asyncio.wait_for(run(), timeout=3)) == ["slow"]
