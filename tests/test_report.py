"""
Tests for the end-of-run report.
"""

import io

import pytest

from tedium.budget import PushBudget
from tedium.element import PushOutcome
from tedium.report import BatchReporter, group_by_outcome, summary_line
from tedium.testing import create_working_repository


def _repo(name: str, outcome: PushOutcome):
    repo = create_working_repository(name)
    repo.push_outcome = outcome
    return repo


@pytest.mark.parametrize(
    "max_changes,attempts,expected",
    [
        (0, 0, "No changes needed!"),
        (5, 0, "No changes needed!"),
        (5, 3, "Successfully pushed to 3 repos."),
        (0, 4, "4 changes ready to push. Call with --max_changes=N to push them up!"),
        (1, 3, "Successfully pushed to 1 repos. 2 remain."),
    ],
)
def test_summary_line(max_changes: int, attempts: int, expected: str) -> None:
    budget = PushBudget(max_changes)
    for _ in range(attempts):
        budget.try_consume()
    assert summary_line(budget) == expected


def test_report_groups_in_fixed_order() -> None:
    out = io.StringIO()
    repos = [
        _repo("failed-el", PushOutcome.FAILED),
        _repo("pushed-el", PushOutcome.SUCCEEDED),
        _repo("denied-el", PushOutcome.DENIED),
        _repo("clean-el", PushOutcome.UNATTEMPTED),
    ]

    BatchReporter(out).report(repos)

    text = out.getvalue()
    denied = text.index("Elements that would have been pushed:")
    pushed = text.index("Elements pushed successfully:")
    failed = text.index("Elements that I tried to push that FAILED:")
    assert denied < pushed < failed
    assert text.index("denied-el") < pushed < text.index("pushed-el") < failed
    assert text.index("failed-el") > failed
    assert "clean-el" not in text


def test_report_omits_empty_sections() -> None:
    out = io.StringIO()

    BatchReporter(out).report([_repo("pushed-el", PushOutcome.SUCCEEDED)])

    assert "Elements pushed successfully:" in out.getvalue()
    assert "would have been pushed" not in out.getvalue()
    assert "FAILED" not in out.getvalue()


@pytest.mark.parametrize("repos", [None, []])
def test_report_tolerates_nothing_to_report(repos) -> None:
    out = io.StringIO()
    BatchReporter(out).report(repos)
    assert out.getvalue() == ""


def test_group_by_outcome_covers_every_outcome() -> None:
    groups = group_by_outcome([_repo("a", PushOutcome.DENIED)])
    assert set(groups) == set(PushOutcome)
    assert [repo.name for repo in groups[PushOutcome.DENIED]] == ["a"]


def test_summary_prints_and_returns_the_line() -> None:
    out = io.StringIO()
    budget = PushBudget(2)
    budget.try_consume()

    line = BatchReporter(out).summary(budget)

    assert line == "Successfully pushed to 1 repos."
    assert out.getvalue() == line + "\n"
