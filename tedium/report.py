"""End-of-run report of what was pushed, denied and failed."""

import sys
from collections.abc import Iterable
from typing import TextIO

from tedium.budget import PushBudget
from tedium.element import PushOutcome, WorkingRepository

REPORT_SECTIONS = [
    (PushOutcome.DENIED, "Elements that would have been pushed:"),
    (PushOutcome.SUCCEEDED, "Elements pushed successfully:"),
    (PushOutcome.FAILED, "Elements that I tried to push that FAILED:"),
]


def group_by_outcome(
    repos: Iterable[WorkingRepository],
) -> dict[PushOutcome, list[WorkingRepository]]:
    groups: dict[PushOutcome, list[WorkingRepository]] = {outcome: [] for outcome in PushOutcome}
    for repo in repos:
        groups[repo.push_outcome].append(repo)
    return groups


def summary_line(budget: PushBudget) -> str:
    """Pick the closing sentence for a finished run."""
    if budget.pushed == 0 and budget.denied == 0:
        return "No changes needed!"
    if budget.denied == 0:
        return f"Successfully pushed to {budget.pushed} repos."
    if budget.is_dry_run:
        return (
            f"{budget.denied} changes ready to push. "
            "Call with --max_changes=N to push them up!"
        )
    return f"Successfully pushed to {budget.pushed} repos. {budget.denied} remain."


class BatchReporter:
    """Prints grouped outcomes. Safe to call on the error path."""

    def __init__(self, out: TextIO | None = None) -> None:
        self._out = out

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def report(self, repos: Iterable[WorkingRepository] | None) -> None:
        if not repos:
            return
        groups = group_by_outcome(repos)
        for outcome, header in REPORT_SECTIONS:
            members = groups[outcome]
            if not members:
                continue
            print("\n" + header, file=self.out)
            for repo in members:
                print(f"    {repo.directory}", file=self.out)

    def summary(self, budget: PushBudget) -> str:
        line = summary_line(budget)
        print(line, file=self.out)
        return line


__all__ = ["BatchReporter", "REPORT_SECTIONS", "group_by_outcome", "summary_line"]
