"""Per-repository records flowing through a batch run."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tedium.exceptions import OutcomeAlreadySetError

if TYPE_CHECKING:
    from tedium.git import Checkout


@dataclass(frozen=True)
class RepositoryDescriptor:
    """A repository as discovered on the hosting service."""

    name: str
    owner: str
    clone_url: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class PushOutcome(str, Enum):
    """What happened when we tried to publish a repository's changes."""

    UNATTEMPTED = "unattempted"
    DENIED = "denied"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(eq=False)
class WorkingRepository:
    """
    One repository under processing (an "element").

    ``checkout`` is owned exclusively by this record. ``analysis`` points at
    the single analysis result shared by every record in the run.
    """

    directory: Path
    descriptor: RepositoryDescriptor
    checkout: "Checkout"
    analysis: Any = None
    dirty: bool = False
    needs_review: bool = False
    _outcome: PushOutcome = field(default=PushOutcome.UNATTEMPTED, repr=False)

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def push_outcome(self) -> PushOutcome:
        return self._outcome

    @push_outcome.setter
    def push_outcome(self, outcome: PushOutcome) -> None:
        if self._outcome is not PushOutcome.UNATTEMPTED:
            raise OutcomeAlreadySetError(
                str(self.directory), self._outcome.value, PushOutcome(outcome).value
            )
        if outcome is PushOutcome.UNATTEMPTED:
            return
        self._outcome = PushOutcome(outcome)


def working_directory(work_dir: str | Path, descriptor: RepositoryDescriptor) -> Path:
    """Local path a repository is checked out to."""
    return Path(work_dir) / descriptor.name


__all__ = [
    "RepositoryDescriptor",
    "PushOutcome",
    "WorkingRepository",
    "working_directory",
]
