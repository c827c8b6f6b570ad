"""
Decides whether and how a transformed repository is published.

For a dirty repository:

1. Ask the push budget. A denial is recorded and nothing remote happens.
2. Push the working branch to ``master``, or, when the change needs review,
   to a remote branch of the same name as the working branch.
3. When the change needs review, open a pull request into ``master`` and
   assign it with the automation label.
"""

from tedium.budget import PushBudget
from tedium.element import PushOutcome, WorkingRepository
from tedium.exceptions import ErrorKind, RepositoryError
from tedium.git import Credentials
from tedium.interfaces import PullRequestPublisher, SourceControl
from tedium.logging import get_logger
from tedium.rate import RateGovernor

logger = get_logger("publish")


class Publisher:
    """Runs the publish state machine for one repository at a time."""

    def __init__(
        self,
        source_control: SourceControl,
        hosting: PullRequestPublisher,
        budget: PushBudget,
        rate: RateGovernor,
        credentials: Credentials,
        assignee: str,
        branch_name: str = "auto-cleanup",
        base_branch: str = "master",
        pr_title: str = "Automatic cleanup!",
        pr_label: str = "autogenerated",
        pull_request_delay: float = 5.0,
    ) -> None:
        self.source_control = source_control
        self.hosting = hosting
        self.budget = budget
        self.rate = rate
        self.credentials = credentials
        self.assignee = assignee
        self.branch_name = branch_name
        self.base_branch = base_branch
        self.pr_title = pr_title
        self.pr_label = pr_label
        self.pull_request_delay = pull_request_delay

    def target_branch(self, repo: WorkingRepository) -> str:
        return self.branch_name if repo.needs_review else self.base_branch

    async def publish(self, repo: WorkingRepository) -> PushOutcome:
        """
        Publish ``repo`` if it is dirty and the budget allows it.

        Returns:
            The repository's push outcome afterwards.

        Raises:
            RepositoryError: When the push or the pull request fails. The
                outcome is recorded as FAILED first.
        """
        if not repo.dirty:
            return repo.push_outcome

        if not self.budget.try_consume():
            repo.push_outcome = PushOutcome.DENIED
            logger.debug(f"{repo.directory}: push denied by budget")
            return repo.push_outcome

        try:
            await self.push_branch(repo, self.target_branch(repo))
            if repo.needs_review:
                await self.create_pull_request(repo)
        except Exception as e:
            repo.push_outcome = PushOutcome.FAILED
            raise RepositoryError(ErrorKind.PUBLISH, repo, e) from e

        repo.push_outcome = PushOutcome.SUCCEEDED
        logger.info(
            f"{repo.directory}: pushed to {self.target_branch(repo)}"
            f" ({self.budget.remaining} pushes left)"
        )
        return repo.push_outcome

    async def push_branch(self, repo: WorkingRepository, remote_branch: str) -> None:
        refspec = f"refs/heads/{self.branch_name}:refs/heads/{remote_branch}"
        await self.source_control.push(repo.checkout, refspec, self.credentials)

    async def create_pull_request(self, repo: WorkingRepository) -> int:
        owner = repo.descriptor.owner
        name = repo.descriptor.name

        await self.rate.wait(self.pull_request_delay)
        number = await self.hosting.create_pull_request(
            owner, name, title=self.pr_title, head=self.branch_name, base=self.base_branch
        )

        await self.rate.wait(self.pull_request_delay)
        await self.hosting.assign_and_label(
            owner, name, number, assignee=self.assignee, labels=[self.pr_label]
        )
        return number


__all__ = ["Publisher"]
