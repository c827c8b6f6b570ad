"""
The main flow of the bot.

Discover repositories, clone them all concurrently, analyze everything once,
then one repository at a time: create the working branch, let the cleanup
passes run, and publish whatever changed (if the push budget allows it).

Working copies are left in the work dir after a run, which is handy for
examining what would have been pushed or for investigating failures. The
directory is wiped at the start of every run, so keep nothing there.
"""

from collections.abc import Iterable

from tedium.analysis import AnalysisBridge
from tedium.budget import PushBudget
from tedium.checkout import CheckoutManager
from tedium.config import Settings
from tedium.discovery import RepositoryDiscovery
from tedium.element import WorkingRepository
from tedium.exceptions import ErrorKind, RepositoryError
from tedium.git import Credentials
from tedium.interfaces import (
    Analyzer,
    CleanupPass,
    PullRequestPublisher,
    RepositoryLister,
    SourceControl,
)
from tedium.logging import get_logger
from tedium.publish import Publisher
from tedium.rate import RateGovernor
from tedium.report import BatchReporter
from tedium.transform import CleanupPipeline, TransformRunner

logger = get_logger("batch")


class Batch:
    """One run over every discovered repository."""

    def __init__(
        self,
        settings: Settings,
        lister: RepositoryLister,
        hosting: PullRequestPublisher,
        source_control: SourceControl,
        analyzer: Analyzer,
        credentials: Credentials,
        passes: Iterable[CleanupPass] = (),
        rate: RateGovernor | None = None,
        reporter: BatchReporter | None = None,
    ) -> None:
        self.settings = settings
        self.hosting = hosting
        self.source_control = source_control
        self.credentials = credentials
        self.rate = rate or RateGovernor()
        self.reporter = reporter or BatchReporter()
        self.budget = PushBudget(settings.max_changes)

        self.discovery = RepositoryDiscovery(
            lister,
            root_owner=settings.root_owner,
            root_name=settings.root_name,
            organization=settings.organization,
            page_size=settings.page_size,
        )
        self.checkouts = CheckoutManager(
            source_control,
            self.rate,
            settings.work_dir,
            branch_name=settings.branch_name,
            clone_delay=settings.clone_delay,
        )
        self.bridge = AnalysisBridge(analyzer, settings.work_dir, settings.entry_point)
        self.runner = TransformRunner(
            CleanupPipeline(passes, source_control, settings.commit_message),
            excluded_dirs=settings.excluded_dirs,
        )

    def make_publisher(self, assignee: str) -> Publisher:
        return Publisher(
            self.source_control,
            self.hosting,
            self.budget,
            self.rate,
            self.credentials,
            assignee=assignee,
            branch_name=self.settings.branch_name,
            base_branch=self.settings.base_branch,
            pr_title=self.settings.pr_title,
            pr_label=self.settings.pr_label,
            pull_request_delay=self.settings.pull_request_delay,
        )

    async def run(self, repos: list[WorkingRepository]) -> list[RepositoryError]:
        """
        Run the batch, appending every checked-out repository to ``repos``.

        ``repos`` is supplied by the caller so that whatever got done before
        a fatal error can still be reported.

        Returns:
            Publish failures that were recorded and skipped over. Only
            non-empty when ``continue_on_publish_failure`` is set.

        Raises:
            RepositoryError: When a repository's transform or publish step
                fails (publish only without ``continue_on_publish_failure``).
            Exception: Discovery, checkout and analysis failures propagate
                unchanged; they abort the whole batch.
        """
        self.checkouts.reset_work_dir()

        assignee = await self.hosting.authenticated_login()
        descriptors = await self.discovery.discover()

        repos.extend(await self.checkouts.checkout_all(descriptors))

        await self.bridge.analyze(repos)
        repos.sort(key=lambda repo: str(repo.directory))

        publisher = self.make_publisher(assignee)
        skipped: list[RepositoryError] = []
        total = len(repos)
        for index, repo in enumerate(repos, start=1):
            if self.runner.is_excluded(repo):
                logger.info(f"Applying transforms... {index}/{total} (skipped {repo.directory})")
                continue
            try:
                await self.process(repo, publisher)
            except RepositoryError as e:
                if e.kind is ErrorKind.PUBLISH and self.settings.continue_on_publish_failure:
                    logger.error(e.message)
                    skipped.append(e)
                    continue
                raise
            logger.info(f"Applying transforms... {index}/{total}")
        return skipped

    async def process(self, repo: WorkingRepository, publisher: Publisher) -> None:
        try:
            await self.checkouts.prepare(repo)
        except Exception as e:
            raise RepositoryError(ErrorKind.CHECKOUT, repo, e) from e
        await self.rate.wait(self.settings.transform_delay)
        await self.runner.run(repo)
        await publisher.publish(repo)

    async def execute(self) -> int:
        """
        Run, report, and return the process exit code.

        The report is printed on the failure path too, as far as the batch
        got. Exit code is 0 on a clean run, 1 otherwise.
        """
        repos: list[WorkingRepository] = []
        try:
            skipped = await self.run(repos)
        except Exception:
            try:
                self.reporter.report(repos)
            except Exception:
                # We may not have gotten far enough to report anything.
                logger.debug("could not report on a partial run", exc_info=True)
            logger.error("Batch aborted", exc_info=True)
            return 1

        self.reporter.report(repos)
        self.reporter.summary(self.budget)
        return 1 if skipped else 0


__all__ = ["Batch"]
