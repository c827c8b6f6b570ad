"""Command-line entry point."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Iterable

from tedium.analysis import ImportGraphAnalyzer
from tedium.batch import Batch
from tedium.cache import ResponseCache
from tedium.config import Settings, load_token, parse_max_changes
from tedium.exceptions import ConfigurationError
from tedium.git import Credentials, GitHelper
from tedium.github import AsyncGitHubClient
from tedium.hosting import GitHubHostingService
from tedium.interfaces import CleanupPass
from tedium.logging import configure_logging


class _ArgumentParser(argparse.ArgumentParser):
    """Raises instead of exiting so bad flags share the startup-error path."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise ConfigurationError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="tedium",
        description="tedium is a friendly bot for doing mass changes to Polymer repos!",
    )
    parser.add_argument(
        "-c",
        "--max_changes",
        default="0",
        metavar="N",
        help="The maximum number of repos to push. Default: 0",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every git command and HTTP request.",
    )
    return parser


async def run(
    settings: Settings, token: str, passes: Iterable[CleanupPass] = ()
) -> int:
    """Wire the real collaborators together and execute one batch."""
    cache = ResponseCache(settings.cache_path) if settings.cache_path else None
    async with AsyncGitHubClient(token, base_url=settings.base_url, cache=cache) as client:
        hosting = GitHubHostingService(client)
        batch = Batch(
            settings,
            lister=hosting,
            hosting=hosting,
            source_control=GitHelper(),
            analyzer=ImportGraphAnalyzer(),
            credentials=Credentials.for_token(token),
            passes=passes,
        )
        return await batch.execute()


def main(argv: list[str] | None = None, passes: Iterable[CleanupPass] = ()) -> int:
    """
    Parse arguments, load the token and run the batch.

    Returns:
        0 on a normal run (including dry runs and "no changes needed"),
        1 on any startup or batch error.
    """
    try:
        args = build_parser().parse_args(argv)
        settings = Settings.from_env(max_changes=parse_max_changes(args.max_changes))
        token = load_token(settings.token_path)
    except ConfigurationError as e:
        print(e.message, file=sys.stderr)
        return 1

    if args.verbose:
        configure_logging(level=logging.DEBUG)
    else:
        configure_logging(level=logging.INFO, http_level=logging.WARNING)

    return asyncio.run(run(settings, token, passes))


__all__ = ["build_parser", "main", "run"]
