"""
Git helper utilities for tedium.

Runs the ``git`` command line through asyncio subprocesses so that clones of
many repositories can overlap.
"""

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path

from tedium.exceptions import GitCommandError
from tedium.logging import log_git_command, mask_sensitive_data


@dataclass(frozen=True)
class Checkout:
    """A local working copy."""

    path: Path
    remote: str = "origin"


@dataclass(frozen=True)
class Credentials:
    """Username/password pair for HTTPS remotes."""

    username: str
    password: str

    @classmethod
    def for_token(cls, token: str) -> "Credentials":
        """GitHub accepts a token as the username with ``x-oauth-basic``."""
        return cls(username=token, password="x-oauth-basic")

    def __repr__(self) -> str:
        return "Credentials(username=[REDACTED], password=[REDACTED])"


@dataclass(frozen=True)
class Author:
    """Identity used for commits made by cleanup passes."""

    name: str = "tedium"
    email: str = "tedium@users.noreply.github.com"


USERNAME_VARIABLE = "TEDIUM_GIT_USERNAME"
PASSWORD_VARIABLE = "TEDIUM_GIT_PASSWORD"

# git appends the action ("get", "store" or "erase") as the helper's argument.
CREDENTIAL_HELPER = (
    '!f() { test "$1" = get || exit 0; '
    'echo "username=$TEDIUM_GIT_USERNAME"; echo "password=$TEDIUM_GIT_PASSWORD"; }; f'
)


class GitHelper:
    """
    ``SourceControl`` implementation on top of the git CLI.

    Example:
        ```python
        from tedium.git import Credentials, GitHelper

        git = GitHelper()
        checkout = await git.clone("https://github.com/Polymer/polymer.git", Path("repos/polymer"))
        await git.create_branch(checkout, "auto-cleanup", await git.head_commit(checkout))
        await git.push(checkout, "refs/heads/auto-cleanup:refs/heads/auto-cleanup",
                       Credentials.for_token(token))
        ```
    """

    def __init__(self, git: str = "git", author: Author | None = None) -> None:
        self.git = git
        self.author = author or Author()

    async def clone(self, url: str, path: Path) -> Checkout:
        """
        Clone ``url`` into ``path``.

        Raises:
            GitCommandError: If git clone fails
        """
        await self._run(["clone", "--quiet", url, str(path)])
        return Checkout(Path(path))

    async def open(self, path: Path) -> Checkout:
        """
        Open an existing working copy.

        Raises:
            GitCommandError: If ``path`` is not inside a git work tree
        """
        await self._run(["rev-parse", "--is-inside-work-tree"], cwd=path)
        return Checkout(Path(path))

    async def head_commit(self, checkout: Checkout) -> str:
        """Get the OID of HEAD."""
        out = await self._run(["rev-parse", "HEAD"], cwd=checkout.path)
        return out.strip()

    async def create_branch(self, checkout: Checkout, name: str, commit: str) -> None:
        """Create branch ``name`` at ``commit`` without switching to it."""
        await self._run(["branch", name, commit], cwd=checkout.path)

    async def checkout_branch(self, checkout: Checkout, name: str) -> None:
        await self._run(["checkout", "--quiet", name], cwd=checkout.path)

    async def push(
        self, checkout: Checkout, refspec: str, credentials: Credentials
    ) -> None:
        """
        Push ``refspec`` to the checkout's remote.

        The credentials reach git through a one-off credential helper that
        reads them from the child's environment, so they never show up in
        the command line or the repository's config.

        Raises:
            GitCommandError: If git push fails
        """
        await self._run(
            [
                "-c", "credential.helper=",
                "-c", f"credential.helper={CREDENTIAL_HELPER}",
                "push", "--quiet", checkout.remote, refspec,
            ],
            cwd=checkout.path,
            env={
                USERNAME_VARIABLE: credentials.username,
                PASSWORD_VARIABLE: credentials.password,
            },
        )

    async def has_changes(self, checkout: Checkout) -> bool:
        """True when the work tree has staged, unstaged or untracked changes."""
        out = await self._run(["status", "--porcelain"], cwd=checkout.path)
        return bool(out.strip())

    async def commit_all(self, checkout: Checkout, message: str) -> str:
        """Stage everything, commit it and return the new HEAD."""
        await self._run(["add", "--all"], cwd=checkout.path)
        await self._run(
            [
                "-c", f"user.name={self.author.name}",
                "-c", f"user.email={self.author.email}",
                "commit", "--quiet", "-m", message,
            ],
            cwd=checkout.path,
        )
        return await self.head_commit(checkout)

    async def _run(
        self,
        args: list[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> str:
        cmd = [self.git, *args]
        log_git_command(cmd, str(cwd) if cwd else None)

        child_env = {**os.environ, **(env or {})}
        # Never block on a credential prompt
        child_env["GIT_TERMINAL_PROMPT"] = "0"

        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=cwd,
            env=child_env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
            await proc.wait()
            raise
        if proc.returncode != 0:
            raise GitCommandError(
                [mask_sensitive_data(part) for part in cmd],
                proc.returncode if proc.returncode is not None else -1,
                mask_sensitive_data(stderr.decode("utf-8", errors="replace")),
            )
        return stdout.decode("utf-8", errors="replace")


__all__ = [
    "Author",
    "Checkout",
    "Credentials",
    "GitHelper",
]
