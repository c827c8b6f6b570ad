"""tedium exception classes."""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tedium.element import WorkingRepository


class TediumError(Exception):
    """Base exception for all tedium errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(TediumError):
    """Raised when configuration is invalid or missing (startup-fatal)."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class AuthenticationError(TediumError):
    """Raised when the hosting service rejects the token."""

    pass


class AuthorizationError(TediumError):
    """Raised when access is denied."""

    pass


class NotFoundError(TediumError):
    """Raised when a resource is not found."""

    pass


class RateLimitedError(TediumError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ValidationError(TediumError):
    """Raised on validation errors (422 and other client errors)."""

    pass


class ServerError(TediumError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class GitCommandError(TediumError):
    """Raised when a git subprocess exits with a non-zero status."""

    def __init__(self, command: list[str], returncode: int, stderr: str) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            "GIT_ERROR",
            f"{' '.join(command)} exited with {returncode}: {stderr.strip()}",
        )


class OutcomeAlreadySetError(TediumError):
    """Raised when a repository's push outcome is assigned twice."""

    def __init__(self, directory: str, current: str, requested: str) -> None:
        super().__init__(
            "OUTCOME_ALREADY_SET",
            f"{directory}: push outcome is already {current}, cannot become {requested}",
        )


class ErrorKind(str, Enum):
    """Batch phase in which a repository failed."""

    CHECKOUT = "checkout"
    TRANSFORM = "transform"
    PUBLISH = "publish"


class RepositoryError(TediumError):
    """
    A failure tied to a single repository.

    Carries the phase it happened in, the repository it happened to and the
    original exception, so the orchestrator can decide per kind whether to
    keep going or abort the batch.
    """

    def __init__(
        self,
        kind: ErrorKind,
        repository: "WorkingRepository",
        cause: BaseException,
    ) -> None:
        self.kind = kind
        self.repository = repository
        self.cause = cause
        self.code = f"{kind.value.upper()}_ERROR"
        self.message = f"Error updating {repository.directory}:\n{cause}"
        self.request_id = None
        Exception.__init__(self, self.message)


__all__ = [
    "TediumError",
    "ConfigurationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "GitCommandError",
    "OutcomeAlreadySetError",
    "ErrorKind",
    "RepositoryError",
]
