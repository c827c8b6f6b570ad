"""tedium hosting-service type definitions."""

from tedium.types.pulls import Issue, PullRequest
from tedium.types.repos import Repository, User

__all__ = [
    # Repository types
    "Repository",
    "User",
    # Pull request types
    "PullRequest",
    "Issue",
]
