"""Pull request and issue data models."""

from dataclasses import dataclass


@dataclass
class PullRequest:
    """Pull request information."""

    number: int
    title: str
    state: str  # "open" or "closed"
    head: str
    base: str
    html_url: str


@dataclass
class Issue:
    """Issue information, as returned when editing a pull request's issue."""

    number: int
    title: str
    state: str
    assignees: list[str]
    labels: list[str]
