"""Repository and user data models."""

from dataclasses import dataclass


@dataclass
class User:
    """A GitHub account."""

    login: str
    id: int
    type: str  # "User" or "Organization"


@dataclass
class Repository:
    """Repository information."""

    id: int
    name: str
    full_name: str
    owner: User
    clone_url: str
    default_branch: str
    private: bool
    archived: bool
    fork: bool
