"""
Run configuration for tedium.

Settings come from dataclass defaults, optionally overridden by environment
variables (``Settings.from_env``) and finally by command-line flags.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from tedium.exceptions import ConfigurationError

DEFAULT_TOKEN_FILE = "token"

TOKEN_HELP = """
You need to create a github token and place it in a file named 'token'.
The token only needs the 'public repos' permission.

Generate a token here:   https://github.com/settings/tokens
"""

# Directory names (relative to the work dir) that are never transformed.
DEFAULT_EXCLUDED_DIRS = frozenset(
    {
        "style-guide",
        "test-all",
        "ContributionGuide",
        "polymer",
        # Pushes to this one fail with an unexplained 403
        "paper-listbox",
    }
)


@dataclass
class Settings:
    """Everything a batch run needs to know besides the token."""

    work_dir: Path = Path("repos")
    token_path: Path = Path(DEFAULT_TOKEN_FILE)
    cache_path: Path | None = Path(".github-cachedb")
    base_url: str = "https://api.github.com"

    root_owner: str = "Polymer"
    root_name: str = "polymer"
    organization: str = "PolymerElements"
    page_size: int = 100

    branch_name: str = "auto-cleanup"
    base_branch: str = "master"
    pr_title: str = "Automatic cleanup!"
    pr_label: str = "autogenerated"
    commit_message: str = "Automatic cleanup!"

    # Seconds between rate-governed calls of each kind
    clone_delay: float = 0.1
    pull_request_delay: float = 5.0
    transform_delay: float = 0.0

    max_changes: int = 0
    excluded_dirs: frozenset[str] = field(default_factory=lambda: DEFAULT_EXCLUDED_DIRS)
    continue_on_publish_failure: bool = False

    def __post_init__(self) -> None:
        self.work_dir = Path(self.work_dir)
        self.token_path = Path(self.token_path)
        if self.cache_path is not None:
            self.cache_path = Path(self.cache_path)
        if self.max_changes < 0:
            raise ConfigurationError(
                f"invalid max changes, expected a non-negative integer: {self.max_changes}"
            )
        if self.page_size <= 0:
            raise ConfigurationError(f"page size must be positive: {self.page_size}")

    @property
    def entry_point(self) -> Path:
        """File the analyzer starts from: the root repository's main import."""
        return self.work_dir / self.root_name / f"{self.root_name}.html"

    @classmethod
    def from_env(cls, **overrides: object) -> "Settings":
        """
        Create settings from environment variables.

        Environment variables:
            TEDIUM_WORK_DIR: Working directory for clones (optional, default: repos)
            TEDIUM_TOKEN_FILE: Path of the token file (optional, default: token)
            TEDIUM_CACHE_DB: Path of the response cache (optional, default: .github-cachedb)
            TEDIUM_GITHUB_URL: API base URL (optional, default: https://api.github.com)
            TEDIUM_ORG: Organization to discover (optional, default: PolymerElements)

        Keyword arguments win over the environment.
        """
        values: dict[str, object] = {}
        env_map = {
            "TEDIUM_WORK_DIR": "work_dir",
            "TEDIUM_TOKEN_FILE": "token_path",
            "TEDIUM_CACHE_DB": "cache_path",
            "TEDIUM_GITHUB_URL": "base_url",
            "TEDIUM_ORG": "organization",
        }
        for var, name in env_map.items():
            value = os.environ.get(var)
            if value:
                values[name] = value
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]


def load_token(path: str | Path = DEFAULT_TOKEN_FILE) -> str:
    """
    Read the hosting-service token from ``path``.

    Raises:
        ConfigurationError: If the file is missing, unreadable or empty. The
            message carries instructions for creating a token.
    """
    try:
        token = Path(path).read_text(encoding="utf-8").strip()
    except OSError as e:
        raise ConfigurationError(TOKEN_HELP) from e
    if not token:
        raise ConfigurationError(TOKEN_HELP)
    return token


def parse_max_changes(value: str) -> int:
    """Parse a ``--max_changes`` value; empty means 0."""
    if not value:
        return 0
    if re.fullmatch(r"[0-9]+", value):
        return int(value)
    raise ConfigurationError(f"invalid max changes, expected an integer: {value}")


__all__ = [
    "Settings",
    "DEFAULT_EXCLUDED_DIRS",
    "DEFAULT_TOKEN_FILE",
    "TOKEN_HELP",
    "load_token",
    "parse_max_changes",
]
