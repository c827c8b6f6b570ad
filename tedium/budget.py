"""Per-run cap on the number of repositories we publish to."""

from tedium.exceptions import ConfigurationError


class PushBudget:
    """
    Allows at most ``max_changes`` publishes per run.

    ``try_consume`` returns True at most ``max_changes`` times and False
    forever after, counting both outcomes. With the default of 0 every
    request is denied, which turns the run into a report-only dry run.
    """

    def __init__(self, max_changes: int = 0) -> None:
        if max_changes < 0:
            raise ConfigurationError(
                f"max_changes must be non-negative, got {max_changes}"
            )
        self.max_changes = max_changes
        self.pushed = 0
        self.denied = 0

    def try_consume(self) -> bool:
        if self.pushed < self.max_changes:
            self.pushed += 1
            return True
        self.denied += 1
        return False

    @property
    def remaining(self) -> int:
        return self.max_changes - self.pushed

    @property
    def is_dry_run(self) -> bool:
        return self.max_changes == 0

    def __repr__(self) -> str:
        return (
            f"PushBudget(max_changes={self.max_changes}, "
            f"pushed={self.pushed}, denied={self.denied})"
        )


__all__ = ["PushBudget"]
