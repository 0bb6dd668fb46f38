"""
Error taxonomy for the simulation core.

Validation problems and failed lookups are raised to the caller before any
state is touched. Data-integrity problems found in catalog entries are logged
and skipped instead, so one malformed record never breaks a whole encounter.
"""

from typing import Any

from catchery import log_warning


class GameException(Exception):
    """Base class for every error raised by the simulation core."""


class ValidationError(GameException):
    """
    A request the core refuses to carry out.

    Raised for unknown recipes, unmet level requirements, insufficient
    materials, missing or duplicate battles, unknown or cooling-down skills.
    No state is mutated when this is raised.
    """


class NotFoundError(GameException):
    """A lookup that found nothing, even after every documented fallback."""


class BoundsError(GameException, IndexError):
    """A grid coordinate outside the dungeon."""

    def __init__(self, x: int, y: int, size: int) -> None:
        super().__init__(
            f"Coordinate ({x}, {y}) is outside the {size}x{size} dungeon grid."
        )
        self.x = x
        self.y = y
        self.size = size


class CatalogLoadError(GameException):
    """A catalog file that cannot be read or has the wrong top-level shape."""


def report_data_integrity(message: str, context: dict[str, Any] | None = None) -> None:
    """
    Logs a data-integrity warning for a bad catalog reference.

    Args:
        message (str):
            What was wrong and what was done about it.
        context (dict[str, Any] | None):
            Identifiers that help locate the offending entry.

    """
    log_warning(message, context or {})
