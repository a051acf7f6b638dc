"""Exception hierarchy for the geocache engine.

Every error here is recoverable: callers either absorb it (keeping the last
good state) or surface it to the player.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from geocache.core.models import Cell


class GeocacheError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(GeocacheError):
    """Raised when configuration values are invalid."""

    def __init__(self, param_name: str, reason: str | None = None) -> None:
        if reason:
            message = f"Invalid configuration for '{param_name}': {reason}"
            self.param_name: str | None = param_name
        else:
            message = param_name
            self.param_name = None
        super().__init__(message)


class CorruptSnapshot(GeocacheError):
    """A persisted cache or slot payload could not be decoded."""


class TokenNotFound(GeocacheError):
    """The cache does not hold the requested token."""

    def __init__(self, cell: Cell, token_id: str) -> None:
        self.cell = cell
        self.token_id = token_id
        super().__init__(f"Token {token_id!r} is not in cache {cell.key}")


class TokenNotHeld(GeocacheError):
    """The wallet does not hold the requested token."""

    def __init__(self, token_id: str) -> None:
        self.token_id = token_id
        super().__init__(f"Token {token_id!r} is not in the wallet")


class UnknownCache(GeocacheError):
    """No cache exists for the requested cell."""

    def __init__(self, cell: Cell) -> None:
        self.cell = cell
        super().__init__(f"No cache at cell {cell.key}")


class TooFar(GeocacheError):
    """The player is outside the interaction radius of a cache."""

    def __init__(self, cell: Cell, distance: float, limit: float) -> None:
        self.cell = cell
        self.distance = distance
        self.limit = limit
        super().__init__(
            f"Cache {cell.key} is {distance:.2f} cells away (limit {limit:.2f})"
        )


class ModeError(GeocacheError):
    """The operation is not allowed in the current movement mode."""


class PersistenceError(GeocacheError):
    """Reading or writing a storage slot failed."""


class InvariantViolation(GeocacheError):
    """A token is owned by more than one container."""
