"""Core data models and world representation."""

from geocache.core.cache import Cache, CacheMemento
from geocache.core.enums import Direction, EventCategory, MovementMode
from geocache.core.errors import (
    ConfigurationError,
    CorruptSnapshot,
    GeocacheError,
    InvariantViolation,
    ModeError,
    PersistenceError,
    TokenNotFound,
    TokenNotHeld,
    TooFar,
    UnknownCache,
)
from geocache.core.grid import Board
from geocache.core.models import Cell, Position
from geocache.core.world_state import WorldState

__all__ = [
    "Board",
    "Cache",
    "CacheMemento",
    "Cell",
    "ConfigurationError",
    "CorruptSnapshot",
    "Direction",
    "EventCategory",
    "GeocacheError",
    "InvariantViolation",
    "ModeError",
    "MovementMode",
    "PersistenceError",
    "Position",
    "TokenNotFound",
    "TokenNotHeld",
    "TooFar",
    "UnknownCache",
    "WorldState",
]
