"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class Direction(IntEnum):
    """Cardinal step directions for manual movement."""

    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3


@unique
class MovementMode(str, Enum):
    """Mutually exclusive ways the player position is driven."""

    MANUAL = "manual"     # explicit directional steps
    TRACKED = "tracked"   # continuous external position feed


@unique
class EventCategory(str, Enum):
    """Categories for entries in the game event log."""

    MOVE = "move"
    SPAWN = "spawn"
    COLLECT = "collect"
    DEPOSIT = "deposit"
    MODE = "mode"
    PERSIST = "persist"
    ERROR = "error"
