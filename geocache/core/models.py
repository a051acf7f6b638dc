"""Core data models: Position, Cell."""

from __future__ import annotations

import math
from dataclasses import dataclass

from geocache.core.enums import Direction


@dataclass(frozen=True, slots=True)
class Position:
    """Immutable continuous coordinate (latitude-like, longitude-like)."""

    lat: float = 0.0
    lng: float = 0.0

    def offset(self, dlat: float, dlng: float) -> Position:
        return Position(self.lat + dlat, self.lng + dlng)

    def __repr__(self) -> str:
        return f"({self.lat:.6f}, {self.lng:.6f})"


@dataclass(frozen=True, slots=True)
class Cell:
    """Discrete grid tile identified by integer indices.

    Instances are canonicalized by ``Board``; compare with ``is`` or use as
    dict keys.
    """

    i: int
    j: int

    @property
    def key(self) -> str:
        """String form used for storage keys and hash inputs."""
        return f"{self.i},{self.j}"

    @classmethod
    def parse_key(cls, key: str) -> tuple[int, int]:
        """Split an ``"i,j"`` key into its index pair. Raises ``ValueError``."""
        left, sep, right = key.partition(",")
        if not sep:
            raise ValueError(f"malformed cell key {key!r}")
        return int(left), int(right)

    def distance(self, other: Cell) -> float:
        """Euclidean distance in cell units."""
        return math.hypot(self.i - other.i, self.j - other.j)

    def __repr__(self) -> str:
        return f"Cell({self.i}, {self.j})"


# Step offsets in (dlat, dlng) cell units, keyed by Direction
DIRECTION_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.NORTH: (1, 0),
    Direction.EAST: (0, 1),
    Direction.SOUTH: (-1, 0),
    Direction.WEST: (0, -1),
}
