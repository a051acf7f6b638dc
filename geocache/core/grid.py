"""Board: continuous positions to canonical grid cells."""

from __future__ import annotations

import math

from geocache.core.errors import ConfigurationError
from geocache.core.models import Cell, Position


class Board:
    """Infinite square grid of ``tile_width`` cells.

    Holds a memo of canonical ``Cell`` instances so that each index pair has
    exactly one in-memory representation. The memo is identity only; it
    carries no gameplay state.
    """

    __slots__ = ("tile_width", "visibility_radius", "_known_cells")

    def __init__(self, tile_width: float, visibility_radius: int) -> None:
        if tile_width <= 0:
            raise ConfigurationError("tile_width", "must be positive")
        if visibility_radius < 0:
            raise ConfigurationError("visibility_radius", "must be >= 0")
        self.tile_width = tile_width
        self.visibility_radius = visibility_radius
        self._known_cells: dict[tuple[int, int], Cell] = {}

    # -- canonicalization --

    def canonical(self, i: int, j: int) -> Cell:
        """Return the canonical cell for ``(i, j)``, creating it on first use."""
        key = (i, j)
        cell = self._known_cells.get(key)
        if cell is None:
            cell = Cell(i, j)
            self._known_cells[key] = cell
        return cell

    def cell_for(self, position: Position) -> Cell:
        i = math.floor(position.lat / self.tile_width)
        j = math.floor(position.lng / self.tile_width)
        return self.canonical(i, j)

    # -- geometry --

    def bounds_of(self, cell: Cell) -> tuple[float, float, float, float]:
        """Return ``(lat_min, lng_min, lat_max, lng_max)`` of *cell*."""
        lat_min = cell.i * self.tile_width
        lng_min = cell.j * self.tile_width
        return lat_min, lng_min, lat_min + self.tile_width, lng_min + self.tile_width

    def center_of(self, cell: Cell) -> Position:
        return Position(
            (cell.i + 0.5) * self.tile_width,
            (cell.j + 0.5) * self.tile_width,
        )

    def cells_near(self, position: Position) -> list[Cell]:
        """Return the square neighborhood of *position*'s cell.

        Row-major: outer loop over ``di``, inner over ``dj``, both from
        ``-r`` to ``+r`` inclusive.
        """
        origin = self.cell_for(position)
        r = self.visibility_radius
        result: list[Cell] = []
        for di in range(-r, r + 1):
            for dj in range(-r, r + 1):
                result.append(self.canonical(origin.i + di, origin.j + dj))
        return result

    @property
    def known_count(self) -> int:
        return len(self._known_cells)
