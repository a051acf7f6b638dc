"""Shared conversions from engine objects to response schemas."""

from __future__ import annotations

from geocache.api.schemas import BoundsSchema, CellSchema, EventSchema, PositionSchema
from geocache.core.grid import Board
from geocache.core.models import Cell, Position
from geocache.utils.event_log import GameEvent


def cell_schema(cell: Cell) -> CellSchema:
    return CellSchema(i=cell.i, j=cell.j)


def position_schema(pos: Position) -> PositionSchema:
    return PositionSchema(lat=pos.lat, lng=pos.lng)


def bounds_schema(board: Board, cell: Cell) -> BoundsSchema:
    lat_min, lng_min, lat_max, lng_max = board.bounds_of(cell)
    return BoundsSchema(lat_min=lat_min, lng_min=lng_min, lat_max=lat_max, lng_max=lng_max)


def event_schema(event: GameEvent) -> EventSchema:
    return EventSchema(
        seq=event.seq,
        category=event.category.value,
        message=event.message,
        cell=CellSchema(i=event.cell[0], j=event.cell[1]) if event.cell else None,
    )
