"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Geometry ---

class PositionSchema(BaseModel):
    lat: float
    lng: float


class CellSchema(BaseModel):
    i: int
    j: int


class BoundsSchema(BaseModel):
    lat_min: float
    lng_min: float
    lat_max: float
    lng_max: float


# --- Caches ---

class CacheSchema(BaseModel):
    cell: CellSchema
    bounds: BoundsSchema
    tokens: list[str] = Field(default_factory=list)
    distance: float = Field(description="Distance from the player's cell, in cells")
    in_reach: bool


class NearbyCellSchema(BaseModel):
    cell: CellSchema
    bounds: BoundsSchema
    cache: list[str] | None = Field(None, description="Token ids if the cell hosts a cache")


class NearbyResponse(BaseModel):
    origin: CellSchema
    radius: int
    cells: list[NearbyCellSchema]


# --- Token transfer ---

class TokenRequest(BaseModel):
    token_id: str


class TransferResponse(BaseModel):
    token_id: str
    cell: CellSchema
    wallet: list[str]
    cache: list[str]


# --- State ---

class EventSchema(BaseModel):
    seq: int
    category: str
    message: str
    cell: CellSchema | None = None


class SessionStateResponse(BaseModel):
    position: PositionSchema
    cell: CellSchema
    mode: str
    wallet: list[str]
    cache_count: int
    path: list[PositionSchema] = Field(default_factory=list)
    last_feed_error: str | None = None


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str


# --- Config ---

class GameConfigResponse(BaseModel):
    origin_lat: float
    origin_lng: float
    tile_width: float
    visibility_radius: int
    spawn_probability: float
    max_tokens: int
    interaction_radius: float
    autosave: bool
