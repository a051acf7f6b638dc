"""GET /api/v1/config: expose game configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from geocache.api.dependencies import get_session
from geocache.api.schemas import GameConfigResponse
from geocache.engine.session import SessionController

router = APIRouter()


@router.get("/config", response_model=GameConfigResponse)
def get_config(session: SessionController = Depends(get_session)) -> GameConfigResponse:
    cfg = session.config
    return GameConfigResponse(
        origin_lat=cfg.origin_lat,
        origin_lng=cfg.origin_lng,
        tile_width=cfg.tile_width,
        visibility_radius=cfg.visibility_radius,
        spawn_probability=cfg.spawn_probability,
        max_tokens=cfg.max_tokens,
        interaction_radius=cfg.interaction_radius,
        autosave=cfg.autosave,
    )
