"""GET /api/v1/state, /cells/nearby, /events: data polled by the UI."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from geocache.api.dependencies import get_session
from geocache.api.routes.serializers import bounds_schema, cell_schema, event_schema, position_schema
from geocache.api.schemas import EventSchema, NearbyCellSchema, NearbyResponse, SessionStateResponse
from geocache.engine.session import SessionController

router = APIRouter()


@router.get("/state", response_model=SessionStateResponse)
def get_state(
    include_path: bool = Query(False, description="Include the full movement history"),
    session: SessionController = Depends(get_session),
) -> SessionStateResponse:
    status = session.status()
    return SessionStateResponse(
        position=position_schema(status.position),
        cell=cell_schema(status.cell),
        mode=status.mode.value,
        wallet=list(session.world.wallet),
        cache_count=status.cache_count,
        path=[position_schema(p) for p in session.path] if include_path else [],
        last_feed_error=status.last_feed_error,
    )


@router.get("/cells/nearby", response_model=NearbyResponse)
def get_nearby(session: SessionController = Depends(get_session)) -> NearbyResponse:
    board = session.board
    position = session.position
    cells = []
    for cell in board.cells_near(position):
        cache = session.world.get(cell)
        cells.append(NearbyCellSchema(
            cell=cell_schema(cell),
            bounds=bounds_schema(board, cell),
            cache=list(cache.tokens) if cache is not None else None,
        ))
    return NearbyResponse(
        origin=cell_schema(board.cell_for(position)),
        radius=board.visibility_radius,
        cells=cells,
    )


@router.get("/events", response_model=list[EventSchema])
def get_events(
    since: int | None = Query(None, ge=0, description="Only events with seq >= since"),
    limit: int = Query(50, ge=1, le=500),
    session: SessionController = Depends(get_session),
) -> list[EventSchema]:
    events = session.events.since(since) if since is not None else session.events.latest(limit)
    return [event_schema(e) for e in events[-limit:]]
