"""Movement controls: manual steps, mode toggle, external position updates."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException

from geocache.api.dependencies import get_session
from geocache.api.routes.serializers import position_schema
from geocache.api.schemas import ControlResponse, PositionSchema
from geocache.core.enums import Direction, MovementMode
from geocache.core.errors import ModeError
from geocache.core.models import Position
from geocache.engine.session import SessionController

router = APIRouter()


class StepDirection(str, Enum):
    north = "north"
    east = "east"
    south = "south"
    west = "west"


@router.post("/move/{direction}", response_model=PositionSchema)
def move(
    direction: StepDirection,
    session: SessionController = Depends(get_session),
) -> PositionSchema:
    try:
        pos = session.step(Direction[direction.name.upper()])
    except ModeError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return position_schema(pos)


@router.post("/mode/{mode}", response_model=ControlResponse)
def set_mode(
    mode: MovementMode,
    session: SessionController = Depends(get_session),
) -> ControlResponse:
    if session.mode is mode:
        return ControlResponse(status="noop", message=f"Already in {mode.value} mode.")
    try:
        if mode is MovementMode.TRACKED:
            session.enable_tracking()
        else:
            session.disable_tracking()
    except ModeError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return ControlResponse(status="ok", message=f"Switched to {mode.value} mode.")


@router.post("/position", response_model=ControlResponse, status_code=202)
def push_position(
    body: PositionSchema,
    session: SessionController = Depends(get_session),
) -> ControlResponse:
    feed = session.feed
    if feed is None or session.mode is not MovementMode.TRACKED:
        raise HTTPException(status_code=409, detail="Tracking is not enabled.")
    if not feed.publish(Position(body.lat, body.lng)):
        raise HTTPException(status_code=409, detail="Position feed has no subscriber.")
    return ControlResponse(status="accepted", message="Position queued.")
