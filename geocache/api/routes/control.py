"""POST /api/v1/control/{action}: save, load, reset."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException

from geocache.api.dependencies import get_session
from geocache.api.schemas import ControlResponse
from geocache.engine.session import SessionController

router = APIRouter()


class ControlAction(str, Enum):
    save = "save"
    load = "load"
    reset = "reset"


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    session: SessionController = Depends(get_session),
) -> ControlResponse:
    match action:
        case ControlAction.save:
            if not session.save():
                raise HTTPException(status_code=500, detail="Save failed; in-memory state kept.")
            return ControlResponse(status="ok", message="Game saved.")

        case ControlAction.load:
            if not session.load():
                return ControlResponse(status="noop", message="No usable saved game.")
            return ControlResponse(status="ok", message="Game loaded.")

        case ControlAction.reset:
            session.reset()
            return ControlResponse(status="ok", message="Game reset.")
