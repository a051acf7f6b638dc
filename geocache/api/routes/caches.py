"""Cache inspection and token transfer: /api/v1/caches/{i}/{j}."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from geocache.api.dependencies import get_session
from geocache.api.routes.serializers import bounds_schema, cell_schema
from geocache.api.schemas import CacheSchema, TokenRequest, TransferResponse
from geocache.core.errors import TokenNotFound, TokenNotHeld, TooFar, UnknownCache
from geocache.engine.session import SessionController

router = APIRouter()


@router.get("/caches/{i}/{j}", response_model=CacheSchema)
def get_cache(i: int, j: int, session: SessionController = Depends(get_session)) -> CacheSchema:
    cell = session.board.canonical(i, j)
    cache = session.world.get(cell)
    if cache is None:
        raise HTTPException(status_code=404, detail=f"No cache at {cell.key}.")
    distance = session.cell.distance(cell)
    return CacheSchema(
        cell=cell_schema(cell),
        bounds=bounds_schema(session.board, cell),
        tokens=list(cache.tokens),
        distance=distance,
        in_reach=distance <= session.config.interaction_radius,
    )


@router.post("/caches/{i}/{j}/collect", response_model=TransferResponse)
def collect(
    i: int,
    j: int,
    body: TokenRequest,
    session: SessionController = Depends(get_session),
) -> TransferResponse:
    cell = session.board.canonical(i, j)
    try:
        session.collect(cell, body.token_id)
    except TooFar as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except TokenNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _transfer_response(session, cell, body.token_id)


@router.post("/caches/{i}/{j}/deposit", response_model=TransferResponse)
def deposit(
    i: int,
    j: int,
    body: TokenRequest,
    session: SessionController = Depends(get_session),
) -> TransferResponse:
    cell = session.board.canonical(i, j)
    try:
        session.deposit(body.token_id, cell)
    except TooFar as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except UnknownCache as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except TokenNotHeld as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _transfer_response(session, cell, body.token_id)


def _transfer_response(session: SessionController, cell, token_id: str) -> TransferResponse:
    cache = session.world.get(cell)
    return TransferResponse(
        token_id=token_id,
        cell=cell_schema(cell),
        wallet=list(session.world.wallet),
        cache=list(cache.tokens) if cache is not None else [],
    )
