"""Construct a fully wired SessionController from configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from geocache.core.grid import Board
from geocache.core.world_state import WorldState
from geocache.engine.position_feed import PositionFeed
from geocache.engine.session import SessionController
from geocache.systems.persistence import JsonFileSlotStorage, PersistenceGateway, SlotStorage
from geocache.systems.spawn import SpawnPolicy
from geocache.utils.event_log import EventLog

if TYPE_CHECKING:
    from geocache.config import GameConfig

logger = logging.getLogger(__name__)


def build_session(
    config: GameConfig,
    storage: SlotStorage | None = None,
    feed: PositionFeed | None = None,
    start: bool = True,
) -> SessionController:
    """Build every component from *config*.

    *storage* defaults to JSON files under ``config.save_dir``. With *start*
    the saved game is loaded and the starting neighborhood materialized.
    """
    config.validate()
    board = Board(config.tile_width, config.visibility_radius)
    spawn = SpawnPolicy(config.spawn_probability, config.max_tokens)
    if storage is None:
        storage = JsonFileSlotStorage(config.save_dir)
    gateway = PersistenceGateway(storage, board)
    session = SessionController(
        config=config,
        board=board,
        world=WorldState(),
        spawn=spawn,
        gateway=gateway,
        feed=feed if feed is not None else PositionFeed(),
        event_log=EventLog(config.event_log_size),
    )
    if start:
        session.start(load=True)
    logger.info(
        "Session ready at %s (%d caches, %d coins held)",
        session.position, len(session.world), len(session.world.wallet),
    )
    return session
