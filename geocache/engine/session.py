"""SessionController: player movement, lazy cache spawning, and persistence.

All mutating entry points run under one re-entrant lock, so movement,
collect/deposit, spawning and save/load never interleave. Tracked-mode
position updates arrive on the feed's consumer thread and take the same
lock; updates from a cancelled subscription are discarded.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from geocache.core.cache import Cache
from geocache.core.enums import Direction, EventCategory, MovementMode
from geocache.core.errors import CorruptSnapshot, InvariantViolation, ModeError, PersistenceError, TooFar
from geocache.core.models import DIRECTION_OFFSETS, Cell, Position
from geocache.utils.event_log import EventLog

if TYPE_CHECKING:
    from geocache.config import GameConfig
    from geocache.core.grid import Board
    from geocache.core.world_state import WorldState
    from geocache.engine.position_feed import FeedSubscription, PositionFeed
    from geocache.systems.persistence import PersistenceGateway
    from geocache.systems.spawn import SpawnPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionStatus:
    """Plain-data summary for status panels."""

    position: Position
    cell: Cell
    mode: MovementMode
    wallet_size: int
    cache_count: int
    path_length: int
    last_feed_error: str | None


class SessionController:
    """Drives the player through the world and keeps it materialized."""

    def __init__(
        self,
        config: GameConfig,
        board: Board,
        world: WorldState,
        spawn: SpawnPolicy,
        gateway: PersistenceGateway | None = None,
        feed: PositionFeed | None = None,
        event_log: EventLog | None = None,
    ) -> None:
        self._config = config
        self._board = board
        self._world = world
        self._spawn = spawn
        self._gateway = gateway
        self._feed = feed
        self._events = event_log if event_log is not None else EventLog(config.event_log_size)

        self._lock = threading.RLock()
        self._origin = Position(config.origin_lat, config.origin_lng)
        self._position = self._origin
        self._path: list[Position] = [self._origin]
        self._mode = MovementMode.MANUAL
        self._subscription: FeedSubscription | None = None
        self._feed_generation = 0
        self._last_feed_error: str | None = None

    # -- read-only views --

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def board(self) -> Board:
        return self._board

    @property
    def world(self) -> WorldState:
        return self._world

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def feed(self) -> PositionFeed | None:
        return self._feed

    @property
    def position(self) -> Position:
        with self._lock:
            return self._position

    @property
    def cell(self) -> Cell:
        with self._lock:
            return self._board.cell_for(self._position)

    @property
    def mode(self) -> MovementMode:
        with self._lock:
            return self._mode

    @property
    def path(self) -> tuple[Position, ...]:
        with self._lock:
            return tuple(self._path)

    def status(self) -> SessionStatus:
        with self._lock:
            return SessionStatus(
                position=self._position,
                cell=self._board.cell_for(self._position),
                mode=self._mode,
                wallet_size=len(self._world.wallet),
                cache_count=len(self._world),
                path_length=len(self._path),
                last_feed_error=self._last_feed_error,
            )

    def visible_caches(self) -> list[tuple[Cell, Cache]]:
        """Caches in the current neighborhood, in ``cells_near`` order."""
        with self._lock:
            result = []
            for cell in self._board.cells_near(self._position):
                cache = self._world.get(cell)
                if cache is not None:
                    result.append((cell, cache))
            return result

    # -- lifecycle --

    def start(self, load: bool = True) -> None:
        """Restore saved state (optionally) and materialize the neighborhood."""
        with self._lock:
            if load and self._gateway is not None:
                self.load()
            self._scan()

    def reset(self) -> None:
        """Forget all progress: back to origin, empty wallet, fresh caches."""
        with self._lock:
            self._world.reset()
            self._position = self._origin
            self._path = [self._origin]
            self._last_feed_error = None
            self._events.record(EventCategory.PERSIST, "Game reset")
            logger.info("Session reset to origin %s", self._origin)
            self._scan()

    # -- movement --

    def step(self, direction: Direction) -> Position:
        """Move one tile in *direction*. Only allowed in manual mode."""
        with self._lock:
            if self._mode is not MovementMode.MANUAL:
                raise ModeError("Manual steps are disabled while tracking is on")
            dlat, dlng = DIRECTION_OFFSETS[direction]
            width = self._board.tile_width
            self._move_to(self._position.offset(dlat * width, dlng * width))
            return self._position

    def enable_tracking(self) -> None:
        """Switch to tracked mode and subscribe to the position feed."""
        with self._lock:
            if self._mode is MovementMode.TRACKED:
                return
            if self._feed is None:
                raise ModeError("No position feed configured")
            self._feed_generation += 1
            generation = self._feed_generation
            self._subscription = self._feed.subscribe(
                lambda pos: self._on_feed_position(generation, pos),
                lambda exc: self._on_feed_error(generation, exc),
            )
            self._mode = MovementMode.TRACKED
            self._events.record(EventCategory.MODE, "Tracking enabled")
            logger.info("Movement mode: tracked")

    def disable_tracking(self) -> None:
        """Switch to manual mode; no feed update is applied after this returns."""
        with self._lock:
            if self._mode is MovementMode.MANUAL:
                return
            subscription = self._subscription
            self._subscription = None
            self._feed_generation += 1
            self._mode = MovementMode.MANUAL
            # Detach under the lock so a concurrent enable_tracking finds the feed free
            if subscription is not None:
                subscription.cancel(wait=False)
            self._events.record(EventCategory.MODE, "Tracking disabled")
            logger.info("Movement mode: manual")
        # Join outside the lock: the consumer thread may be waiting on it
        if subscription is not None:
            subscription.join()

    def _on_feed_position(self, generation: int, position: Position) -> None:
        with self._lock:
            if generation != self._feed_generation or self._mode is not MovementMode.TRACKED:
                return
            self._last_feed_error = None
            self._move_to(position)

    def _on_feed_error(self, generation: int, error: Exception) -> None:
        with self._lock:
            if generation != self._feed_generation:
                return
            self._last_feed_error = str(error) or type(error).__name__
            self._events.record(EventCategory.ERROR, f"Position feed error: {self._last_feed_error}")
            logger.warning("Position feed error, keeping last position %s: %s", self._position, error)

    def _move_to(self, position: Position) -> None:
        self._position = position
        self._path.append(position)
        cell = self._board.cell_for(position)
        self._events.record(EventCategory.MOVE, f"Moved to {position!r}", (cell.i, cell.j))
        self._scan()

    def _scan(self) -> int:
        """Materialize caches for nearby cells that have no entry yet."""
        spawned = 0
        claimed: set[str] | None = None
        for cell in self._board.cells_near(self._position):
            if cell in self._world:
                continue
            cache = self._spawn.materialize(cell)
            if cache is None:
                continue
            # Minted ids may already be held if this cell's snapshot was lost
            if claimed is None:
                claimed = self._world.claimed_tokens()
            fresh = [tid for tid in cache.tokens if tid not in claimed]
            if len(fresh) != len(cache):
                logger.warning(
                    "Cell %s: %d minted tokens already held elsewhere",
                    cell.key, len(cache) - len(fresh),
                )
                cache = Cache(cell, fresh)
            claimed.update(fresh)
            self._world.put(cell, cache)
            spawned += 1
            self._events.record(
                EventCategory.SPAWN, f"Cache with {len(cache)} coins appeared", (cell.i, cell.j)
            )
        if spawned:
            logger.debug("Spawned %d caches around %s", spawned, self._position)
        return spawned

    # -- token transfer --

    def _check_reach(self, cell: Cell) -> None:
        here = self._board.cell_for(self._position)
        distance = here.distance(cell)
        if distance > self._config.interaction_radius:
            raise TooFar(cell, distance, self._config.interaction_radius)

    def collect(self, cell: Cell, token_id: str) -> str:
        """Take *token_id* from the cache at *cell* into the wallet."""
        with self._lock:
            self._check_reach(cell)
            self._world.collect(cell, token_id)
            self._events.record(EventCategory.COLLECT, f"Collected {token_id}", (cell.i, cell.j))
            if self._config.autosave:
                self.save()
            return token_id

    def deposit(self, token_id: str, cell: Cell) -> str:
        """Put *token_id* from the wallet into the cache at *cell*."""
        with self._lock:
            self._check_reach(cell)
            self._world.deposit(token_id, cell)
            self._events.record(EventCategory.DEPOSIT, f"Deposited {token_id}", (cell.i, cell.j))
            if self._config.autosave:
                self.save()
            return token_id

    # -- persistence --

    def save(self) -> bool:
        """Persist the world. False on I/O failure; memory stays authoritative."""
        if self._gateway is None:
            return False
        with self._lock:
            try:
                self._gateway.save(self._world)
            except PersistenceError as exc:
                self._events.record(EventCategory.ERROR, f"Save failed: {exc}")
                logger.error("Save failed, keeping in-memory state: %s", exc)
                return False
            self._events.record(EventCategory.PERSIST, "Game saved")
            return True

    def load(self) -> bool:
        """Revert to the saved world. False if there was nothing usable to load."""
        if self._gateway is None:
            return False
        with self._lock:
            try:
                cache_map, wallet = self._gateway.load()
            except (CorruptSnapshot, PersistenceError) as exc:
                self._events.record(EventCategory.ERROR, f"Load failed: {exc}")
                logger.error("Load failed, keeping in-memory state: %s", exc)
                return False
            if cache_map is None and wallet is None:
                logger.info("No saved game found")
                return False

            skipped = self._world.restore(cache_map, wallet, replace=True)
            for cell in skipped:
                self._events.record(
                    EventCategory.ERROR, "Corrupt cache snapshot skipped", (cell.i, cell.j)
                )
            if skipped:
                self._world.release_duplicates(skipped)
            self._events.record(EventCategory.PERSIST, "Game loaded")
            self._scan()
            try:
                self._world.check_exclusivity()
            except InvariantViolation as exc:
                self._events.record(EventCategory.ERROR, str(exc))
                logger.error("Loaded state violates token exclusivity: %s", exc)
            return True
