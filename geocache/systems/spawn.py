"""Procedural spawn policy: which cells hold caches and what they start with."""

from __future__ import annotations

import logging
import math

from geocache.core.cache import Cache
from geocache.core.errors import ConfigurationError
from geocache.core.models import Cell
from geocache.systems.luck import luck

logger = logging.getLogger(__name__)


def token_id(cell: Cell, index: int) -> str:
    """Token id minted by *cell* at *index*; keeps its provenance forever."""
    return f"coin-{cell.i}:{cell.j}#{index}"


class SpawnPolicy:
    """Stateless, hash-driven cache generator.

    Must only be consulted for cells without an existing cache; re-deriving
    a visited cell would reset whatever the player did there.
    """

    __slots__ = ("spawn_probability", "max_tokens")

    def __init__(self, spawn_probability: float, max_tokens: int) -> None:
        if not 0.0 <= spawn_probability <= 1.0:
            raise ConfigurationError("spawn_probability", "must be within [0, 1]")
        if max_tokens < 1:
            raise ConfigurationError("max_tokens", "must be >= 1")
        self.spawn_probability = spawn_probability
        self.max_tokens = max_tokens

    def should_spawn(self, cell: Cell) -> bool:
        return luck(f"{cell.i},{cell.j}") < self.spawn_probability

    def initial_token_count(self, cell: Cell) -> int:
        """Number of tokens a fresh cache starts with, in [1, max_tokens]."""
        return math.floor(luck(f"{cell.i},{cell.j},coinCount") * self.max_tokens) + 1

    def mint_token_ids(self, cell: Cell, count: int) -> list[str]:
        return [token_id(cell, k) for k in range(count)]

    def materialize(self, cell: Cell) -> Cache | None:
        """Build the initial cache for *cell*, or None if nothing spawns there."""
        if not self.should_spawn(cell):
            return None
        count = self.initial_token_count(cell)
        logger.debug("Spawning cache at %s with %d tokens", cell.key, count)
        return Cache(cell, self.mint_token_ids(cell, count))
