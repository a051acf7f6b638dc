"""Mutable authoritative world state: caches by cell plus the player's wallet."""

from __future__ import annotations

import logging
from typing import Iterator, Mapping

from geocache.core.cache import Cache, CacheMemento
from geocache.core.errors import (
    CorruptSnapshot,
    InvariantViolation,
    TokenNotFound,
    TokenNotHeld,
    UnknownCache,
)
from geocache.core.models import Cell

logger = logging.getLogger(__name__)

WALLET = "wallet"


class WorldState:
    """The single source of truth for caches and the wallet.

    ``collect`` and ``deposit`` are the only legal ways to move a token
    between containers; together they keep every token in exactly one place.
    """

    __slots__ = ("_caches", "_wallet")

    def __init__(self) -> None:
        self._caches: dict[Cell, Cache] = {}
        self._wallet: list[str] = []

    # -- caches --

    def get(self, cell: Cell) -> Cache | None:
        return self._caches.get(cell)

    def put(self, cell: Cell, cache: Cache) -> None:
        self._caches[cell] = cache

    def __contains__(self, cell: object) -> bool:
        return cell in self._caches

    def __len__(self) -> int:
        return len(self._caches)

    def caches(self) -> Iterator[tuple[Cell, Cache]]:
        return iter(list(self._caches.items()))

    # -- wallet --

    @property
    def wallet(self) -> tuple[str, ...]:
        return tuple(self._wallet)

    def holds(self, token_id: str) -> bool:
        return token_id in self._wallet

    # -- token transfer --

    def collect(self, cell: Cell, token_id: str) -> str:
        """Move *token_id* from the cache at *cell* to the end of the wallet."""
        cache = self._caches.get(cell)
        if cache is None or not cache.remove_token(token_id):
            raise TokenNotFound(cell, token_id)
        self._wallet.append(token_id)
        logger.debug("Collected %s from %s", token_id, cell.key)
        return token_id

    def deposit(self, token_id: str, cell: Cell) -> str:
        """Move *token_id* from the wallet to the end of the cache at *cell*."""
        if token_id not in self._wallet:
            raise TokenNotHeld(token_id)
        cache = self._caches.get(cell)
        if cache is None:
            raise UnknownCache(cell)
        self._wallet.remove(token_id)
        cache.add_token(token_id)
        logger.debug("Deposited %s into %s", token_id, cell.key)
        return token_id

    # -- ownership --

    def owner_of(self, token_id: str) -> Cell | str | None:
        """Return the cell owning *token_id*, ``WALLET``, or None (linear scan)."""
        if token_id in self._wallet:
            return WALLET
        for cell, cache in self._caches.items():
            if token_id in cache:
                return cell
        return None

    def check_exclusivity(self) -> None:
        """Raise ``InvariantViolation`` if any token sits in two places."""
        seen: dict[str, str] = {}
        containers: list[tuple[str, tuple[str, ...]]] = [(WALLET, self.wallet)]
        containers.extend((cell.key, cache.tokens) for cell, cache in self._caches.items())
        for owner, tokens in containers:
            for tid in tokens:
                previous = seen.get(tid)
                if previous is not None:
                    raise InvariantViolation(f"Token {tid!r} held by both {previous} and {owner}")
                seen[tid] = owner

    # -- bulk state --

    def restore(
        self,
        cache_map: Mapping[Cell, CacheMemento] | None,
        wallet: list[str] | None,
        replace: bool = False,
    ) -> list[Cell]:
        """Apply loaded state; return the cells whose memento was corrupt.

        Each cache is restored independently. A corrupt entry keeps the
        in-memory cache for that cell; if there is none, the cell gets an
        empty cache so it still counts as materialized and is never spawned
        again.

        With *replace*, caches absent from *cache_map* are dropped and a
        missing wallet counts as empty, so the result mirrors the saved state
        rather than merging into the current one.
        """
        skipped: list[Cell] = []
        if replace:
            keep = cache_map if cache_map is not None else {}
            for cell in [c for c in self._caches if c not in keep]:
                del self._caches[cell]
            if wallet is None:
                wallet = []
        if cache_map is not None:
            for cell, memento in cache_map.items():
                existing = self._caches.get(cell)
                try:
                    if existing is None:
                        self._caches[cell] = Cache.from_memento(cell, memento)
                    else:
                        existing.restore(memento)
                except CorruptSnapshot:
                    logger.warning("Skipping corrupt cache snapshot for %s", cell.key)
                    if existing is None:
                        self._caches[cell] = Cache(cell)
                    skipped.append(cell)
        if wallet is not None:
            self._wallet = list(dict.fromkeys(wallet))
        return skipped

    def claimed_tokens(self) -> set[str]:
        """Every token currently held by the wallet or any cache."""
        claimed = set(self._wallet)
        for cache in self._caches.values():
            claimed.update(cache.tokens)
        return claimed

    def release_duplicates(self, cells: list[Cell]) -> list[str]:
        """Drop tokens from the caches at *cells* that another container holds.

        Used after a partial restore, where those caches kept stale in-memory
        content. Returns the dropped ids.
        """
        suspect = set(cells)
        claimed = set(self._wallet)
        for cell, cache in self._caches.items():
            if cell not in suspect:
                claimed.update(cache.tokens)
        dropped: list[str] = []
        for cell in cells:
            cache = self._caches.get(cell)
            if cache is None:
                continue
            for tid in cache.tokens:
                if tid in claimed:
                    cache.remove_token(tid)
                    dropped.append(tid)
                else:
                    claimed.add(tid)
        if dropped:
            logger.warning("Dropped %d duplicated tokens from restored caches", len(dropped))
        return dropped

    def reset(self) -> None:
        self._caches.clear()
        self._wallet.clear()
