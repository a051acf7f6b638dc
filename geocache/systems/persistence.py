"""Persistence gateway: world state to and from two named storage slots.

Slots
-----
``caches``  JSON object mapping ``"i,j"`` to the cache's memento payload.
``coins``   JSON array of the wallet's token ids, in order.

Both are written as canonical JSON (sorted keys, compact separators) so the
same state always produces the same bytes.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import TYPE_CHECKING, Any

from geocache.core.cache import CacheMemento
from geocache.core.errors import CorruptSnapshot, PersistenceError
from geocache.core.models import Cell

if TYPE_CHECKING:
    from geocache.core.grid import Board
    from geocache.core.world_state import WorldState

logger = logging.getLogger(__name__)

CACHES_SLOT = "caches"
COINS_SLOT = "coins"


def _canonical_json(payload: Any) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


# ---------------------------------------------------------------------------
# Slot storages
# ---------------------------------------------------------------------------

class SlotStorage(ABC):
    """Durable key-value store of named string slots."""

    @abstractmethod
    def read(self, slot: str) -> str | None:
        """Return the slot's contents, or None if it was never written."""

    @abstractmethod
    def write(self, slot: str, data: str) -> None:
        """Replace the slot's contents. Raises ``PersistenceError`` on failure."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every slot."""


class MemorySlotStorage(SlotStorage):
    """In-process storage, mainly for tests and ephemeral sessions."""

    __slots__ = ("_slots", "_lock")

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._slots: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def read(self, slot: str) -> str | None:
        with self._lock:
            return self._slots.get(slot)

    def write(self, slot: str, data: str) -> None:
        with self._lock:
            self._slots[slot] = data

    def clear(self) -> None:
        with self._lock:
            self._slots.clear()


class JsonFileSlotStorage(SlotStorage):
    """One ``<slot>.json`` file per slot inside *directory*.

    Writes go to a temp file in the same directory and are moved into place
    with ``os.replace``, so a reader sees either the old or the new slot.
    """

    __slots__ = ("_dir",)

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory)

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, slot: str) -> Path:
        return self._dir / f"{slot}.json"

    def read(self, slot: str) -> str | None:
        path = self._path(slot)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceError(f"cannot read slot {slot!r}: {exc}") from exc

    def write(self, slot: str, data: str) -> None:
        destination = self._path(slot)
        temp_path: Path | None = None
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=destination.parent,
                delete=False,
                suffix=".tmp",
            ) as temp_file:
                temp_path = Path(temp_file.name)
                temp_file.write(data)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.replace(temp_path, destination)
        except OSError as exc:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise PersistenceError(f"cannot write slot {slot!r}: {exc}") from exc

    def clear(self) -> None:
        for slot in (CACHES_SLOT, COINS_SLOT):
            try:
                self._path(slot).unlink(missing_ok=True)
            except OSError as exc:
                raise PersistenceError(f"cannot clear slot {slot!r}: {exc}") from exc


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------

class PersistenceGateway:
    """Serializes ``WorldState`` into the ``caches`` and ``coins`` slots."""

    __slots__ = ("_storage", "_board", "_lock")

    def __init__(self, storage: SlotStorage, board: Board | None = None) -> None:
        self._storage = storage
        self._board = board
        self._lock = threading.Lock()

    @property
    def storage(self) -> SlotStorage:
        return self._storage

    # -- encode --

    @staticmethod
    def encode_caches(world: WorldState) -> str:
        return _canonical_json({cell.key: cache.snapshot().payload for cell, cache in world.caches()})

    @staticmethod
    def encode_wallet(world: WorldState) -> str:
        return _canonical_json(list(world.wallet))

    def save(self, world: WorldState) -> None:
        """Write both slots. Raises ``PersistenceError``; *world* is untouched."""
        caches_data = self.encode_caches(world)
        coins_data = self.encode_wallet(world)
        with self._lock:
            self._storage.write(CACHES_SLOT, caches_data)
            self._storage.write(COINS_SLOT, coins_data)
        logger.info("Saved %d caches and %d wallet tokens", len(world), len(world.wallet))

    # -- decode --

    def _cell(self, i: int, j: int) -> Cell:
        return self._board.canonical(i, j) if self._board is not None else Cell(i, j)

    def decode_caches(self, data: str) -> dict[Cell, CacheMemento]:
        """Parse the ``caches`` slot; individual payloads stay opaque."""
        try:
            raw = json.loads(data)
        except ValueError as exc:
            raise CorruptSnapshot(f"caches slot is not valid JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise CorruptSnapshot("caches slot is not a JSON object")
        result: dict[Cell, CacheMemento] = {}
        for key, payload in raw.items():
            try:
                i, j = Cell.parse_key(key)
            except ValueError as exc:
                raise CorruptSnapshot(f"bad cell key in caches slot: {key!r}") from exc
            if not isinstance(payload, str):
                # Re-encoded; validated per cell when restored
                payload = _canonical_json(payload)
            result[self._cell(i, j)] = CacheMemento(payload)
        return result

    @staticmethod
    def decode_wallet(data: str) -> list[str]:
        try:
            raw = json.loads(data)
        except ValueError as exc:
            raise CorruptSnapshot(f"coins slot is not valid JSON: {exc}") from exc
        if not isinstance(raw, list) or not all(isinstance(t, str) for t in raw):
            raise CorruptSnapshot("coins slot is not a list of token ids")
        return raw

    def load(self) -> tuple[dict[Cell, CacheMemento] | None, list[str] | None]:
        """Read both slots; None for a slot that was never written."""
        with self._lock:
            caches_data = self._storage.read(CACHES_SLOT)
            coins_data = self._storage.read(COINS_SLOT)
        cache_map = self.decode_caches(caches_data) if caches_data is not None else None
        wallet = self.decode_wallet(coins_data) if coins_data is not None else None
        logger.info(
            "Loaded %s caches and %s wallet tokens",
            "no" if cache_map is None else len(cache_map),
            "no" if wallet is None else len(wallet),
        )
        return cache_map, wallet

    def clear(self) -> None:
        with self._lock:
            self._storage.clear()
