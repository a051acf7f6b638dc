"""Game systems: luck hashing, spawn policy, persistence."""

from geocache.systems.luck import luck
from geocache.systems.persistence import (
    JsonFileSlotStorage,
    MemorySlotStorage,
    PersistenceGateway,
    SlotStorage,
)
from geocache.systems.spawn import SpawnPolicy

__all__ = [
    "JsonFileSlotStorage",
    "MemorySlotStorage",
    "PersistenceGateway",
    "SlotStorage",
    "SpawnPolicy",
    "luck",
]
