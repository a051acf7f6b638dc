"""Thread-safe ring buffer of game events exposed via the API."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass

from geocache.core.enums import EventCategory


@dataclass(frozen=True, slots=True)
class GameEvent:
    """A single game event for the API event feed."""

    seq: int
    category: EventCategory
    message: str
    cell: tuple[int, int] | None = None  # cell involved in this event, if any


class EventLog:
    """Bounded event log. Writers append; readers snapshot a slice.

    Sequence numbers increase monotonically and survive ``clear()`` so a
    poller can keep asking for ``since(seq)``.
    """

    __slots__ = ("_buffer", "_lock", "_next_seq")

    def __init__(self, maxlen: int = 500) -> None:
        self._buffer: deque[GameEvent] = deque(maxlen=maxlen)
        self._lock = threading.Lock()
        self._next_seq = 0

    def record(
        self,
        category: EventCategory,
        message: str,
        cell: tuple[int, int] | None = None,
    ) -> GameEvent:
        with self._lock:
            event = GameEvent(self._next_seq, category, message, cell)
            self._next_seq += 1
            self._buffer.append(event)
        return event

    def since(self, seq: int) -> list[GameEvent]:
        """Return retained events whose sequence number is at least *seq*."""
        with self._lock:
            return [e for e in self._buffer if e.seq >= seq]

    def latest(self, count: int = 50) -> list[GameEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
