"""Position feed: external location updates delivered to a single consumer.

Producers (a device sensor bridge, the HTTP ``/position`` route, a scripted
walk) call ``publish`` or ``fail`` from any thread. Each subscription owns a
queue drained by one consumer thread, which invokes the callbacks one at a
time, in arrival order. Events published while nobody is subscribed are
dropped.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Callable, Iterable

from geocache.core.models import Position

logger = logging.getLogger(__name__)

PositionCallback = Callable[[Position], None]
ErrorCallback = Callable[[Exception], None]


@dataclass(frozen=True, slots=True)
class _FeedItem:
    position: Position | None = None
    error: Exception | None = None


_STOP = _FeedItem()


class FeedSubscription:
    """Cancellable handle returned by ``PositionFeed.subscribe``."""

    __slots__ = ("_feed", "_queue", "_on_position", "_on_error", "_cancelled", "_thread")

    def __init__(
        self,
        feed: PositionFeed,
        on_position: PositionCallback,
        on_error: ErrorCallback | None,
    ) -> None:
        self._feed = feed
        self._queue: queue.Queue[_FeedItem] = queue.Queue()
        self._on_position = on_position
        self._on_error = on_error
        self._cancelled = threading.Event()
        self._thread = threading.Thread(target=self._run, name=feed.name, daemon=True)

    @property
    def active(self) -> bool:
        return not self._cancelled.is_set()

    def cancel(self, wait: bool = True) -> None:
        """Stop delivery. Idempotent; safe to call from inside a callback.

        The feed is free for a new subscriber as soon as this returns. With
        ``wait=False`` the consumer thread is not joined; call ``join`` later.
        """
        if not self._cancelled.is_set():
            self._cancelled.set()
            self._feed._detach(self)
            self._queue.put_nowait(_STOP)
            logger.info("%s unsubscribed", self._feed.name)
        if wait:
            self.join()

    def join(self, timeout: float = 5.0) -> None:
        """Wait for the consumer thread to exit (no-op from the thread itself)."""
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)

    def wait_idle(self) -> None:
        """Block until every queued event has been delivered or dropped."""
        self._queue.join()

    def _start(self) -> None:
        self._thread.start()

    def _put(self, item: _FeedItem) -> None:
        self._queue.put_nowait(item)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                if not self.active:
                    continue
                if item.error is not None:
                    if self._on_error is not None:
                        self._on_error(item.error)
                elif item.position is not None:
                    self._on_position(item.position)
            except Exception:
                logger.exception("%s callback failed", self._feed.name)
            finally:
                self._queue.task_done()


class PositionFeed:
    """Position stream with at most one subscriber at a time."""

    def __init__(self, name: str = "position-feed") -> None:
        self.name = name
        self._lock = threading.Lock()
        self._subscription: FeedSubscription | None = None

    # -- producer side --

    def publish(self, position: Position) -> bool:
        """Queue *position* for the subscriber. False if nobody is listening."""
        return self._offer(_FeedItem(position=position))

    def publish_many(self, positions: Iterable[Position]) -> int:
        return sum(1 for position in positions if self.publish(position))

    def fail(self, error: Exception) -> bool:
        """Report a sensor failure to the subscriber."""
        return self._offer(_FeedItem(error=error))

    def _offer(self, item: _FeedItem) -> bool:
        with self._lock:
            subscription = self._subscription
            if subscription is None:
                logger.debug("%s: no subscriber, dropping event", self.name)
                return False
            subscription._put(item)
        return True

    # -- consumer side --

    @property
    def subscribed(self) -> bool:
        with self._lock:
            return self._subscription is not None

    def subscribe(
        self,
        on_position: PositionCallback,
        on_error: ErrorCallback | None = None,
    ) -> FeedSubscription:
        """Attach the single consumer and start its delivery thread."""
        with self._lock:
            if self._subscription is not None:
                raise RuntimeError(f"{self.name} already has a subscriber")
            subscription = FeedSubscription(self, on_position, on_error)
            self._subscription = subscription
            subscription._start()
        logger.info("%s subscribed", self.name)
        return subscription

    def wait_idle(self) -> None:
        """Block until the current subscriber has drained its queue."""
        with self._lock:
            subscription = self._subscription
        if subscription is not None:
            subscription.wait_idle()

    def _detach(self, subscription: FeedSubscription) -> None:
        with self._lock:
            if self._subscription is subscription:
                self._subscription = None
