"""Per-observer status feed.

Each subscriber owns a small bounded queue. The broker never blocks on a
subscriber: when a queue is full the oldest snapshot is dropped to make
room. Only the most recent snapshot matters, so missing intermediate ones
is fine.
"""
from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Iterator, Optional

from ..models import Status

logger = logging.getLogger(__name__)

DEFAULT_SUBSCRIBER_BUFFER = 16

_CLOSED = object()


class Subscription:
    """Bounded, drop-oldest queue of Status snapshots for one observer.

    Example:
        >>> with broker.subscribe() as subscription:
        ...     for status in subscription:
        ...         print(status.main_volume)
    """

    def __init__(self,
                 unsubscribe: Callable[[Subscription], None],
                 maxsize: int = DEFAULT_SUBSCRIBER_BUFFER):
        """Initialize subscription.

        Args:
            unsubscribe: Called once when the subscription is closed
            maxsize: Number of snapshots buffered before the oldest is dropped
        """
        self._unsubscribe = unsubscribe
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._put_lock = threading.Lock()
        self._closed = False
        self._dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dropped(self) -> int:
        """Number of snapshots discarded because the queue was full."""
        return self._dropped

    def deliver(self, status: Status) -> None:
        """Queue a snapshot without blocking."""
        with self._put_lock:
            if self._closed:
                return
            self._put_locked(status)

    def get(self, timeout: Optional[float] = None) -> Optional[Status]:
        """Wait for the next snapshot.

        Returns:
            The next Status, or None on timeout or once closed
        """
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        return self._unwrap(item)

    def get_nowait(self) -> Optional[Status]:
        """Return the next queued snapshot, or None if there is none."""
        try:
            item = self._queue.get_nowait()
        except queue.Empty:
            return None
        return self._unwrap(item)

    def latest(self) -> Optional[Status]:
        """Drain the queue and return the newest snapshot, if any."""
        newest = None
        while True:
            status = self.get_nowait()
            if status is None:
                return newest
            newest = status

    def close(self) -> None:
        """Unsubscribe. Blocked readers are woken up and receive None."""
        with self._put_lock:
            if self._closed:
                return
            self._closed = True
            # Nothing is queued behind the marker
            self._put_locked(_CLOSED)
        self._unsubscribe(self)

    def __iter__(self) -> Iterator[Status]:
        while True:
            status = self.get()
            if status is None:
                return
            yield status

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _unwrap(self, item) -> Optional[Status]:
        if item is _CLOSED:
            # Leave the marker for any other reader
            self._put(_CLOSED)
            return None
        return item

    def _put(self, item) -> None:
        with self._put_lock:
            self._put_locked(item)

    def _put_locked(self, item) -> None:
        try:
            self._queue.put(item, block=False)
        except queue.Full:
            # Queue is full, drop oldest item to make room
            try:
                dropped = self._queue.get_nowait()
                if dropped is not _CLOSED:
                    self._dropped += 1
                    if self._dropped % 100 == 1:  # Log periodically
                        logger.warning(f"Subscriber queue full, dropped {self._dropped} snapshots so far")
            except queue.Empty:
                # A reader emptied it in the meantime
                pass
            # Every put holds _put_lock, so there is room now
            self._queue.put(item, block=False)
