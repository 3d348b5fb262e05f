"""Idle keep-alive for the amplifier.

The amplifier drops into standby after two hours without either audible
input or an idle reset from the console. The control console sends the
reset every 60 seconds. Nothing in the SDK sends it on its own: a front end
that wants the amplifier kept awake starts a KeepAlive explicitly.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .broker import StateBroker

from ..errors import AmpError

logger = logging.getLogger(__name__)

KEEPALIVE_INTERVAL = 60.0  # seconds


class KeepAlive:
    """Periodically sends the idle reset through a broker.

    Failures are logged and the loop keeps going; the next tick may
    succeed once the link recovers.
    """

    def __init__(self, broker: StateBroker, interval: float = KEEPALIVE_INTERVAL):
        """Initialize keep-alive.

        Args:
            broker: Broker the resets are sent through
            interval: Seconds between resets
        """
        self._broker = broker
        self._interval = interval

        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background loop."""
        if self.running:
            return

        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop,
            daemon=True,
            name="AmpKeepAlive"
        )
        self._thread.start()
        logger.debug(f"Keep-alive started (interval={self._interval}s)")

    def stop(self) -> None:
        """Stop the background loop."""
        self._stop.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=1.0)
        self._thread = None
        logger.debug("Keep-alive stopped")

    def tick(self) -> bool:
        """Send one idle reset.

        Returns:
            True if the amplifier acknowledged it
        """
        try:
            self._broker.reset_idle_timeout()
            return True
        except AmpError as e:
            logger.error(f"Idle reset failed: {e}")
            return False

    def _loop(self) -> None:
        while not self._stop.wait(self._interval):
            self.tick()

    def __enter__(self) -> KeepAlive:
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
