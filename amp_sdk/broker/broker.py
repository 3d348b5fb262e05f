"""State broker: single point of access to one amplifier.

The wire protocol has no request identifiers, so two interleaved frames
look like one corrupted frame. The broker therefore holds one guard for
the whole command -> response -> status cycle and publishes the resulting
snapshot to every subscriber before letting the next caller in.

Subscribers receive snapshots through bounded drop-oldest queues, so a
slow or dead subscriber never holds up the device.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Union

from ..errors import AmpError
from ..device.controller import DeviceController
from ..models import Action, Status
from .subscription import DEFAULT_SUBSCRIBER_BUFFER, Subscription

logger = logging.getLogger(__name__)


class StateBroker:
    """Serializes access to a DeviceController and fans out status changes.

    Any number of threads may call apply() and subscribe() concurrently.
    Each call runs to completion (or to the transport timeout) while holding
    the guard; waiting callers are served in whatever order they acquire it.

    Example:
        >>> broker = StateBroker(DeviceController(SerialChannel("/dev/ttyUSB0")))
        >>> subscription = broker.subscribe()
        >>> subscription.get().main_volume
        32
        >>> broker.apply("volume_up").main_volume
        33
    """

    def __init__(self,
                 controller: DeviceController,
                 subscriber_buffer: int = DEFAULT_SUBSCRIBER_BUFFER):
        """Initialize broker.

        Args:
            controller: Controller of the amplifier; owned by the broker from now on
            subscriber_buffer: Snapshots buffered per subscriber
        """
        self._controller = controller
        self._subscriber_buffer = subscriber_buffer

        self._guard = threading.Lock()

        self._subscribers: List[Subscription] = []
        self._subscriber_lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        with self._subscriber_lock:
            return len(self._subscribers)

    def apply(self, action: Union[Action, str]) -> Status:
        """Run an action and publish the resulting status.

        Args:
            action: Action or its wire name (e.g. "volume_up")

        Returns:
            Status read back after the command

        Raises:
            UnknownAction: If the action name is not known. Nothing is sent.
            AmpError: Any transport or protocol failure. Nothing is published
                and the previous status stays authoritative.
        """
        if not isinstance(action, Action):
            action = Action.parse(action)

        return self._mutate(action.value, lambda: self._controller.execute(action))

    def configuration_reset(self) -> Status:
        """Send the console's configuration reset and publish the result."""
        return self._mutate("configuration_reset", self._controller.configuration_reset)

    def reset_idle_timeout(self) -> None:
        """Send the idle keep-alive. Device state does not change, nothing is published."""
        with self._guard:
            self._controller.reset_idle_timeout()

    def status(self) -> Status:
        """Re-read the status from the device.

        Subscribers are only notified of mutations, so nothing is published.
        """
        with self._guard:
            return self._controller.status()

    def cached_status(self) -> Status:
        """Last known status, read from the device only if there is none yet."""
        with self._guard:
            return self._controller.cached_status()

    def subscribe(self) -> Subscription:
        """Register an observer.

        The returned subscription already holds the current status, so every
        observer starts in sync. A device read happens only if no status has
        been read before.
        """
        with self._guard:
            status = self._controller.cached_status()
            subscription = Subscription(self._unsubscribe, maxsize=self._subscriber_buffer)
            subscription.deliver(status)
            with self._subscriber_lock:
                self._subscribers.append(subscription)

        logger.debug(f"Subscriber added ({self.subscriber_count} total)")
        return subscription

    def close(self) -> None:
        """Close all subscriptions and the device channel."""
        with self._subscriber_lock:
            subscriptions = list(self._subscribers)

        for subscription in subscriptions:
            subscription.close()

        with self._guard:
            self._controller.close()

    def _mutate(self, name: str, operation: Callable[[], None]) -> Status:
        """Run a command plus status read under the guard, then publish."""
        with self._guard:
            try:
                operation()
                status = self._controller.status()
            except AmpError as e:
                logger.warning(f"{name} failed: {e}")
                raise
            # Published under the guard so snapshots go out in the order
            # the commands were applied. deliver() never blocks.
            self._publish(status)

        logger.info(f"{name} applied: {status}")
        return status

    def _publish(self, status: Status) -> None:
        with self._subscriber_lock:
            subscriptions = list(self._subscribers)

        for subscription in subscriptions:
            subscription.deliver(status)

    def _unsubscribe(self, subscription: Subscription) -> None:
        with self._subscriber_lock:
            if subscription in self._subscribers:
                self._subscribers.remove(subscription)
