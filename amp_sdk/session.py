"""Relay session for network front ends.

One ActionSession per connected client. The hosting server (websocket,
TCP, IPC...) feeds it the client's text messages and forwards its replies
and status updates; the session itself does no networking.

Errors from a single client's message are turned into an error reply for
that client. They never escape the session and never affect other clients.
"""
from __future__ import annotations

import json
import logging
from typing import Iterator, Optional, Union

from .broker.broker import StateBroker
from .broker.subscription import Subscription
from .errors import AmpError
from .protocol.messages import encode_error, encode_status, parse_action_message

logger = logging.getLogger(__name__)


class ActionSession:
    """Bridges one client's JSON messages to a shared StateBroker.

    Example:
        >>> session = ActionSession(broker)
        >>> session.handle('{"action": "volume_up"}')
        '{"status": {"main_volume": 33, ...}}'
        >>> for message in session.updates():
        ...     websocket.send(message)
    """

    def __init__(self, broker: StateBroker, name: Optional[str] = None):
        """Initialize session and subscribe to status updates.

        Args:
            broker: Broker shared by all sessions
            name: Label used in log messages
        """
        self._broker = broker
        self._name = name or "session"
        self._subscription: Subscription = broker.subscribe()

    @property
    def subscription(self) -> Subscription:
        return self._subscription

    def handle(self, text: Union[str, bytes]) -> str:
        """Apply one inbound action message.

        Returns:
            JSON reply: {"status": {...}} on success, or
            {"error": "<ErrorName>", "message": "..."} on failure
        """
        try:
            action = parse_action_message(text)
            status = self._broker.apply(action)
        except AmpError as e:
            logger.warning(f"[{self._name}] {type(e).__name__}: {e}")
            return encode_error(e)

        logger.debug(f"[{self._name}] {action.value} -> {status}")
        return json.dumps({"status": status.to_dict()})

    def updates(self, timeout: Optional[float] = None) -> Iterator[str]:
        """Yield status messages until the session is closed.

        Args:
            timeout: Stop after this many seconds without an update
                (None waits indefinitely)
        """
        while True:
            status = self._subscription.get(timeout=timeout)
            if status is None:
                return
            yield encode_status(status)

    def close(self) -> None:
        """Unsubscribe from status updates."""
        self._subscription.close()

    def __enter__(self) -> ActionSession:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
