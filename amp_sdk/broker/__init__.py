"""Broker layer: shared access to one amplifier and status fan-out."""

from .broker import StateBroker
from .keepalive import KEEPALIVE_INTERVAL, KeepAlive
from .subscription import DEFAULT_SUBSCRIBER_BUFFER, Subscription

__all__ = [
    "StateBroker",
    "Subscription",
    "KeepAlive",
    "KEEPALIVE_INTERVAL",
    "DEFAULT_SUBSCRIBER_BUFFER",
]
