"""Amplifier control SDK - serial protocol engine and shared state broker."""

from .models import (
    Action,
    Effect,
    Input,
    Status,
)
from .errors import (
    AmpError,
    TransportError,
    TransportOpenError,
    TransportTimeout,
    TransportShortWrite,
    ProtocolError,
    ProtocolUnexpectedHeader,
    ProtocolUnexpectedEcho,
    UnsupportedOperation,
    UnknownAction,
)
from .transport import Channel, SerialChannel
from .device import DeviceController
from .broker import StateBroker, Subscription, KeepAlive
from .session import ActionSession

__all__ = [
    "Action",
    "Effect",
    "Input",
    "Status",
    "AmpError",
    "TransportError",
    "TransportOpenError",
    "TransportTimeout",
    "TransportShortWrite",
    "ProtocolError",
    "ProtocolUnexpectedHeader",
    "ProtocolUnexpectedEcho",
    "UnsupportedOperation",
    "UnknownAction",
    "Channel",
    "SerialChannel",
    "DeviceController",
    "StateBroker",
    "Subscription",
    "KeepAlive",
    "ActionSession",
]
