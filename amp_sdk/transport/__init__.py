"""Transport layer for the amplifier control port."""

from .base import Channel
from .serial import SerialChannel

__all__ = ["Channel", "SerialChannel"]
