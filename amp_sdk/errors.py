"""Error taxonomy for the amplifier SDK.

Every failure that can happen while talking to the amplifier is raised as
one of these exceptions and propagates to the caller. None of them is fatal
to the process: the link stays usable for the next, unrelated operation.
"""
from __future__ import annotations

from typing import Optional


class AmpError(RuntimeError):
    """Base class for all amplifier SDK errors."""
    pass


# Transport

class TransportError(AmpError):
    """Raised when the serial link fails or is used while closed."""
    pass


class TransportOpenError(TransportError):
    """Raised when the serial port cannot be opened."""
    def __init__(self, message: str, port: Optional[str] = None):
        super().__init__(message)
        self.port = port


class TransportTimeout(TransportError):
    """Raised when a read does not collect the requested bytes in time.

    The partially received bytes are discarded; the stream should be
    considered desynchronized.
    """
    def __init__(self, message: str, expected: int = 0, received: int = 0):
        super().__init__(message)
        self.expected = expected
        self.received = received


class TransportShortWrite(TransportError):
    """Raised when the port accepts fewer bytes than the frame holds."""
    def __init__(self, message: str, expected: int = 0, written: int = 0):
        super().__init__(message)
        self.expected = expected
        self.written = written


# Protocol

class ProtocolError(AmpError):
    """Raised when the device answers with something unexpected."""
    def __init__(self, message: str, response: bytes = b""):
        super().__init__(message)
        self.response = response


class ProtocolUnexpectedHeader(ProtocolError):
    """Raised when a status response does not start with the magic header."""
    pass


class ProtocolUnexpectedEcho(ProtocolError):
    """Raised when an acknowledgement does not match the expected bytes."""
    pass


# Operations

class UnsupportedOperation(AmpError):
    """Raised for operations without a known wire command (e.g. mute)."""
    pass


class UnknownAction(AmpError):
    """Raised when an inbound action name is not recognised."""
    def __init__(self, message: str, action: Optional[str] = None):
        super().__init__(message)
        self.action = action
