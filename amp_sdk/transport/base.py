"""Abstract base class for the byte channel to the amplifier.

The Channel interface is the only place that touches the physical link.
It is byte-exact and knows nothing about frames or commands; the protocol
layer decides what to send and how many bytes to expect back.

Key principles:
- Whole-buffer writes, never retried
- Exact-size reads bounded by a timeout
- No partial data is ever returned to the caller
"""
from __future__ import annotations

from abc import ABC, abstractmethod


class Channel(ABC):
    """Abstract byte channel to the amplifier.

    Channels are responsible for:
    1. Managing the link lifecycle
    2. Writing complete frames
    3. Reading exactly the number of bytes a response holds

    Channels should NOT interpret the bytes they move.
    """

    @abstractmethod
    def open(self) -> None:
        """Open the link.

        Raises:
            TransportOpenError: If the link cannot be opened
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the link.

        Should be safe to call multiple times.
        """
        pass

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """True while the link is open."""
        pass

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Send the entire buffer.

        Raises:
            TransportShortWrite: If fewer bytes than len(data) were accepted
            TransportError: On any other link failure
        """
        pass

    @abstractmethod
    def read(self, size: int) -> bytes:
        """Read exactly `size` bytes.

        Raises:
            TransportTimeout: If the bytes do not arrive in time. Whatever
                was received is discarded.
            TransportError: On any other link failure
        """
        pass

    def __enter__(self) -> Channel:
        """Context manager support - open on enter."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager support - close on exit."""
        self.close()
