"""Serial channel to the amplifier's control port.

The control port is an FTDI USB serial adapter wired to the amplifier's
console connector. Link parameters are fixed by the device:
57600 baud, 8 data bits, odd parity, 1 stop bit.

This module handles:
- Opening/closing the port with the fixed parameters
- Whole-frame writes (short writes are reported, never retried)
- Exact-size reads that accumulate across pyserial reads until a deadline
"""
from __future__ import annotations

import logging
import time
from typing import Optional

import serial

from ..errors import TransportError, TransportOpenError, TransportShortWrite, TransportTimeout
from .base import Channel

logger = logging.getLogger(__name__)

DEFAULT_BAUDRATE = 57_600
READ_TIMEOUT = 1.0  # seconds


class SerialChannel(Channel):
    """Byte-exact serial link to the amplifier.

    Example:
        >>> channel = SerialChannel("/dev/ttyUSB0")
        >>> channel.open()
        >>> channel.write(bytes([0x34]))
        >>> response = channel.read(24)
        >>> channel.close()
    """

    def __init__(self,
                 port: str,
                 baudrate: int = DEFAULT_BAUDRATE,
                 timeout: float = READ_TIMEOUT):
        """Initialize serial channel.

        Args:
            port: Serial port path (e.g., '/dev/ttyUSB0', 'COM3')
            baudrate: Serial baud rate (default 57600)
            timeout: Per-read timeout in seconds, also the deadline for
                collecting a whole response
        """
        self._port = port
        self._baudrate = baudrate
        self._timeout = timeout

        self._serial: Optional[serial.Serial] = None

    @property
    def port(self) -> str:
        return self._port

    @property
    def is_open(self) -> bool:
        return self._serial is not None

    def open(self) -> None:
        """Open the serial port with the amplifier's link parameters."""
        if self._serial is not None:
            logger.warning("Already open")
            return

        port = None
        try:
            port = serial.Serial(
                port=self._port,
                baudrate=self._baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_ODD,
                stopbits=serial.STOPBITS_ONE,
                timeout=self._timeout,
            )
            # Drop anything left over from a previous session
            port.reset_input_buffer()
            port.reset_output_buffer()
        except serial.SerialException as e:
            logger.error(f"Failed to open {self._port}: {e}")
            if port is not None:
                port.close()
            raise TransportOpenError(f"Failed to open {self._port}: {e}", port=self._port) from e

        self._serial = port
        logger.info(f"Opened {self._port} @ {self._baudrate} baud")

    def close(self) -> None:
        """Close the serial port."""
        if self._serial is None:
            return

        try:
            self._serial.close()
        except serial.SerialException as e:
            logger.error(f"Error closing serial port: {e}")
        finally:
            self._serial = None

        logger.info(f"Closed {self._port}")

    def write(self, data: bytes) -> None:
        """Send the whole frame in a single write."""
        port = self._require_open()

        try:
            written = port.write(data)
            port.flush()
        except serial.SerialException as e:
            logger.error(f"Write error: {e}")
            raise TransportError(f"Write to {self._port} failed: {e}") from e

        if written is not None and written != len(data):
            raise TransportShortWrite(
                f"Short write: {written} of {len(data)} bytes",
                expected=len(data),
                written=written,
            )

        logger.debug(f"TX {data.hex(' ')}")

    def read(self, size: int) -> bytes:
        """Collect exactly `size` bytes or time out."""
        port = self._require_open()

        buffer = bytearray()
        deadline = time.monotonic() + self._timeout

        while len(buffer) < size:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning(f"Read timeout: got {len(buffer)} of {size} bytes, discarding")
                raise TransportTimeout(
                    f"Timed out waiting for {size} bytes (received {len(buffer)})",
                    expected=size,
                    received=len(buffer),
                )

            try:
                # A trickling device must not stretch the read past the deadline
                port.timeout = remaining
                chunk = port.read(size - len(buffer))
            except serial.SerialException as e:
                logger.error(f"Read error: {e}")
                raise TransportError(f"Read from {self._port} failed: {e}") from e

            buffer.extend(chunk)

        data = bytes(buffer)
        logger.debug(f"RX {data.hex(' ')}")
        return data

    def _require_open(self) -> serial.Serial:
        if self._serial is None:
            raise TransportError(f"{self._port} is not open")
        return self._serial
