"""Command frames for the amplifier control port.

Pure mapping between operations and wire bytes. Every byte value here is
fixed by the device. Each operation is described by an Exchange: the frame
to send, how many bytes the device answers with and, for commands the
device acknowledges by echo, exactly which bytes must come back.

Pure functions with no side effects.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..errors import ProtocolError, ProtocolUnexpectedEcho, UnsupportedOperation
from ..models import Effect, Input

RECORD_START = 0xAA
FRAME_TRAILER = 0x36

STATUS_REQUEST = 0x34
STATUS_RESPONSE_SIZE = 24

INPUT_SELECT_OPEN = 0x09
INPUT_SELECT_CLOSE = 0x08
IDLE_RESET = 0x30


@dataclass(frozen=True)
class Exchange:
    """One request/response round trip.

    Attributes:
        name: Operation name, used for logging
        request: Frame sent verbatim
        response_size: Number of bytes the device answers with
        expected: Exact response required, or None if only the size matters
    """
    name: str
    request: bytes
    response_size: int
    expected: Optional[bytes] = None


def record_checksum(body: Iterable[int]) -> int:
    """Checksum of a record: two's complement of the byte sum.

    `body` is the record without its leading 0xAA: type, length and data.
    """
    return -sum(body) & 0xFF


def build_record(record_type: int, data: bytes) -> bytes:
    """Build a checksummed record: AA <type> <len> <data...> <checksum>."""
    body = bytes([record_type, len(data)]) + data
    return bytes([RECORD_START]) + body + bytes([record_checksum(body)])


CONFIGURATION_RESET_FRAME = (
    build_record(0x0E, bytes([0x20, 0x00, 0x00]))
    + build_record(0x0A, bytes([
        0x0A, 0x15, 0x15, 0x15, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
        0x03, 0x00, 0x00, 0x00, 0x06, 0x01, 0x03, 0x00, 0x00, 0x00,
    ]))
    + bytes([FRAME_TRAILER])
)

CONFIGURATION_RESET_ACK = bytes([0xAA, 0xFF, 0x01, 0x8A, 0x76, 0x36])


class ProtocolCodec:
    """Builds the Exchange for each amplifier operation.

    Frames:
    - 08 / 09: volume up / down, one status byte back
    - 11 11 14 39 38 30 39: power on
    - 30 37 36: power off
    - 09 <input> 35 08: select input, echoed
    - <effect>: select effect, echoed
    - 30: reset idle timeout, echoed
    - 34: request the 24-byte status block
    """

    VOLUME_UP = Exchange("volume_up", bytes([0x08]), 1)
    VOLUME_DOWN = Exchange("volume_down", bytes([0x09]), 1)
    TURN_ON = Exchange("turn_on", bytes([0x11, 0x11, 0x14, 0x39, 0x38, 0x30, 0x39]), 7)
    TURN_OFF = Exchange("turn_off", bytes([0x30, 0x37, 0x36]), 3)
    RESET_IDLE_TIMEOUT = Exchange(
        "reset_idle_timeout", bytes([IDLE_RESET]), 1, expected=bytes([IDLE_RESET])
    )
    CONFIGURATION_RESET = Exchange(
        "configuration_reset",
        CONFIGURATION_RESET_FRAME,
        len(CONFIGURATION_RESET_ACK),
        expected=CONFIGURATION_RESET_ACK,
    )
    STATUS = Exchange("status", bytes([STATUS_REQUEST]), STATUS_RESPONSE_SIZE)

    @staticmethod
    def select_input(input: Input) -> Exchange:
        """Input selection; the device echoes the whole frame.

        The effect slot is always sent as Disabled.
        """
        frame = bytes([INPUT_SELECT_OPEN, int(input), Effect.DISABLED, INPUT_SELECT_CLOSE])
        return Exchange("select_input", frame, len(frame), expected=frame)

    @staticmethod
    def select_effect(effect: Effect) -> Exchange:
        """Effect selection for the current input; echoed."""
        frame = bytes([int(effect)])
        return Exchange("select_effect", frame, 1, expected=frame)

    @staticmethod
    def mute() -> Exchange:
        """Mute has no known wire command."""
        raise UnsupportedOperation("mute has no known wire command")

    @staticmethod
    def check_response(exchange: Exchange, response: bytes) -> bytes:
        """Validate a response against its exchange.

        Returns:
            The response, unchanged

        Raises:
            ProtocolError: If the response has the wrong size
            ProtocolUnexpectedEcho: If an acknowledgement does not match
        """
        if len(response) != exchange.response_size:
            raise ProtocolError(
                f"{exchange.name}: expected {exchange.response_size} bytes, got {len(response)}",
                response=response,
            )

        if exchange.expected is not None and response != exchange.expected:
            raise ProtocolUnexpectedEcho(
                f"{exchange.name}: expected {exchange.expected.hex(' ')}, got {response.hex(' ')}",
                response=response,
            )

        return response
