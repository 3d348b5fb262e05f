"""Status block parser.

Decodes the 24-byte response to the status command into a Status snapshot.
The field offsets are listed in STATUS_LAYOUT so every magic number lives
in one table.

Pure functions with no side effects.
"""
from __future__ import annotations

from typing import Any, Callable, NamedTuple, Tuple

from ..errors import ProtocolError, ProtocolUnexpectedHeader
from ..models import Status, to_effect
from .codec import STATUS_RESPONSE_SIZE

STATUS_HEADER = bytes([0xAA, 0x0A, 0x14])
STANDBY_ON = 0x01


class StatusField(NamedTuple):
    """One decoded field of the status block."""
    offset: int
    name: str
    transform: Callable[[int], Any]


# Effect offsets map to logical inputs 2, 6 and 1 in that order. This is how
# the device reports them; it does not extend to inputs 3-5.
STATUS_LAYOUT: Tuple[StatusField, ...] = (
    StatusField(3, "main_volume", int),
    StatusField(7, "input", lambda value: value + 1),  # wire 0-5 -> 1-6
    StatusField(11, "input_2_effect", to_effect),
    StatusField(12, "input_6_effect", to_effect),
    StatusField(13, "input_1_effect", to_effect),
    StatusField(20, "standby", lambda value: value == STANDBY_ON),
)


class StatusParser:
    """Parser for the status block.

    Layout (offsets into the 24-byte response):
    - 0..2: header AA 0A 14
    - 3: main volume
    - 7: selected input, 0-based
    - 11, 12, 13: effects of inputs 2, 6 and 1
    - 20: standby flag
    """

    @staticmethod
    def parse(response: bytes) -> Status:
        """Decode a status response.

        Args:
            response: Raw bytes read after the status request

        Returns:
            Status snapshot

        Raises:
            ProtocolUnexpectedHeader: If the response does not start with AA 0A 14
            ProtocolError: If the response is not a whole status block

        Examples:
            >>> block = bytearray(24)
            >>> block[0:4] = bytes([0xAA, 0x0A, 0x14, 0x20])
            >>> StatusParser.parse(bytes(block)).main_volume
            32
        """
        if response[:len(STATUS_HEADER)] != STATUS_HEADER:
            raise ProtocolUnexpectedHeader(
                f"Unexpected status header: {response[:len(STATUS_HEADER)].hex(' ')}",
                response=response,
            )

        if len(response) != STATUS_RESPONSE_SIZE:
            raise ProtocolError(
                f"Status block must be {STATUS_RESPONSE_SIZE} bytes, got {len(response)}",
                response=response,
            )

        fields = {field.name: field.transform(response[field.offset]) for field in STATUS_LAYOUT}
        return Status(**fields)
