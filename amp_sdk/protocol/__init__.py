"""Protocol layer for the amplifier control port."""

from .codec import (
    CONFIGURATION_RESET_ACK,
    CONFIGURATION_RESET_FRAME,
    Exchange,
    ProtocolCodec,
    build_record,
    record_checksum,
)
from .parser import STATUS_HEADER, STATUS_LAYOUT, StatusField, StatusParser
from .messages import decode_status, encode_error, encode_status, parse_action_message

__all__ = [
    "CONFIGURATION_RESET_ACK",
    "CONFIGURATION_RESET_FRAME",
    "Exchange",
    "ProtocolCodec",
    "build_record",
    "record_checksum",
    "STATUS_HEADER",
    "STATUS_LAYOUT",
    "StatusField",
    "StatusParser",
    "decode_status",
    "encode_error",
    "encode_status",
    "parse_action_message",
]
