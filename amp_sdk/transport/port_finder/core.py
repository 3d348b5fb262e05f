from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from serial.tools import list_ports

from .errors import MultiplePortsError, PortNotFoundError

logger = logging.getLogger(__name__)

FTDI_MANUFACTURER = "FTDI"


@dataclass(frozen=True)
class PortInfo:
    """
    One USB serial adapter as seen by pyserial.

    Attributes:
        port: Port name to open with pyserial (e.g. 'COM3', '/dev/ttyUSB0').
        vid: USB Vendor ID, or None if unknown.
        pid: USB Product ID, or None if unknown.
        manufacturer: USB manufacturer string, if available.
        serial_number: USB serial string, if available.
        hwid: Raw hardware ID string from pyserial (for debugging).
    """
    port: str
    vid: Optional[int]
    pid: Optional[int]
    manufacturer: Optional[str]
    serial_number: Optional[str]
    hwid: str


def _port_to_info(port) -> PortInfo:
    """Convert pyserial's ListPortInfo to PortInfo."""
    return PortInfo(
        port=port.device,
        vid=port.vid,
        pid=port.pid,
        manufacturer=port.manufacturer,
        serial_number=port.serial_number,
        hwid=port.hwid,
    )


def is_matching_port(
    info: PortInfo,
    *,
    manufacturer: Optional[str] = FTDI_MANUFACTURER,
    serial_number: Optional[str] = None,
) -> bool:
    """
    Decide whether a port looks like the amplifier's control adapter.

    Both checks are AND-combined; a criterion of None is ignored.
    The manufacturer must match exactly, as must the serial number.
    """
    if manufacturer is not None and info.manufacturer != manufacturer:
        return False

    if serial_number is not None and info.serial_number != serial_number:
        return False

    return True


def find_amplifier_ports(
    *,
    matcher: Optional[Callable[[PortInfo], bool]] = None,
    manufacturer: Optional[str] = FTDI_MANUFACTURER,
    serial_number: Optional[str] = None,
) -> List[PortInfo]:
    """
    Find every serial port that matches the amplifier adapter.

    Pass either a custom `matcher(info) -> bool` or the built-in criteria.
    """
    results: List[PortInfo] = []

    for port in list_ports.comports():
        info = _port_to_info(port)
        if matcher is not None:
            matched = matcher(info)
        else:
            matched = is_matching_port(
                info,
                manufacturer=manufacturer,
                serial_number=serial_number,
            )
        if matched:
            results.append(info)

    return results


def find_single_amplifier_port(
    *,
    matcher: Optional[Callable[[PortInfo], bool]] = None,
    manufacturer: Optional[str] = FTDI_MANUFACTURER,
    serial_number: Optional[str] = None,
) -> PortInfo:
    """
    Find exactly one amplifier port.

    Behaviour:
        - 0 matches  -> PortNotFoundError
        - 1 match    -> return it
        - >1 matches -> log error and raise MultiplePortsError
    """
    matches = find_amplifier_ports(
        matcher=matcher,
        manufacturer=manufacturer,
        serial_number=serial_number,
    )

    if not matches:
        raise PortNotFoundError("No matching amplifier port found")

    if len(matches) > 1:
        # Pin a serial number to pick one
        logger.error(
            "Multiple matching ports found; refusing to choose automatically. "
            "Ports: %s",
            matches,
        )
        raise MultiplePortsError(
            f"Multiple matching ports found ({len(matches)} ports)",
            ports=matches,
        )

    return matches[0]
