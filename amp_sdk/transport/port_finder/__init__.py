from .core import (
    FTDI_MANUFACTURER,
    PortInfo,
    find_amplifier_ports,
    find_single_amplifier_port,
    is_matching_port,
)
from .errors import MultiplePortsError, PortNotFoundError

__all__ = [
    "FTDI_MANUFACTURER",
    "PortInfo",
    "find_amplifier_ports",
    "find_single_amplifier_port",
    "is_matching_port",
    "PortNotFoundError",
    "MultiplePortsError",
]
