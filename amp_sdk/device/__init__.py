"""Device layer: one controller per physical amplifier."""

from .controller import DeviceController

__all__ = ["DeviceController"]
