"""Device controller for the amplifier.

Owns one Channel and the last known Status. Each operation is a single
request/response exchange built by ProtocolCodec; status() additionally
decodes the response and refreshes the cache.

The controller is NOT thread-safe. Share it through a StateBroker.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..models import Action, Effect, Input, Status
from ..protocol.codec import Exchange, ProtocolCodec
from ..protocol.parser import StatusParser
from ..transport.base import Channel

logger = logging.getLogger(__name__)


class DeviceController:
    """Runs amplifier commands over a channel and caches the last status.

    Mutating operations never touch the cache; whoever issues them is
    responsible for calling status() afterwards.
    """

    def __init__(self, channel: Channel):
        """Initialize controller.

        Args:
            channel: Open (or openable) channel to the amplifier
        """
        self._channel = channel
        self._cached_status: Optional[Status] = None

    @property
    def channel(self) -> Channel:
        return self._channel

    @property
    def has_cached_status(self) -> bool:
        return self._cached_status is not None

    def open(self) -> None:
        """Open the channel if it is not open yet."""
        if not self._channel.is_open:
            self._channel.open()

    def close(self) -> None:
        """Close the channel."""
        self._channel.close()

    # --- Status ---

    def status(self) -> Status:
        """Read, validate and decode the status block, refreshing the cache."""
        response = self._exchange(ProtocolCodec.STATUS)
        status = StatusParser.parse(response)
        self._cached_status = status
        return status

    def cached_status(self) -> Status:
        """Return the cached status, reading it from the device if absent."""
        if self._cached_status is not None:
            return self._cached_status
        return self.status()

    # --- Commands ---

    def volume_up(self) -> None:
        self._exchange(ProtocolCodec.VOLUME_UP)

    def volume_down(self) -> None:
        self._exchange(ProtocolCodec.VOLUME_DOWN)

    def turn_on(self) -> None:
        self._exchange(ProtocolCodec.TURN_ON)

    def turn_off(self) -> None:
        self._exchange(ProtocolCodec.TURN_OFF)

    def mute(self) -> None:
        self._exchange(ProtocolCodec.mute())

    def select_input(self, input: Input) -> None:
        self._exchange(ProtocolCodec.select_input(input))

    def select_effect(self, effect: Effect) -> None:
        self._exchange(ProtocolCodec.select_effect(effect))

    def configuration_reset(self) -> None:
        self._exchange(ProtocolCodec.CONFIGURATION_RESET)

    def reset_idle_timeout(self) -> None:
        """Defer the amplifier's idle standby.

        The console sends this every 60 seconds; the amplifier drops into
        standby after two hours without one (or without audible input).
        """
        self._exchange(ProtocolCodec.RESET_IDLE_TIMEOUT)

    def execute(self, action: Action) -> None:
        """Run the command behind a front-end action."""
        if action.effect is not None:
            self.select_effect(action.effect)
        elif action.input is not None:
            self.select_input(action.input)
        elif action is Action.VOLUME_UP:
            self.volume_up()
        elif action is Action.VOLUME_DOWN:
            self.volume_down()
        elif action is Action.TURN_ON:
            self.turn_on()
        elif action is Action.TURN_OFF:
            self.turn_off()
        elif action is Action.MUTE:
            self.mute()
        else:
            raise ValueError(f"No command for action {action}")

    def _exchange(self, exchange: Exchange) -> bytes:
        """Send a frame, read the response and validate it."""
        logger.debug(f"{exchange.name}: sending {len(exchange.request)} bytes")
        self._channel.write(exchange.request)
        response = self._channel.read(exchange.response_size)
        return ProtocolCodec.check_response(exchange, response)
