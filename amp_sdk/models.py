"""Immutable data models for amplifier state and actions.

Status is a frozen dataclass: the broker replaces it wholesale on every
successful status read and never mutates it in place, so snapshots can be
handed to any number of threads.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum, IntEnum
from typing import Dict, Optional, Union

from .errors import UnknownAction


class Effect(IntEnum):
    """Surround effect byte codes."""
    THREE_D = 0x14
    FOUR_ONE = 0x15
    TWO_ONE = 0x16
    DISABLED = 0x35


class Input(IntEnum):
    """Input selector byte codes.

    Only the inputs that have been observed on the wire are listed.
    """
    INPUT_3_5MM = 0x02
    INPUT_RCA = 0x05


# Effect bytes the device reports that are not one of the known codes are
# kept as raw integers.
EffectCode = Union[Effect, int]


def to_effect(value: int) -> EffectCode:
    """Convert a raw byte to an Effect, falling back to the raw integer."""
    try:
        return Effect(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class Status:
    """Snapshot of the amplifier state as reported by the status command.

    Attributes:
        main_volume: Raw device volume unit (0-255)
        input: Logical input number (1-6)
        standby: True when the amplifier is in standby
        input_1_effect: Effect configured for input 1
        input_2_effect: Effect configured for input 2
        input_6_effect: Effect configured for input 6

    Inputs 3, 4 and 5 expose no effect state over this protocol.
    """
    main_volume: int
    input: int
    standby: bool
    input_1_effect: EffectCode
    input_2_effect: EffectCode
    input_6_effect: EffectCode

    def to_dict(self) -> Dict:
        """Convert to the outbound status message (plain ints and bools)."""
        data = asdict(self)
        for key in ("input_1_effect", "input_2_effect", "input_6_effect"):
            data[key] = int(data[key])
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> Status:
        """Load from a deserialized status message."""
        return cls(
            main_volume=int(data["main_volume"]),
            input=int(data["input"]),
            standby=bool(data["standby"]),
            input_1_effect=to_effect(int(data["input_1_effect"])),
            input_2_effect=to_effect(int(data["input_2_effect"])),
            input_6_effect=to_effect(int(data["input_6_effect"])),
        )


class Action(Enum):
    """Named actions accepted from front ends."""
    VOLUME_UP = "volume_up"
    VOLUME_DOWN = "volume_down"
    TURN_ON = "turn_on"
    TURN_OFF = "turn_off"
    MUTE = "mute"
    EFFECT_3D = "effect_3d"
    EFFECT_2_1 = "effect_2_1"
    EFFECT_4_1 = "effect_4_1"
    EFFECT_DISABLED = "effect_disabled"
    SELECT_INPUT_3_5MM = "select_input_3_5mm"
    SELECT_INPUT_RCA = "select_input_rca"

    @classmethod
    def parse(cls, name: str) -> Action:
        """Look up an action by its wire name.

        Raises:
            UnknownAction: If the name is not a known action
        """
        try:
            return cls(name)
        except ValueError:
            raise UnknownAction(f"Unknown action: {name!r}", action=name) from None

    @property
    def effect(self) -> Optional[Effect]:
        """Effect selected by this action, if it is an effect action."""
        return _ACTION_EFFECTS.get(self)

    @property
    def input(self) -> Optional[Input]:
        """Input selected by this action, if it is an input action."""
        return _ACTION_INPUTS.get(self)


_ACTION_EFFECTS = {
    Action.EFFECT_3D: Effect.THREE_D,
    Action.EFFECT_2_1: Effect.TWO_ONE,
    Action.EFFECT_4_1: Effect.FOUR_ONE,
    Action.EFFECT_DISABLED: Effect.DISABLED,
}

_ACTION_INPUTS = {
    Action.SELECT_INPUT_3_5MM: Input.INPUT_3_5MM,
    Action.SELECT_INPUT_RCA: Input.INPUT_RCA,
}
