"""Unit tests for data models."""

import unittest
from dataclasses import FrozenInstanceError

from amp_sdk.errors import UnknownAction
from amp_sdk.models import Action, Effect, Input, Status, to_effect


def make_status(**overrides):
    fields = dict(
        main_volume=0x20,
        input=3,
        standby=False,
        input_1_effect=Effect.THREE_D,
        input_2_effect=Effect.TWO_ONE,
        input_6_effect=Effect.DISABLED,
    )
    fields.update(overrides)
    return Status(**fields)


class TestEffectAndInput(unittest.TestCase):
    """Tests for the byte code enums."""

    def test_effect_codes(self):
        self.assertEqual(Effect.THREE_D, 0x14)
        self.assertEqual(Effect.FOUR_ONE, 0x15)
        self.assertEqual(Effect.TWO_ONE, 0x16)
        self.assertEqual(Effect.DISABLED, 0x35)

    def test_input_codes(self):
        self.assertEqual(Input.INPUT_3_5MM, 0x02)
        self.assertEqual(Input.INPUT_RCA, 0x05)

    def test_to_effect_known(self):
        self.assertIs(to_effect(0x16), Effect.TWO_ONE)

    def test_to_effect_unknown_kept_raw(self):
        value = to_effect(0x99)
        self.assertEqual(value, 0x99)
        self.assertNotIsInstance(value, Effect)


class TestStatus(unittest.TestCase):
    """Tests for the Status snapshot."""

    def test_immutability(self):
        status = make_status()
        with self.assertRaises(FrozenInstanceError):
            status.main_volume = 50

    def test_equality(self):
        self.assertEqual(make_status(), make_status())
        self.assertNotEqual(make_status(), make_status(standby=True))

    def test_to_dict_plain_values(self):
        data = make_status().to_dict()

        self.assertEqual(data, {
            "main_volume": 0x20,
            "input": 3,
            "standby": False,
            "input_1_effect": 0x14,
            "input_2_effect": 0x16,
            "input_6_effect": 0x35,
        })
        self.assertIs(type(data["input_1_effect"]), int)

    def test_from_dict(self):
        status = Status.from_dict({
            "main_volume": 10,
            "input": 6,
            "standby": True,
            "input_1_effect": 0x15,
            "input_2_effect": 0x35,
            "input_6_effect": 0x14,
        })

        self.assertEqual(status.main_volume, 10)
        self.assertEqual(status.input, 6)
        self.assertTrue(status.standby)
        self.assertIs(status.input_1_effect, Effect.FOUR_ONE)
        self.assertIs(status.input_2_effect, Effect.DISABLED)
        self.assertIs(status.input_6_effect, Effect.THREE_D)

    def test_from_dict_missing_field(self):
        with self.assertRaises(KeyError):
            Status.from_dict({"main_volume": 10})


class TestAction(unittest.TestCase):
    """Tests for front-end action names."""

    def test_parse_all_names(self):
        names = [
            "volume_up", "volume_down", "turn_on", "turn_off", "mute",
            "effect_3d", "effect_2_1", "effect_4_1", "effect_disabled",
            "select_input_3_5mm", "select_input_rca",
        ]
        for name in names:
            self.assertEqual(Action.parse(name).value, name)

    def test_parse_unknown(self):
        with self.assertRaises(UnknownAction) as ctx:
            Action.parse("self_destruct")
        self.assertEqual(ctx.exception.action, "self_destruct")

    def test_parse_is_case_sensitive(self):
        with self.assertRaises(UnknownAction):
            Action.parse("VOLUME_UP")

    def test_parse_non_string(self):
        with self.assertRaises(UnknownAction):
            Action.parse(None)

    def test_effect_mapping(self):
        self.assertIs(Action.EFFECT_3D.effect, Effect.THREE_D)
        self.assertIs(Action.EFFECT_2_1.effect, Effect.TWO_ONE)
        self.assertIs(Action.EFFECT_4_1.effect, Effect.FOUR_ONE)
        self.assertIs(Action.EFFECT_DISABLED.effect, Effect.DISABLED)
        self.assertIsNone(Action.VOLUME_UP.effect)

    def test_input_mapping(self):
        self.assertIs(Action.SELECT_INPUT_3_5MM.input, Input.INPUT_3_5MM)
        self.assertIs(Action.SELECT_INPUT_RCA.input, Input.INPUT_RCA)
        self.assertIsNone(Action.MUTE.input)


if __name__ == '__main__':
    unittest.main()
