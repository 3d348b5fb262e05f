"""Unit tests for StateBroker."""

import threading
import unittest

from amp_sdk.broker import StateBroker
from amp_sdk.device import DeviceController
from amp_sdk.errors import (
    ProtocolUnexpectedEcho,
    ProtocolUnexpectedHeader,
    TransportTimeout,
    UnknownAction,
    UnsupportedOperation,
)
from amp_sdk.models import Action, Effect, Status
from fakes import FakeAmplifier, ScriptedChannel, status_block


class BrokerTestCase(unittest.TestCase):

    def make_broker(self, amp=None, **kwargs):
        self.amp = amp or FakeAmplifier(volume=0x20, input_byte=0x00, standby=True)
        self.channel = ScriptedChannel(responder=self.amp, **kwargs)
        self.controller = DeviceController(self.channel)
        self.broker = StateBroker(self.controller)
        return self.broker


class TestBrokerApply(BrokerTestCase):
    """Tests for apply()."""

    def test_every_action_publishes_once(self):
        expectations = {
            "volume_up": lambda s: s.main_volume == 0x21,
            "volume_down": lambda s: s.main_volume == 0x1F,
            "turn_on": lambda s: s.standby is False,
            "turn_off": lambda s: s.standby is True,
            "effect_3d": lambda s: s.input_1_effect is Effect.THREE_D,
            "effect_2_1": lambda s: s.input_1_effect is Effect.TWO_ONE,
            "effect_4_1": lambda s: s.input_1_effect is Effect.FOUR_ONE,
            "effect_disabled": lambda s: s.input_1_effect is Effect.DISABLED,
            "select_input_3_5mm": lambda s: s.input == 3,
            "select_input_rca": lambda s: s.input == 6,
        }
        for name, check in expectations.items():
            with self.subTest(action=name):
                broker = self.make_broker()
                subscription = broker.subscribe()
                initial = subscription.get_nowait()

                result = broker.apply(name)

                published = subscription.get_nowait()
                self.assertIsNotNone(initial)
                self.assertEqual(published, result)
                self.assertTrue(check(published), published)
                self.assertIsNone(subscription.get_nowait())

    def test_apply_sends_command_then_status(self):
        broker = self.make_broker()

        broker.apply(Action.VOLUME_UP)

        self.assertEqual(self.channel.writes, [bytes([0x08]), bytes([0x34])])

    def test_apply_updates_cache(self):
        broker = self.make_broker()

        status = broker.apply("turn_on")

        self.assertIs(self.controller.cached_status(), status)
        self.assertIs(broker.cached_status(), status)

    def test_unknown_action_no_io_no_publish(self):
        broker = self.make_broker()
        subscription = broker.subscribe()
        subscription.get_nowait()
        writes_before = len(self.channel.writes)

        with self.assertRaises(UnknownAction):
            broker.apply("select_input_optical")

        self.assertEqual(len(self.channel.writes), writes_before)
        self.assertIsNone(subscription.get_nowait())

    def test_mute_unsupported_no_publish(self):
        broker = self.make_broker()
        subscription = broker.subscribe()
        subscription.get_nowait()
        writes_before = len(self.channel.writes)

        with self.assertRaises(UnsupportedOperation):
            broker.apply("mute")

        self.assertEqual(len(self.channel.writes), writes_before)
        self.assertIsNone(subscription.get_nowait())

    def test_failure_keeps_cache_and_releases_guard(self):
        channel = ScriptedChannel([
            status_block(volume=0x10),        # subscribe
            bytes([0x00]),                    # bad effect echo
            bytes([0x08]),                    # volume_up ack
            status_block(volume=0x11),        # status after volume_up
        ])
        broker = StateBroker(DeviceController(channel))
        subscription = broker.subscribe()
        initial = subscription.get_nowait()

        with self.assertRaises(ProtocolUnexpectedEcho):
            broker.apply("effect_3d")

        self.assertIsNone(subscription.get_nowait())
        self.assertEqual(broker.cached_status(), initial)

        status = broker.apply("volume_up")
        self.assertEqual(status.main_volume, 0x11)
        self.assertEqual(subscription.get_nowait(), status)

    def test_status_failure_after_command_no_publish(self):
        bad = bytearray(status_block())
        bad[0] = 0x55
        channel = ScriptedChannel([status_block(volume=0x10), bytes([0x11]), bytes(bad)])
        broker = StateBroker(DeviceController(channel))
        subscription = broker.subscribe()
        initial = subscription.get_nowait()

        with self.assertRaises(ProtocolUnexpectedHeader):
            broker.apply("volume_up")

        self.assertIsNone(subscription.get_nowait())
        self.assertEqual(broker.cached_status(), initial)

    def test_timeout_releases_guard(self):
        channel = ScriptedChannel([b"", bytes([0x08]), status_block()])
        broker = StateBroker(DeviceController(channel))

        with self.assertRaises(TransportTimeout):
            broker.apply("turn_on")

        self.assertIsInstance(broker.apply("volume_up"), Status)

    def test_configuration_reset_publishes(self):
        broker = self.make_broker()
        subscription = broker.subscribe()
        subscription.get_nowait()

        status = broker.configuration_reset()

        self.assertEqual(subscription.get_nowait(), status)
        self.assertEqual(self.channel.writes[-1], bytes([0x34]))

    def test_reset_idle_timeout_does_not_publish(self):
        broker = self.make_broker()
        subscription = broker.subscribe()
        subscription.get_nowait()

        broker.reset_idle_timeout()

        self.assertEqual(self.channel.writes[-1], bytes([0x30]))
        self.assertIsNone(subscription.get_nowait())

    def test_status_rereads_without_publishing(self):
        broker = self.make_broker()
        subscription = broker.subscribe()
        subscription.get_nowait()
        self.amp.volume = 0x40

        status = broker.status()

        self.assertEqual(status.main_volume, 0x40)
        self.assertEqual(broker.cached_status(), status)
        self.assertIsNone(subscription.get_nowait())


class TestBrokerSubscribe(BrokerTestCase):
    """Tests for subscribe()."""

    def test_first_subscriber_triggers_read(self):
        broker = self.make_broker()

        subscription = broker.subscribe()

        self.assertEqual(self.channel.writes, [bytes([0x34])])
        self.assertEqual(subscription.get_nowait().main_volume, 0x20)

    def test_late_subscriber_gets_cache_without_io(self):
        broker = self.make_broker()
        status = broker.apply("volume_up")
        writes_before = len(self.channel.writes)
        reads_before = self.channel.reads

        subscription = broker.subscribe()

        self.assertEqual(subscription.get_nowait(), status)
        self.assertEqual(len(self.channel.writes), writes_before)
        self.assertEqual(self.channel.reads, reads_before)

    def test_all_subscribers_notified(self):
        broker = self.make_broker()
        subscriptions = [broker.subscribe() for _ in range(3)]
        for subscription in subscriptions:
            subscription.get_nowait()

        status = broker.apply("turn_on")

        for subscription in subscriptions:
            self.assertEqual(subscription.get_nowait(), status)

    def test_unsubscribe(self):
        broker = self.make_broker()
        subscription = broker.subscribe()
        self.assertEqual(broker.subscriber_count, 1)

        subscription.close()

        self.assertEqual(broker.subscriber_count, 0)
        broker.apply("volume_up")

    def test_subscribe_failure_not_registered(self):
        channel = ScriptedChannel([bytes(24)])
        broker = StateBroker(DeviceController(channel))

        with self.assertRaises(ProtocolUnexpectedHeader):
            broker.subscribe()

        self.assertEqual(broker.subscriber_count, 0)

    def test_slow_subscriber_does_not_block(self):
        amp = FakeAmplifier(volume=0x00)
        channel = ScriptedChannel(responder=amp)
        broker = StateBroker(DeviceController(channel), subscriber_buffer=2)
        slow = broker.subscribe()

        for _ in range(10):
            broker.apply("volume_up")

        self.assertEqual(slow.latest().main_volume, 10)
        self.assertGreater(slow.dropped, 0)

    def test_close(self):
        broker = self.make_broker()
        subscription = broker.subscribe()

        broker.close()

        self.assertTrue(subscription.closed)
        self.assertFalse(self.channel.is_open)
        self.assertEqual(broker.subscriber_count, 0)


class TestBrokerConcurrency(BrokerTestCase):
    """Tests for mutual exclusion on the link."""

    def test_concurrent_apply_never_interleaves(self):
        broker = self.make_broker(amp=FakeAmplifier(volume=0x00), delay=0.001)
        subscription = broker.subscribe()
        subscription.get_nowait()
        errors = []

        def worker():
            for _ in range(10):
                try:
                    broker.apply("volume_up")
                except Exception as e:
                    errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10.0)

        self.assertEqual(errors, [])
        self.assertFalse(self.channel.interleaved)
        self.assertEqual(broker.cached_status().main_volume, 50)

    def test_published_order_matches_apply_order(self):
        amp = FakeAmplifier(volume=0x00)
        channel = ScriptedChannel(responder=amp, delay=0.001)
        broker = StateBroker(DeviceController(channel), subscriber_buffer=100)
        subscription = broker.subscribe()
        subscription.get_nowait()

        threads = [
            threading.Thread(target=lambda: [broker.apply("volume_up") for _ in range(5)])
            for _ in range(4)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10.0)

        volumes = []
        while True:
            status = subscription.get_nowait()
            if status is None:
                break
            volumes.append(status.main_volume)

        self.assertEqual(volumes, list(range(1, 21)))


if __name__ == '__main__':
    unittest.main()
