#!/usr/bin/env python3
"""
Interactive Amplifier Test Script.

Connects to the amplifier, prints its status, and lets you type actions
(volume_up, effect_3d, select_input_rca, ...) while a second thread prints
every published status.
"""

import sys
import threading
import logging
from pathlib import Path

# Add SDK to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from amp_sdk import Action, AmpError, DeviceController, KeepAlive, SerialChannel, StateBroker
from amp_sdk.transport.port_finder import PortNotFoundError, MultiplePortsError, find_single_amplifier_port

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)


def print_updates(subscription):
    for status in subscription:
        print(f"\n[status] volume={status.main_volume} input={status.input} "
              f"standby={status.standby} effects(1/2/6)="
              f"{status.input_1_effect:#04x}/{status.input_2_effect:#04x}/{status.input_6_effect:#04x}")


def main():
    port = sys.argv[1] if len(sys.argv) > 1 else None

    if port is None:
        print("Looking for the amplifier adapter...")
        try:
            port = find_single_amplifier_port().port
        except (PortNotFoundError, MultiplePortsError) as e:
            print(f"{e}. Pass the port explicitly: try_amp.py /dev/ttyUSB0")
            return

    channel = SerialChannel(port)
    try:
        channel.open()
    except AmpError as e:
        print(f"Failed to open {port}: {e}")
        return

    broker = StateBroker(DeviceController(channel))
    keepalive = KeepAlive(broker)

    try:
        subscription = broker.subscribe()
        threading.Thread(target=print_updates, args=(subscription,), daemon=True).start()
        keepalive.start()

        print(f"Actions: {', '.join(a.value for a in Action)}")
        print("Empty line quits.")
        while True:
            line = input("> ").strip()
            if not line:
                break
            try:
                broker.apply(line)
            except AmpError as e:
                print(f"{type(e).__name__}: {e}")

    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    except AmpError as e:
        print(f"Amplifier error: {e}")
    finally:
        print("\nDisconnecting...")
        keepalive.stop()
        broker.close()
        print("Done.")


if __name__ == "__main__":
    main()
