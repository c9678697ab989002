"""The command station main loop."""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Callable, Sequence
from typing import Protocol

from dcccentral.packets import accessory_packet, function_packet, speed_packet
from dcccentral.relays import RelayBank
from dcccentral.state import ControllerState, LocoState

REPEAT_INTERVAL_MS = 500
MAX_ACCESSORY_ADDRESS = 128


class PacketWriter(Protocol):
    def send_packet(self, packet: bytes) -> None: ...

    def send_idle(self) -> None: ...


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class CommandStation:
    """Sends new commands at once, repeats loco commands, and idles in between."""

    def __init__(
        self,
        writer: PacketWriter,
        relays: RelayBank | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.writer = writer
        self.relays = relays
        self.clock = clock or _monotonic_ms
        self.state = ControllerState()
        self._last_repeat = 0

    def receive(self, data: bytes | str) -> None:
        """Apply a received handset message."""
        self.state.receive(data)

    def _send_loco(self, loco: LocoState) -> None:
        self.writer.send_packet(speed_packet(loco.address, loco.speed, loco.forward))
        self.writer.send_packet(function_packet(loco.address, loco.functions))

    def process_new_data(self) -> None:
        """Send every pending loco and turnout command and clear its flag."""
        for loco in self.state.locos:
            if loco.pending:
                self._send_loco(loco)
                loco.pending = False
        if self.state.turnout_pending:
            if self.state.turnout <= MAX_ACCESSORY_ADDRESS:
                self.writer.send_packet(
                    accessory_packet(self.state.turnout, self.state.turnout_state)
                )
            self.state.turnout_pending = False

    def repeat_commands(self) -> None:
        """Resend the speed and function commands of both locos."""
        for loco in self.state.locos:
            self._send_loco(loco)

    def step(self) -> None:
        """Run one pass of the main loop."""
        if self.state.has_new_data:
            self.process_new_data()
        else:
            now = self.clock()
            if now - self._last_repeat >= REPEAT_INTERVAL_MS:
                self._last_repeat = now
                self.repeat_commands()
            else:
                self.writer.send_idle()
        if self.state.relay_pending and self.relays is not None:
            self.relays.update(self.state)


class _PacketPrinter:
    """Prints packets as hex and counts idle packets instead of flooding the output."""

    def __init__(self) -> None:
        self.idle_packets = 0

    def send_packet(self, packet: bytes) -> None:
        print(packet.hex(" "))

    def send_idle(self) -> None:
        self.idle_packets += 1


def _print_relay(pin: int, high: bool) -> None:
    print(f"relay pin {pin} {'HIGH' if high else 'LOW'}")


def main(argv: Sequence[str] | None = None) -> int:
    """Feed JSON messages, one per line, to a station and print the packets sent."""
    parser = argparse.ArgumentParser(
        prog="dcccentral",
        description="Run the command station on JSON messages and print DCC packets.",
    )
    parser.add_argument(
        "messages", nargs="?", default="-", help="file with one JSON message per line"
    )
    args = parser.parse_args(argv)

    relays = RelayBank(_print_relay)
    printer = _PacketPrinter()
    station = CommandStation(printer, relays)

    stream = sys.stdin if args.messages == "-" else open(args.messages, encoding="utf-8")
    try:
        for line in stream:
            line = line.strip()
            if not line:
                continue
            station.receive(line)
            station.step()
            while relays.active:
                time.sleep(0.01)
                station.step()
    finally:
        if stream is not sys.stdin:
            stream.close()
    print(f"idle packets: {printer.idle_packets}", file=sys.stderr)
    return 0