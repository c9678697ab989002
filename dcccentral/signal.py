"""Serialisation of DCC packets into track bits and their timing."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

ONE_HALF_PERIOD_US = 56
ZERO_HALF_PERIOD_US = 118
DEAD_TIME_US = 2
SYNC_BITS = 17
REPETITIONS = 5


def bit_half_period(bit: int) -> int:
    """Return the duration in microseconds of each half of a DCC bit."""
    return ONE_HALF_PERIOD_US if bit else ZERO_HALF_PERIOD_US


def packet_bits(packet: Iterable[int], preamble: int = SYNC_BITS) -> Iterator[int]:
    """Yield the bits of one packet transmission: preamble, framed bytes, end bit."""
    data = bytes(packet)
    yield from (1 for _ in range(preamble))
    for value in data:
        yield 0
        for shift in range(7, -1, -1):
            yield (value >> shift) & 1
    yield 1


def idle_bits(preamble: int = SYNC_BITS) -> Iterator[int]:
    """Yield the bits of one idle packet transmission."""
    yield from (1 for _ in range(preamble))
    yield 0
    yield from (1 for _ in range(8))
    yield from (0 for _ in range(10))
    yield from (1 for _ in range(8))
    yield 1


class SignalWriter:
    """Drives a bit output with DCC packets.

    ``output`` is called once per bit with the half-period in microseconds.
    """

    def __init__(
        self,
        output: Callable[[int], object],
        repetitions: int = REPETITIONS,
        preamble: int = SYNC_BITS,
    ) -> None:
        self.output = output
        self.repetitions = repetitions
        self.preamble = preamble

    def _emit(self, bits: Iterable[int]) -> None:
        for bit in bits:
            self.output(bit_half_period(bit))

    def send_packet(self, packet: Iterable[int]) -> None:
        """Send a packet ``repetitions`` times, each with its own preamble."""
        data = bytes(packet)
        for _ in range(self.repetitions):
            self._emit(packet_bits(data, self.preamble))

    def send_idle(self) -> None:
        """Send one idle packet."""
        self._emit(idle_bits(self.preamble))