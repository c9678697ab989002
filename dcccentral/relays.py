"""Pulsed relays of the station's own turnouts."""

from __future__ import annotations

import time
from collections.abc import Callable

from dcccentral.state import ControllerState

STRAIGHT_PINS = (8, 9, 10, 11)
SWITCHED_PINS = (15, 16, 17, 18)
PULSE_MS = 300
MIN_RELAY_ADDRESS = 128
MAX_RELAY_ADDRESS = 133
FIRST_RELAY_ADDRESS = 129


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class RelayBank:
    """Drives four relay pairs; the relays are active low.

    ``output`` is called with a pin number and ``True`` for high, ``False`` for low.
    ``clock`` returns the current time in milliseconds.
    """

    def __init__(
        self,
        output: Callable[[int, bool], object],
        clock: Callable[[], int] = _monotonic_ms,
    ) -> None:
        self.output = output
        self.clock = clock
        self.active = False
        self._started = 0
        self._index = 0
        for straight, switched in zip(STRAIGHT_PINS, SWITCHED_PINS):
            output(straight, True)
            output(switched, True)

    def update(self, state: ControllerState) -> None:
        """Start a relay pulse for the requested relay, or end a running one."""
        address = state.relay_address
        if not MIN_RELAY_ADDRESS <= address <= MAX_RELAY_ADDRESS:
            return

        if not self.active:
            index = address - FIRST_RELAY_ADDRESS
            if not 0 <= index < len(STRAIGHT_PINS):
                # Addresses in range without a physical relay are consumed.
                state.relay_pending = False
                return
            pins = SWITCHED_PINS if state.relay_state else STRAIGHT_PINS
            self.output(pins[index], False)
            self._started = self.clock()
            self._index = index
            self.active = True
        elif self.clock() - self._started >= PULSE_MS:
            self.output(STRAIGHT_PINS[self._index], True)
            self.output(SWITCHED_PINS[self._index], True)
            state.relay_pending = False
            self.active = False