"""Controller state fed by JSON messages from the remote handsets."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any

from dcccentral.packets import FUNCTION_COUNT

MAX_MESSAGE_SIZE = 100
MAX_TURNOUT_ADDRESS = 127
MAX_RELAY_ADDRESS = 133
DEFAULT_RELAY_ADDRESS = 128

LOCO1_ID = 1
LOCO2_ID = 2
TURNOUT_IDS = (3, 4)


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return 0


def _as_bool(value: Any) -> bool:
    if isinstance(value, (bool, int, float)):
        return bool(value)
    return False


def _no_functions() -> list[bool]:
    return [False] * FUNCTION_COUNT


@dataclass
class LocoState:
    """Last commanded state of one locomotive."""

    address: int = 0
    speed: int = 0
    forward: bool = True
    function: int = 0
    function_on: bool = False
    functions: list[bool] = field(default_factory=_no_functions)
    pending: bool = False
    _tracked_address: int = field(default=-1, init=False, repr=False)

    def _apply(self, message: dict[str, Any]) -> None:
        address = _as_int(message.get("lok"))
        if address != self._tracked_address:
            self.functions = _no_functions()
            self._tracked_address = address

        self.address = address
        self.speed = _as_int(message.get("speed"))
        self.function = _as_int(message.get("funktion"))
        self.function_on = _as_bool(message.get("zustand"))
        self.forward = _as_bool(message.get("richtung"))

        if 0 <= self.function < FUNCTION_COUNT:
            self.functions[self.function] = self.function_on

        self.pending = True


@dataclass
class ControllerState:
    """Everything the command station knows about locos, turnouts and relays."""

    message_id: int = LOCO1_ID
    loco1: LocoState = field(default_factory=LocoState)
    loco2: LocoState = field(default_factory=LocoState)
    turnout: int = 0
    turnout_state: bool = False
    turnout_pending: bool = False
    relay_address: int = DEFAULT_RELAY_ADDRESS
    relay_state: bool = False
    relay_pending: bool = False

    @property
    def locos(self) -> tuple[LocoState, LocoState]:
        return (self.loco1, self.loco2)

    @property
    def has_new_data(self) -> bool:
        """True when a loco or turnout command waits to be sent."""
        return self.loco1.pending or self.loco2.pending or self.turnout_pending

    def receive(self, data: bytes | str) -> None:
        """Apply one received message.

        Messages longer than the receive buffer or not valid JSON are ignored.
        """
        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        if len(raw) > MAX_MESSAGE_SIZE:
            return
        try:
            document = json.loads(raw)
        except ValueError:
            return
        message = document if isinstance(document, dict) else {}

        self.message_id = _as_int(message.get("id"))
        if self.message_id == LOCO1_ID:
            self.loco1._apply(message)
        elif self.message_id == LOCO2_ID:
            self.loco2._apply(message)

        if self.message_id in TURNOUT_IDS:
            self._apply_turnout(message)

    def _apply_turnout(self, message: dict[str, Any]) -> None:
        address = _as_int(message.get("weiche"))
        switched = _as_bool(message.get("zustand"))
        if address <= MAX_TURNOUT_ADDRESS:
            self.turnout = address
            self.turnout_state = switched
            self.turnout_pending = True
        if address <= MAX_RELAY_ADDRESS:
            self.relay_address = address
            self.relay_state = switched
            self.relay_pending = True