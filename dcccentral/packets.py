"""Construction of DCC baseline packets for locomotives, accessories and CV programming."""

from __future__ import annotations

from collections.abc import Iterable
from functools import reduce
from operator import xor

MIN_LOCO_ADDRESS = 1
MAX_LOCO_ADDRESS = 127
MAX_SPEED_STEP = 28
EMERGENCY_STOP = -1
FUNCTION_COUNT = 13

_SPEED_BASE = 0b01000000
_DIRECTION_BIT = 0b00100000
_EMERGENCY_STOP_BITS = 0b00000001

# Speed-step bit patterns (28-step mode, intermediate bit in position 4).
_SPEED_BITS = (
    0b00000, 0b00010, 0b10010, 0b00011, 0b10011, 0b00100, 0b10100,
    0b00101, 0b10101, 0b00110, 0b10110, 0b00111, 0b10111, 0b01000,
    0b11000, 0b01001, 0b11001, 0b01010, 0b11010, 0b01011, 0b11011,
    0b01100, 0b11100, 0b01101, 0b11101, 0b01110, 0b11110, 0b01111, 0b11111,
)

_GROUP_F0_F4 = 0b10000000
_GROUP_F5_F8 = 0b10110000
_GROUP_F9_F12 = 0b10100000

# Bit positions of F0..F4 inside the first function group byte.
_F0_F4_BITS = (4, 0, 1, 2, 3)

POM_ADDRESS = 0x03
POM_INSTRUCTION = 0xEC


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def loco_address_byte(address: int) -> int:
    """Return the short-address byte for a locomotive, clamped to 1..127."""
    return _clamp(address, MIN_LOCO_ADDRESS, MAX_LOCO_ADDRESS) & 0b01111111


def speed_byte(speed: int, forward: bool) -> int:
    """Return the 28-step speed and direction instruction byte.

    A speed of -1 requests an emergency stop; other values are clamped to 0..28.
    """
    command = _SPEED_BASE
    if speed == EMERGENCY_STOP:
        return command | _EMERGENCY_STOP_BITS
    speed = _clamp(speed, 0, MAX_SPEED_STEP)
    if forward:
        command |= _DIRECTION_BIT
    return command | _SPEED_BITS[speed]


def _normalise_functions(functions: Iterable[bool]) -> list[bool]:
    states = [bool(state) for state in functions][:FUNCTION_COUNT]
    states.extend([False] * (FUNCTION_COUNT - len(states)))
    return states


def _group_bits(states: Iterable[bool]) -> int:
    return sum(1 << bit for bit, state in enumerate(states) if state)


def function_byte(functions: Iterable[bool]) -> int:
    """Return the function-group instruction byte for the states F0..F12.

    Missing entries count as off. When any of F5..F8 is on, that group replaces
    the F0..F4 group; when any of F9..F12 is on, that group replaces both.
    """
    states = _normalise_functions(functions)

    command = _GROUP_F0_F4
    for state, bit in zip(states[0:5], _F0_F4_BITS):
        if state:
            command |= 1 << bit

    if any(states[5:9]):
        command = _GROUP_F5_F8 | _group_bits(states[5:9])

    if any(states[9:13]):
        command = _GROUP_F9_F12 | _group_bits(states[9:13])

    return command


def accessory_byte(address: int, straight: bool, byte_num: int) -> int:
    """Return byte 1 or 2 of a basic accessory decoder packet.

    Address 1 corresponds to the internal address 4. Any other byte number yields 0.
    """
    full_address = (address + 3) & 0x7FF

    if byte_num == 1:
        return 0b10000000 | ((full_address >> 2) & 0x3F)

    if byte_num == 2:
        result = 0b10000000
        result |= ((~full_address >> 8) & 0b0111) << 4
        result |= 1 << 3
        result |= int(bool(straight))
        return (result & 0b11111101) | ((full_address & 0b00000011) << 1)

    return 0


def with_checksum(data: Iterable[int]) -> bytes:
    """Append the XOR error-detection byte to the given packet bytes."""
    body = bytes(data)
    return body + bytes([reduce(xor, body, 0)])


def speed_packet(address: int, speed: int, forward: bool) -> bytes:
    """Return a complete speed/direction packet for a locomotive."""
    return with_checksum([loco_address_byte(address), speed_byte(speed, forward)])


def function_packet(address: int, functions: Iterable[bool]) -> bytes:
    """Return a complete function-group packet for a locomotive."""
    return with_checksum([loco_address_byte(address), function_byte(functions)])


def accessory_packet(address: int, straight: bool) -> bytes:
    """Return a complete basic accessory (turnout) packet."""
    return with_checksum(
        [accessory_byte(address, straight, 1), accessory_byte(address, straight, 2)]
    )


def cv_byte(cv: int) -> int:
    """Return the wire byte for a CV number, clamped to 1..256 (CV 1 is sent as 0)."""
    return (_clamp(cv, 1, 256) - 1) & 0xFF


def cv_value_byte(value: int) -> int:
    """Return a CV value clamped to 0..255."""
    return _clamp(value, 0, 255) & 0xFF


def reset_packet() -> bytes:
    """Return the broadcast decoder reset packet."""
    return with_checksum([0x00, 0x00])


def programming_packet(cv: int, value: int) -> bytes:
    """Return a programming-on-main packet writing ``value`` into ``cv`` of decoder 3."""
    cv_part = (((cv - 1) >> 3) | 0xE0) & 0xFF
    return with_checksum([POM_ADDRESS, POM_INSTRUCTION, cv_part, value & 0xFF])