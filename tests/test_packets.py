from functools import reduce
from operator import xor

import pytest

from dcccentral.packets import (
    accessory_byte,
    accessory_packet,
    cv_byte,
    cv_value_byte,
    function_byte,
    function_packet,
    loco_address_byte,
    programming_packet,
    reset_packet,
    speed_byte,
    speed_packet,
    with_checksum,
)


def _only(index):
    states = [False] * 13
    states[index] = True
    return states


@pytest.mark.parametrize("address", [1, 3, 42, 127])
def test_loco_address_in_range_is_kept(address):
    assert loco_address_byte(address) == address


def test_loco_address_is_clamped():
    assert loco_address_byte(0) == 1
    assert loco_address_byte(-20) == 1
    assert loco_address_byte(200) == 127


def test_emergency_stop_ignores_direction():
    assert speed_byte(-1, True) == speed_byte(-1, False)
    assert speed_byte(-1, True) == 0x41


def test_speed_zero_backward_is_base_pattern():
    assert speed_byte(0, False) == 0b01000000


@pytest.mark.parametrize("speed", range(29))
def test_direction_flips_only_direction_bit(speed):
    assert speed_byte(speed, True) ^ speed_byte(speed, False) == 0b00100000


def test_speed_steps_are_distinct_and_keep_top_bits():
    values = [speed_byte(s, True) for s in range(29)]
    assert len(set(values)) == 29
    assert all(v & 0b11000000 == 0b01000000 for v in values)


def test_speed_is_clamped():
    assert speed_byte(50, True) == speed_byte(28, True)
    assert speed_byte(-5, False) == speed_byte(0, False)


def test_function_byte_all_off():
    assert function_byte([False] * 13) == 0b10000000


def test_function_byte_f0():
    assert function_byte(_only(0)) == 0x90


def test_function_byte_f1_to_f4_use_distinct_low_bits():
    values = [function_byte(_only(i)) for i in range(1, 5)]
    lows = [v & 0x0F for v in values]
    assert len(set(lows)) == 4
    assert all(low and low & (low - 1) == 0 for low in lows)
    assert all(v & 0xF0 == 0b10000000 for v in values)


@pytest.mark.parametrize("index", [5, 6, 7, 8])
def test_function_byte_second_group(index):
    assert function_byte(_only(index)) & 0xF0 == 0b10110000


@pytest.mark.parametrize("index", [9, 10, 11, 12])
def test_function_byte_third_group(index):
    assert function_byte(_only(index)) & 0xF0 == 0b10100000


def test_third_group_overrides_lower_groups():
    states = [True] * 13
    assert function_byte(states) & 0xF0 == 0b10100000
    assert function_byte(states) == function_byte([False] * 9 + [True] * 4)


def test_short_function_list_counts_as_off():
    assert function_byte([]) == function_byte([False] * 13)
    assert function_byte([True]) == function_byte(_only(0))


@pytest.mark.parametrize("address", [1, 4, 50, 127, 500])
def test_accessory_first_byte_marker(address):
    assert accessory_byte(address, True, 1) & 0b11000000 == 0b10000000


@pytest.mark.parametrize("address", [1, 4, 50, 127, 500])
def test_accessory_second_byte_flags(address):
    second = accessory_byte(address, False, 2)
    assert second & 0b10000000
    assert second & (1 << 3)
    assert accessory_byte(address, True, 2) ^ second == 1


def test_accessory_first_byte_independent_of_state():
    assert accessory_byte(10, True, 1) == accessory_byte(10, False, 1)


@pytest.mark.parametrize("byte_num", [0, 3, -1])
def test_accessory_invalid_byte_number(byte_num):
    assert accessory_byte(5, True, byte_num) == 0


@pytest.mark.parametrize("data", [[], [0x12], [0x03, 0x7F], [1, 2, 3, 4]])
def test_checksum_makes_xor_zero(data):
    packet = with_checksum(data)
    assert packet[:-1] == bytes(data)
    assert reduce(xor, packet, 0) == 0


def test_checksum_rejects_out_of_range_byte():
    with pytest.raises(ValueError):
        with_checksum([256])


def test_speed_packet_layout():
    packet = speed_packet(3, 10, True)
    assert packet[:2] == bytes([loco_address_byte(3), speed_byte(10, True)])
    assert reduce(xor, packet, 0) == 0


def test_function_packet_layout():
    states = _only(6)
    packet = function_packet(200, states)
    assert packet[:2] == bytes([127, function_byte(states)])
    assert reduce(xor, packet, 0) == 0


def test_accessory_packet_layout():
    packet = accessory_packet(7, True)
    assert packet[:2] == bytes([accessory_byte(7, True, 1), accessory_byte(7, True, 2)])
    assert reduce(xor, packet, 0) == 0


def test_cv_byte():
    assert cv_byte(1) == 0
    assert cv_byte(0) == 0
    assert cv_byte(256) == 255
    assert cv_byte(300) == 255


@pytest.mark.parametrize("cv", [2, 29, 100, 255])
def test_cv_byte_is_one_below_number(cv):
    assert cv_byte(cv) + 1 == cv


def test_cv_value_byte():
    assert cv_value_byte(-5) == 0
    assert cv_value_byte(300) == 255
    assert cv_value_byte(6) == 6


def test_reset_packet():
    assert reset_packet() == bytes([0x00, 0x00, 0x00])


def test_programming_packet_layout():
    packet = programming_packet(29, 6)
    assert len(packet) == 5
    assert packet[0] == 0x03
    assert packet[1] == 0xEC
    assert packet[2] & 0xE0 == 0xE0
    assert packet[3] == 6
    assert reduce(xor, packet, 0) == 0