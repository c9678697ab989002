# dcccentral

A small command station for DCC model railways. It builds the byte packets
that DCC decoders understand, turns them into timed bit sequences, keeps
track of two locomotives and a turnout as commanded by JSON messages from a
handheld controller, and pulses the station's own turnout relays.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Building packets

`dcccentral.packets` turns commands into packets, each returned as `bytes`
ending in its XOR checksum byte:

```python
from dcccentral.packets import speed_packet, function_packet, accessory_packet

speed_packet(3, 14, True)                   # short address 3, speed step 14, forward
function_packet(3, [True] + [False] * 12)   # F0 on
accessory_packet(5, True)                   # turnout 5 to straight
```

- `loco_address_byte(address)` clamps the address to the short range 1..127.
- `speed_byte(speed, forward)` encodes 28 speed steps (0..28, clamped);
  a speed of -1 is an emergency stop.
- `function_byte(functions)` takes the states of F0..F12 (missing entries
  count as off). One packet carries one function group only: if any of
  F5..F8 is on, that group is sent instead of F0..F4, and if any of F9..F12
  is on, that group is sent instead of both.
- `accessory_byte(address, straight, byte_num)` gives byte 1 or 2 of a basic
  accessory packet; address 1 is the decoder's internal address 4.
- `with_checksum(data)` appends the XOR byte to any packet body.
- `reset_packet()` is the broadcast decoder reset packet.
- `programming_packet(cv, value)` writes a CV on the main track of the
  decoder with address 3. `cv_byte(cv)` (clamped to 1..256, CV 1 sent as 0)
  and `cv_value_byte(value)` (clamped to 0..255) give the single bytes.

## Turning packets into bits

`dcccentral.signal` gives the bit sequence of a packet:

- `packet_bits(packet, preamble=17)` yields the preamble of one bits, a zero
  start bit before each byte, each byte most significant bit first, and a
  closing one bit.
- `idle_bits(preamble=17)` yields the bits of one idle packet.
- `bit_half_period(bit)` is the half period in microseconds: 56 for a one,
  118 for a zero.

`SignalWriter(output, repetitions=5, preamble=17)` calls `output` once per
bit with its half period. `send_packet(packet)` sends a packet
`repetitions` times, each with its own preamble; `send_idle()` sends one
idle packet.

## Controller state

`dcccentral.state.ControllerState.receive(data)` takes one message (bytes or
text) such as

```json
{"id": 1, "lok": 3, "speed": 10, "funktion": 0, "zustand": true, "richtung": true}
```

Messages longer than 100 bytes or not valid JSON are ignored. Ids 1 and 2
update `loco1` and `loco2`, each a `LocoState` holding address, speed,
direction and the states of F0..F12; the function states are cleared when a
loco's address changes. Ids 3 and 4 carry a turnout (`"weiche"`): addresses
up to 127 become the pending turnout command, and addresses up to 133 also
become the pending relay command. `has_new_data` tells whether a loco or
turnout command waits to be sent.

## Relays

`dcccentral.relays.RelayBank(output, clock)` drives four relay pairs, active
low, on pins 8–11 (straight) and 15–18 (switched); `output(pin, high)` is
called for each pin change and `clock()` returns milliseconds. All pins are
set high on creation. `update(state)` starts a pulse for relay addresses
129..132 and ends it after 300 ms, clearing the state's `relay_pending`
flag. Addresses 128 and 133 are consumed without switching anything.

## Throttle

`dcccentral.throttle` maps a 12-bit potentiometer reading (0..4095) to a
speed from -28 to 28 with a dead zone of ±100 around 2048
(`poti_to_speed`, built on the integer `map_range`).
`SpeedChangeDetector.update(value)` returns `True` when the mapped speed
differs from the last one, and `format_display(speed, address)` returns the
two display lines.

## The station loop

`dcccentral.station.CommandStation(writer, relays=None, clock=None)` ties it
together. Its `state` is a `ControllerState` fed through `receive(data)`.
Each `step()` sends pending loco and turnout commands at once
(`process_new_data()`); otherwise it resends both locos' speed and function
packets every 500 ms (`repeat_commands()`) and sends an idle packet in
between. Pending relay commands are then handed to the `RelayBank`.

The `dcccentral` command runs a station on JSON messages, one per line, read
from a file or from standard input:

```
dcccentral messages.jsonl
echo '{"id": 1, "lok": 3, "speed": 10, "funktion": 0, "zustand": true, "richtung": true}' | dcccentral
```

It prints each packet sent as hex bytes and each relay pin change, waits for
running relay pulses to end, and reports the number of idle packets on
standard error.

## What it does not do

The package does not drive any hardware: there is no H-bridge or GPIO
output, no radio receiver for the controller's messages and no display
driver. `SignalWriter` and `RelayBank` call whatever output function they
are given, and the `dcccentral` command only prints. The throttle functions
are not wired into the station loop.