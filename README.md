# ciberrob

A Python client library for writing robot agents that drive a robot inside
a maze simulator. The agent registers with the simulator over UDP, gets the
simulation parameters back, then runs a loop: read the sensor message for the
cycle, decide what to do, and send motor, LED and sensor-request commands.

It depends only on the Python standard library.

## Installation

```
pip install .
```

## Quick start

```python
from ciberrob.measures import CENTER
from ciberrob.robsock import init_robot, read_sensors

with init_robot("explorer", 1, "localhost") as link:
    while True:
        read_sensors(link)
        measures = link.measures
        if measures.stop:
            continue
        if link.ir_sensor_ready(CENTER) and measures.ir_sensor[CENTER] > 2.0:
            link.drive_motors(-0.1, 0.1)
        else:
            link.drive_motors(0.1, 0.1)
```

A host may be given as `host` or `host:port`. When no port is given the
simulator's registration port, 6000, is used. After registration the link
sends to the address the simulator replied from.

## Registering a robot

`ciberrob.robsock` offers three ways to join a simulation:

- `init_robot(name, robot_id, host)` registers a plain robot. It waits at
  most two seconds for the simulator's reply, and that receive timeout stays
  set on the link afterwards.
- `init_robot2(name, robot_id, ir_sensor_angles, host)` also sends the angles
  (in degrees, from the front of the robot) of the four obstacle sensors; any
  other number of angles raises `ValueError`.
- `init_robot_beacon(name, robot_id, height, host)` registers a robot that
  also acts as a beacon of the given height.

Each returns a `ciberrob.roblink.RobLink`, which can also be built directly
with `RobLink.connect`, `RobLink.connect_with_ir_angles` and
`RobLink.connect_beacon`. A link is a context manager and closes its socket
on exit (or with `close()`).

An unreachable or silent simulator raises `ciberrob.netif.NetworkError`; a
refused registration or a malformed reply raises `ciberrob.parser.ParseError`.

The registration documents themselves are built by `register_message`,
`register_message_with_angles` and `beacon_register_message` in
`ciberrob.roblink`.

## Reading sensors

`read_sensors(link)` waits for the next sensor message, stores it on
`link.measures` and returns the number of bytes read. It raises
`NetworkError` on a timeout, a receive error or an empty message.
`link.read_sensors()` does the same without the empty-message check. A
message that cannot be fully decoded still replaces the measures with
whatever part of it was read.

`link.measures` is a `ciberrob.measures.Measures` holding the values of the
last cycle: simulation time, compass, the four obstacle sensors (indexed by
`CENTER`, `LEFT`, `RIGHT`, `OTHER1`), beacons (`BeaconMeasure` with `visible`
and `direction`), ground, bumper, line sensor, score, arrival and returning
times, collisions, GPS position and direction, buttons, LEDs and messages
heard from other robots. Each sensor has a matching `*_ready` flag that is
false when that sensor sent nothing this cycle.

The link offers bounds-checked helpers: `ir_sensor_ready(id)`,
`beacon_ready(id)`, `beacon(id)` (raises `IndexError` for an unknown
beacon), `new_message(sender)` and `message(sender)`, where senders are
numbered from 1.

The simulation parameters (`ciberrob.simparams.SimParams`) are kept on
`link.sim_params`: cycle, final and key time, noise levels, latencies, which
sensors can be requested, beacon aperture, the number of beacons and the
number of requests allowed per cycle.

## Acting

```python
link.drive_motors(0.15, 0.15)
link.set_visiting_led(True)
link.set_returning_led(True)
link.say("found it")
link.request_sensors("Compass", "Ground", "IRSensor0", "Beacon0")
link.finish()
```

Single sensors can also be requested with `request_ground`,
`request_compass`, `request_beacon` and `request_obstacle`.

## Parsing and maps

`ciberrob.parser.parse(xml, n_beacons)` decodes any simulator document
(text or bytes) into a `ParseResult` with `sim_params`, `measures` and
`lab_map`. On failure it raises `ParseError`, whose `result` holds what was
read before the failure.

`ciberrob.robsock.read_map(filename)` reads a maze description file and
returns its walls as a grid of characters, 13 rows of 27 columns: `'|'` for
a vertical wall, `'-'` for a horizontal wall and `' '` elsewhere.
`parse_map(xml)` does the same on XML text and `empty_map()` returns a grid
with no walls.

## Networking

`ciberrob.netif.Port` is the small UDP socket wrapper the link uses: `open`,
`send`, `receive`, `set_receive_timeout`, `set_remote` and `close`, usable as
a context manager. `parse_remote_host` splits a `host:port` string.

## What this package does not do

It is the robot side only. It contains no simulator, no viewer and no
ready-made agent or command to run; it needs a running simulator to talk to.

## Running the tests

```
pip install .[test]
pytest
```