"""Sensor measures received by a robot in each simulation cycle."""

from __future__ import annotations

from dataclasses import dataclass, field

CENTER = 0
LEFT = 1
RIGHT = 2
OTHER1 = 3

NUM_IR_SENSORS = 4
N_LINE_ELEMENTS = 7

CELLROWS = 7
CELLCOLS = 14

MAX_MESSAGE_SENDERS = 10


@dataclass
class BeaconMeasure:
    """Whether a beacon is visible and its direction in robot coordinates (degrees)."""

    visible: bool = False
    direction: float = 0.0


@dataclass
class Measures:
    """The values of every robot sensor, button and led as last reported."""

    time: int = 0

    compass_ready: bool = False
    compass: float = 0.0

    ir_sensor_ready: list[bool] = field(default_factory=lambda: [False] * NUM_IR_SENSORS)
    ir_sensor: list[float] = field(default_factory=lambda: [0.0] * NUM_IR_SENSORS)

    beacon_ready: list[bool] = field(default_factory=list)
    beacon: list[BeaconMeasure] = field(default_factory=list)

    line_sensor_ready: bool = False
    line_sensor: list[bool] = field(default_factory=lambda: [False] * N_LINE_ELEMENTS)

    ground_ready: bool = False
    ground: int = -1
    collision_ready: bool = False
    collision: bool = False

    start: bool = False
    stop: bool = False
    end_led: bool = False
    returning_led: bool = False
    visiting_led: bool = False

    gps_ready: bool = False
    gps_dir_ready: bool = False
    x: float = 0.0
    y: float = 0.0
    dir: float = 0.0

    score_ready: bool = False
    score: int = 0
    arrival_time_ready: bool = False
    arrival_time: int = 0
    returning_time_ready: bool = False
    returning_time: int = 0
    collisions_ready: bool = False
    collisions: int = 0

    hear_messages: list[str] = field(default_factory=lambda: [""] * MAX_MESSAGE_SENDERS)

    @classmethod
    def for_beacons(cls, n_beacons: int) -> "Measures":
        """Return fresh measures with room for ``n_beacons`` beacon sensors."""
        if n_beacons < 0:
            raise ValueError(f"number of beacons must not be negative: {n_beacons}")
        return cls(
            beacon_ready=[False] * n_beacons,
            beacon=[BeaconMeasure() for _ in range(n_beacons)],
        )

    def _message_index(self, sender: int) -> int:
        if not 1 <= sender <= len(self.hear_messages):
            raise ValueError(f"message sender must be in 1..{len(self.hear_messages)}: {sender}")
        return sender - 1

    def has_message_from(self, sender: int) -> bool:
        """Whether a message from robot ``sender`` (numbered from 1) was heard."""
        return self.hear_messages[self._message_index(sender)] != ""

    def message_from(self, sender: int) -> str:
        """The message heard from robot ``sender`` (numbered from 1), or ``""``."""
        return self.hear_messages[self._message_index(sender)]