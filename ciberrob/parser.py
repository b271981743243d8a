"""Decoding of the XML documents exchanged with the simulator."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Union
from xml.sax import SAXException, parseString as _sax_parse
from xml.sax.handler import ContentHandler

from .measures import CELLCOLS, CELLROWS, N_LINE_ELEMENTS, NUM_IR_SENSORS, Measures
from .simparams import SimParams

MAP_ROWS = CELLROWS * 2 - 1
MAP_COLS = CELLCOLS * 2 - 1

_INT = re.compile(r"[+-]?\d+")
_UINT = re.compile(r"\+?\d+")
_FLOAT = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1
_UINT_MAX = 2**32 - 1


def empty_map() -> list[list[str]]:
    """A lab map with no walls: every cell is a space."""
    return [[" "] * MAP_COLS for _ in range(MAP_ROWS)]


@dataclass
class ParseResult:
    """Everything a document told about the simulation, the robot and the lab."""

    sim_params: SimParams = field(default_factory=SimParams)
    measures: Measures = field(default_factory=Measures)
    lab_map: list[list[str]] = field(default_factory=empty_map)


class ParseError(ValueError):
    """Raised when a document is malformed or refused; holds what was read before."""

    def __init__(self, message: str, result: Optional[ParseResult] = None) -> None:
        super().__init__(message)
        self.result = result if result is not None else ParseResult()


class _Abort(Exception):
    """Stops parsing when an element is rejected."""


def _to_int(text: str) -> int:
    text = text.strip()
    if not _INT.fullmatch(text):
        return 0
    value = int(text)
    return value if _INT_MIN <= value <= _INT_MAX else 0


def _to_uint(text: str) -> int:
    text = text.strip()
    if not _UINT.fullmatch(text):
        return 0
    value = int(text)
    return value if value <= _UINT_MAX else 0


def _to_float(text: str) -> float:
    text = text.strip()
    if not _FLOAT.fullmatch(text):
        return 0.0
    value = float(text)
    return value if math.isfinite(value) else 0.0


def _reader(convert: Callable[[str], object]) -> Callable[[object, str], object]:
    def read(attrs, name: str):
        text = attrs.get(name)
        return None if text is None else convert(text)

    return read


_read_int = _reader(_to_int)
_read_uint = _reader(_to_uint)
_read_float = _reader(_to_float)


def _read_flag(attrs, name: str, on: str, off: str) -> Optional[bool]:
    text = attrs.get(name)
    if text == on:
        return True
    if text == off:
        return False
    return None


def _read_on_off(attrs, name: str) -> Optional[bool]:
    return _read_flag(attrs, name, "On", "Off")


def _read_yes_no(attrs, name: str) -> Optional[bool]:
    return _read_flag(attrs, name, "Yes", "No")


def _assign(target: object, attribute: str, value: object) -> bool:
    """Set ``attribute`` when ``value`` was read; tell whether it was."""
    if value is None:
        return False
    setattr(target, attribute, value)
    return True


_PARAMETER_FIELDS = (
    ("CompassNoise", "compass_noise", _read_float),
    ("BeaconNoise", "beacon_noise", _read_float),
    ("ObstacleNoise", "obst_noise", _read_float),
    ("MotorsNoise", "motors_noise", _read_float),
    ("SimTime", "sim_time_final", _read_uint),
    ("KeyTime", "key_time", _read_uint),
    ("CycleTime", "cycle_time", _read_uint),
    ("NBeacons", "n_beacons", _read_uint),
    ("RequestsPerCycle", "n_req_per_cycle", _read_uint),
    ("ObstacleRequestable", "obst_requestable", _read_on_off),
    ("BeaconRequestable", "beacon_requestable", _read_on_off),
    ("GroundRequestable", "ground_requestable", _read_on_off),
    ("CompassRequestable", "compass_requestable", _read_on_off),
    ("CollisionRequestable", "collision_requestable", _read_on_off),
    ("ObstacleLatency", "obst_latency", _read_uint),
    ("BeaconLatency", "beacon_latency", _read_uint),
    ("GroundLatency", "ground_latency", _read_uint),
    ("CompassLatency", "compass_latency", _read_uint),
    ("CollisionLatency", "collision_latency", _read_uint),
    ("BeaconAperture", "beacon_aperture", _read_float),
)


class _Handler(ContentHandler):
    def __init__(self, n_beacons: int) -> None:
        super().__init__()
        self.sim_params = SimParams()
        self.measures = Measures.for_beacons(n_beacons)
        self.lab_map = empty_map()
        self.active_tag = ""
        self.hear_from: Optional[int] = None
        self._starts = {
            "Reply": self._reply,
            "Parameters": self._parameters,
            "Measures": self._measures_tag,
            "Sensors": self._sensors,
            "IRSensor": self._ir_sensor,
            "BeaconSensor": self._beacon_sensor,
            "GPS": self._gps,
            "LineSensor": self._line_sensor,
            "Leds": self._leds,
            "Buttons": self._buttons,
            "Score": self._score,
            "Message": self._message,
            "Row": self._row,
        }

    def result(self) -> ParseResult:
        return ParseResult(self.sim_params, self.measures, self.lab_map)

    def startElement(self, name, attrs):
        self.active_tag = name
        start = self._starts.get(name)
        if start is not None:
            start(attrs)

    def endElement(self, name):
        self.active_tag = ""

    def characters(self, content):
        if self.active_tag != "Message" or self.hear_from is None:
            return
        if 1 <= self.hear_from <= len(self.measures.hear_messages):
            self.measures.hear_messages[self.hear_from - 1] += content

    def _reply(self, attrs) -> None:
        status = attrs.get("Status")
        if status != "Ok":
            raise _Abort(f"registration not accepted: status {status!r}")

    def _parameters(self, attrs) -> None:
        for name, attribute, read in _PARAMETER_FIELDS:
            _assign(self.sim_params, attribute, read(attrs, name))

    def _measures_tag(self, attrs) -> None:
        _assign(self.measures, "time", _read_uint(attrs, "Time"))

    def _sensors(self, attrs) -> None:
        m = self.measures
        m.compass_ready = _assign(m, "compass", _read_float(attrs, "Compass"))
        m.collision_ready = _assign(m, "collision", _read_yes_no(attrs, "Collision"))
        m.ground_ready = _assign(m, "ground", _read_int(attrs, "Ground"))

    def _ir_sensor(self, attrs) -> None:
        sensor_id = _read_uint(attrs, "Id")
        if sensor_id is None:
            raise _Abort("IRSensor without Id")
        if sensor_id >= NUM_IR_SENSORS:
            raise _Abort(f"IRSensor Id out of range: {sensor_id}")
        value = _read_float(attrs, "Value")
        self.measures.ir_sensor_ready[sensor_id] = value is not None
        if value is not None:
            self.measures.ir_sensor[sensor_id] = value

    def _beacon_sensor(self, attrs) -> None:
        beacon_id = _read_uint(attrs, "Id")
        if beacon_id is None:
            raise _Abort("BeaconSensor without Id")
        if beacon_id >= len(self.measures.beacon_ready):
            return
        self.measures.beacon_ready[beacon_id] = True
        value = attrs.get("Value")
        if value is None:
            raise _Abort(f"BeaconSensor {beacon_id} without Value")
        beacon = self.measures.beacon[beacon_id]
        if value == "NotVisible":
            beacon.visible = False
            beacon.direction = 0.0
        else:
            beacon.direction = _to_float(value)
            beacon.visible = True

    def _gps(self, attrs) -> None:
        m = self.measures
        m.gps_ready = _assign(m, "x", _read_float(attrs, "X"))
        _assign(m, "y", _read_float(attrs, "Y"))
        m.gps_dir_ready = _assign(m, "dir", _read_float(attrs, "Dir"))

    def _line_sensor(self, attrs) -> None:
        value = attrs.get("Value") or ""
        self.measures.line_sensor_ready = True
        self.measures.line_sensor = [
            value[i : i + 1] == "1" for i in range(N_LINE_ELEMENTS)
        ]

    def _leds(self, attrs) -> None:
        m = self.measures
        _assign(m, "end_led", _read_on_off(attrs, "EndLed"))
        _assign(m, "returning_led", _read_on_off(attrs, "ReturningLed"))
        _assign(m, "visiting_led", _read_on_off(attrs, "VisitingLed"))

    def _buttons(self, attrs) -> None:
        _assign(self.measures, "start", _read_on_off(attrs, "Start"))
        _assign(self.measures, "stop", _read_on_off(attrs, "Stop"))

    def _score(self, attrs) -> None:
        m = self.measures
        m.score_ready = _assign(m, "score", _read_uint(attrs, "Score"))
        m.arrival_time_ready = _assign(m, "arrival_time", _read_uint(attrs, "ArrivalTime"))
        m.returning_time_ready = _assign(
            m, "returning_time", _read_uint(attrs, "ReturningTime")
        )
        m.collisions_ready = _assign(m, "collisions", _read_uint(attrs, "Collisions"))

    def _message(self, attrs) -> None:
        sender = _read_uint(attrs, "From")
        if sender is not None:
            self.hear_from = sender

    def _row(self, attrs) -> None:
        row = _read_int(attrs, "Pos")
        if row is None or not 0 <= row < MAP_ROWS:
            return
        line = self.lab_map[row]
        for col, char in enumerate(attrs.get("Pattern") or ""):
            if char == "\0":
                break
            if row % 2 == 0:
                # only vertical walls between cells on even rows
                if char == "|":
                    _put(line, (col + 1) // 3 * 2 - 1, "|")
            elif col % 3 == 0 and char == "-":
                _put(line, col // 3 * 2, "-")


def _put(line: list[str], index: int, char: str) -> None:
    if 0 <= index < len(line):
        line[index] = char


def _as_bytes(document: Union[str, bytes]) -> bytes:
    if isinstance(document, str):
        return document.split("\0", 1)[0].encode("utf-8")
    return bytes(document).split(b"\0", 1)[0]


def parse(xml: Union[str, bytes], n_beacons: int = 0) -> ParseResult:
    """Decode a simulator document, expecting ``n_beacons`` beacon sensors.

    Raises ParseError when the document is malformed, the registration is
    refused or a sensor element is invalid; the error carries what was read.
    """
    handler = _Handler(n_beacons)
    try:
        _sax_parse(_as_bytes(xml), handler)
    except _Abort as err:
        raise ParseError(str(err), handler.result()) from None
    except SAXException as err:
        raise ParseError(f"malformed document: {err}", handler.result()) from err
    return handler.result()


def parse_map(xml: Union[str, bytes]) -> list[list[str]]:
    """The walls described by a lab document, kept as far as it could be read."""
    try:
        return parse(xml, 1).lab_map
    except ParseError as err:
        return err.result.lab_map