"""Connection of one robot to the simulator: registration, sensors and actions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from .measures import NUM_IR_SENSORS, BeaconMeasure, Measures
from .netif import Port
from .parser import ParseError, parse
from .simparams import SimParams

SIMULATOR_PORT = 6000
REGISTER_TIMEOUT = 2.0
MESSAGE_MAX_SIZE = 4096


def _g(value: float) -> str:
    return f"{value:g}"


def _wire(text: str) -> bytes:
    """Encode a message the way the simulator expects it: null terminated."""
    return text.encode("utf-8") + b"\0"


def register_message(name: str, robot_id: int) -> str:
    """The document registering a robot with its default sensors."""
    return f'<Robot Name="{name}" Id="{robot_id}"></Robot>'


def register_message_with_angles(
    name: str, robot_id: int, ir_sensor_angles: Sequence[float]
) -> str:
    """The document registering a robot with its obstacle sensors at given angles."""
    angles = list(ir_sensor_angles)
    if len(angles) != NUM_IR_SENSORS:
        raise ValueError(
            f"expected {NUM_IR_SENSORS} obstacle sensor angles, got {len(angles)}"
        )
    sensors = "".join(
        f'<IRSensor Id="{i}" Angle="{_g(angle)}"/>' for i, angle in enumerate(angles)
    )
    return f'<Robot Name="{name}" Id="{robot_id}">{sensors}</Robot>'


def beacon_register_message(name: str, robot_id: int, height: float) -> str:
    """The document registering a robot that also acts as a beacon."""
    return f'<RobotBeacon Name="{name}" Id="{robot_id}" Height="{_g(height)}"/>'


class RobLink:
    """A registered robot: reads its sensor measures and sends its actions."""

    def __init__(self, port: Port, sim_params: Optional[SimParams] = None) -> None:
        self.port = port
        self.sim_params = sim_params if sim_params is not None else SimParams()
        self.measures = Measures.for_beacons(self.sim_params.n_beacons)

    @classmethod
    def _register(
        cls, host: str, message: str, timeout: Optional[float]
    ) -> "RobLink":
        port = Port(SIMULATOR_PORT, host, 0).open()
        try:
            if timeout is not None:
                port.set_receive_timeout(timeout)
            port.send(_wire(message))
            reply = port.receive(MESSAGE_MAX_SIZE)
            sim_params = parse(reply, SimParams().n_beacons).sim_params
            port.set_remote(port.last_sender)
        except BaseException:
            port.close()
            raise
        return cls(port, sim_params)

    @classmethod
    def connect(cls, name: str, robot_id: int, host: str = "localhost") -> "RobLink":
        """Register a robot with the simulator at ``host[:port]``.

        Raises NetworkError when the simulator cannot be reached or does not
        answer in time, and ParseError when the registration is refused.
        """
        return cls._register(host, register_message(name, robot_id), REGISTER_TIMEOUT)

    @classmethod
    def connect_with_ir_angles(
        cls,
        name: str,
        robot_id: int,
        ir_sensor_angles: Sequence[float],
        host: str = "localhost",
    ) -> "RobLink":
        """Register a robot whose obstacle sensors point at the given angles (degrees)."""
        message = register_message_with_angles(name, robot_id, ir_sensor_angles)
        return cls._register(host, message, None)

    @classmethod
    def connect_beacon(
        cls, name: str, robot_id: int, height: float, host: str = "localhost"
    ) -> "RobLink":
        """Register a robot that also works as a beacon of the given height."""
        message = beacon_register_message(name, robot_id, height)
        return cls._register(host, message, None)

    @property
    def n_beacons(self) -> int:
        return self.sim_params.n_beacons

    def read_sensors(self) -> int:
        """Wait for the next measures from the simulator; return the bytes read.

        Whatever part of the document could be decoded replaces the measures,
        as the simulator's documents are taken as they come.
        """
        data = self.port.receive(MESSAGE_MAX_SIZE)
        try:
            self.measures = parse(data, self.sim_params.n_beacons).measures
        except ParseError as err:
            self.measures = err.result.measures
        return len(data)

    def ir_sensor_ready(self, sensor_id: int) -> bool:
        """Whether obstacle sensor ``sensor_id`` has a fresh value."""
        if 0 <= sensor_id < NUM_IR_SENSORS:
            return self.measures.ir_sensor_ready[sensor_id]
        return False

    def beacon_ready(self, beacon_id: int) -> bool:
        """Whether beacon sensor ``beacon_id`` has a fresh value."""
        if 0 <= beacon_id < self.n_beacons and beacon_id < len(self.measures.beacon_ready):
            return self.measures.beacon_ready[beacon_id]
        return False

    def beacon(self, beacon_id: int) -> BeaconMeasure:
        """The last measure of beacon sensor ``beacon_id``."""
        if not 0 <= beacon_id < self.n_beacons or beacon_id >= len(self.measures.beacon):
            raise IndexError(f"beacon id out of range: {beacon_id}")
        return self.measures.beacon[beacon_id]

    def new_message(self, sender: int) -> bool:
        """Whether robot ``sender`` (numbered from 1) said something this cycle."""
        return self.measures.has_message_from(sender)

    def message(self, sender: int) -> str:
        """What robot ``sender`` (numbered from 1) said this cycle."""
        return self.measures.message_from(sender)

    def _send(self, text: str) -> None:
        self.port.send(_wire(text))

    def request_ground(self) -> None:
        self._send('<Actions> <SensorRequests Ground="Yes" /> </Actions>\n')

    def request_compass(self) -> None:
        self._send('<Actions> <SensorRequests Compass="Yes" /> </Actions>\n')

    def request_beacon(self, beacon_id: int) -> None:
        self._send(f'<Actions> <SensorRequests Beacon{beacon_id}="Yes" /> </Actions>\n')

    def request_obstacle(self, sensor_id: int) -> None:
        self._send(f'<Actions> <SensorRequests IRSensor{sensor_id}="Yes" /> </Actions>\n')

    def request_sensors(self, *args: str) -> None:
        """Request several sensors by name, such as "Compass" or "IRSensor0"."""
        requests = "".join(f'{sensor}="Yes" ' for sensor in args)
        self._send(f"<Actions>\n\t<SensorRequests {requests}/>\n</Actions>")

    def drive_motors(self, left_power: float, right_power: float) -> None:
        self._send(
            f'<Actions LeftMotor="{_g(left_power)}" RightMotor="{_g(right_power)}"/>\n'
        )

    def say(self, message: str) -> None:
        """Broadcast ``message`` to the other robots."""
        self._send(f"<Actions><Say><![CDATA[{message}]]></Say></Actions>\n")

    def _set_led(self, led: str, value: bool) -> None:
        state = "On" if value else "Off"
        self._send(
            f'<Actions LeftMotor="{_g(0.0)}" RightMotor="{_g(0.0)}" {led}="{state}"/>\n'
        )

    def set_returning_led(self, value: bool) -> None:
        self._set_led("ReturningLed", value)

    def set_visiting_led(self, value: bool) -> None:
        self._set_led("VisitingLed", value)

    def finish(self) -> None:
        """Stop the motors and signal the end of the round."""
        self._send('<Actions LeftMotor="0.0" RightMotor="0.0" EndLed="On"/>\n')

    def close(self) -> None:
        self.port.close()

    def __enter__(self) -> "RobLink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()