"""Entry points for programming a robot agent against the simulator."""

from __future__ import annotations

from collections.abc import Sequence
from os import PathLike
from typing import Union

from .netif import NetworkError
from .parser import parse_map
from .roblink import RobLink

DEFAULT_HOST = "localhost"


def init_robot(name: str, robot_id: int, host: str = DEFAULT_HOST) -> RobLink:
    """Register robot ``name`` at grid position ``robot_id`` with the simulator.

    ``host`` may carry a port as ``host:port``. Raises NetworkError when the
    simulator cannot be reached and ParseError when it refuses the robot.
    """
    return RobLink.connect(name, robot_id, host)


def init_robot2(
    name: str,
    robot_id: int,
    ir_sensor_angles: Sequence[float],
    host: str = DEFAULT_HOST,
) -> RobLink:
    """Register a robot whose four obstacle sensors point at the given angles (degrees)."""
    return RobLink.connect_with_ir_angles(name, robot_id, ir_sensor_angles, host)


def init_robot_beacon(
    name: str, robot_id: int, height: float, host: str = DEFAULT_HOST
) -> RobLink:
    """Register a robot that also works as a beacon of the given height."""
    return RobLink.connect_beacon(name, robot_id, height, host)


def read_sensors(link: RobLink) -> int:
    """Wait for the next sensor values; return the number of bytes read.

    A timeout, a receive error or an empty message raises NetworkError, since
    the robot cannot carry on without its measures.
    """
    received = link.read_sensors()
    if received <= 0:
        raise NetworkError("no sensor data received from the simulator")
    return received


def read_map(filename: Union[str, PathLike]) -> list[list[str]]:
    """The wall map described by the lab file ``filename``."""
    with open(filename, "rb") as stream:
        return parse_map(stream.read())