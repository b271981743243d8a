"""Simulation parameters announced by the simulator when a robot registers."""

from __future__ import annotations

import math
from dataclasses import dataclass

DEFAULT_SIM_TIME = 1500
DEFAULT_KEY_TIME = 1500
DEFAULT_CYCLE_TIME = 80
DEFAULT_REQUESTS_PER_CYCLE = 2
DEFAULT_LATENCY = 1
DEFAULT_BEACON_APERTURE = math.pi / 3


@dataclass
class SimParams:
    """Noise levels, timings, latencies and sensor request rules of a simulation."""

    obst_noise: float = 0.0
    beacon_noise: float = 0.0
    motors_noise: float = 0.0
    compass_noise: float = 0.0

    sim_time_final: int = DEFAULT_SIM_TIME
    key_time: int = DEFAULT_KEY_TIME
    cycle_time: int = DEFAULT_CYCLE_TIME
    n_beacons: int = 0

    obst_latency: int = DEFAULT_LATENCY
    beacon_latency: int = DEFAULT_LATENCY
    ground_latency: int = DEFAULT_LATENCY
    compass_latency: int = DEFAULT_LATENCY
    collision_latency: int = DEFAULT_LATENCY

    obst_requestable: bool = False
    beacon_requestable: bool = False
    ground_requestable: bool = False
    compass_requestable: bool = False
    collision_requestable: bool = False

    beacon_aperture: float = DEFAULT_BEACON_APERTURE

    n_req_per_cycle: int = DEFAULT_REQUESTS_PER_CYCLE