"""Client library for robot agents that connect to a maze simulator over UDP."""

__version__ = "0.1.0"