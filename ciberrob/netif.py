"""UDP port used to talk to the simulator."""

from __future__ import annotations

import re
import socket
from typing import Optional

MAX_HOST_LENGTH = 255
DEFAULT_BUFFER_SIZE = 4096

_HOST_WITH_PORT = re.compile(r"([^:]{1,2047}):\s*([+-]?\d+)")

Address = tuple[str, int]


class NetworkError(OSError):
    """Raised when the port cannot be opened, sent on or received from."""


def parse_remote_host(remote_host: str, default_port: int) -> tuple[str, int]:
    """Split ``host[:port]``; a port given in the host takes precedence."""
    match = _HOST_WITH_PORT.match(remote_host)
    if match:
        return match.group(1)[:MAX_HOST_LENGTH], int(match.group(2))
    return remote_host[:MAX_HOST_LENGTH], default_port


class Port:
    """A UDP socket bound locally and optionally aimed at a remote host."""

    def __init__(self, port: int = 0, remote_host: str = "", local_port: int = 0) -> None:
        self.host, self.port = parse_remote_host(remote_host, port)
        self.local_port = local_port
        self.remote_address: Optional[Address] = None
        self.last_sender: Optional[Address] = None
        self._sock: Optional[socket.socket] = None

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    @property
    def address(self) -> Address:
        """The local address the socket is bound to."""
        return self._socket().getsockname()

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise NetworkError("port is not open")
        return self._sock

    def open(self, blocking: bool = True) -> "Port":
        """Open and bind the socket and resolve the remote host, if any."""
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as err:
            raise NetworkError(f"cannot open socket: {err}") from err
        try:
            sock.bind(("", self.local_port))
        except OSError as err:
            sock.close()
            raise NetworkError(f"cannot bind local port {self.local_port}: {err}") from err
        if self.host:
            try:
                ip = socket.gethostbyname(self.host)
            except OSError as err:
                sock.close()
                raise NetworkError(f"cannot resolve host {self.host!r}: {err}") from err
            self.host = ip
            self.remote_address = (ip, self.port)
        if not blocking:
            sock.setblocking(False)
        self._sock = sock
        return self

    def set_receive_timeout(self, seconds: Optional[float]) -> None:
        """Make receive give up after ``seconds``; ``None`` waits forever."""
        try:
            self._socket().settimeout(seconds)
        except (OSError, ValueError) as err:
            raise NetworkError(f"cannot set receive timeout: {err}") from err

    def send(self, data: bytes) -> None:
        """Send one datagram to the remote address."""
        sock = self._socket()
        if self.remote_address is None:
            raise NetworkError("no remote address to send to")
        try:
            sent = sock.sendto(data, self.remote_address)
        except OSError as err:
            raise NetworkError(f"send failed: {err}") from err
        if sent != len(data):
            raise NetworkError(f"sent {sent} of {len(data)} bytes")

    def receive(self, bufsize: int = DEFAULT_BUFFER_SIZE) -> bytes:
        """Receive one datagram and remember who sent it."""
        sock = self._socket()
        try:
            data, sender = sock.recvfrom(bufsize)
        except OSError as err:
            raise NetworkError(f"receive failed: {err}") from err
        self.last_sender = sender
        return data

    def set_remote(self, address: Address) -> None:
        """Aim later sends at ``address``."""
        self.remote_address = address

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> "Port":
        if not self.is_open:
            self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()