import contextlib
import socket
import threading

import pytest

from ciberrob.netif import NetworkError, Port
from ciberrob.parser import MAP_COLS, MAP_ROWS, ParseError, empty_map
from ciberrob.robsock import (
    init_robot,
    init_robot2,
    init_robot_beacon,
    read_map,
    read_sensors,
)
from ciberrob.roblink import (
    RobLink,
    beacon_register_message,
    register_message,
    register_message_with_angles,
)
from ciberrob.simparams import SimParams

OK_REPLY = b'<Reply Status="Ok"><Parameters NBeacons="2" CycleTime="50"/></Reply>'
REFUSED_REPLY = b'<Reply Status="Refused"></Reply>'


def _udp_socket():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(5.0)
    return sock


@contextlib.contextmanager
def _simulator(reply):
    listen = _udp_socket()
    answer = _udp_socket()
    received = {}

    def serve():
        data, sender = listen.recvfrom(4096)
        received["data"] = data
        answer.sendto(reply, sender)

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    try:
        yield f"127.0.0.1:{listen.getsockname()[1]}", answer.getsockname(), received
    finally:
        thread.join(timeout=5.0)
        listen.close()
        answer.close()


def test_init_robot_sends_registration_and_reads_parameters():
    with _simulator(OK_REPLY) as (host, answer_address, received):
        with init_robot("rob", 1, host) as link:
            assert received["data"] == b'<Robot Name="rob" Id="1"></Robot>\x00'
            assert link.sim_params.n_beacons == 2
            assert link.sim_params.cycle_time == 50
            assert link.port.remote_address == answer_address


def test_init_robot_refused_raises_parse_error():
    with _simulator(REFUSED_REPLY) as (host, _, received):
        with pytest.raises(ParseError):
            init_robot("rob", 1, host)
        assert received["data"] == register_message("rob", 1).encode() + b"\0"


def test_init_robot2_sends_sensor_angles():
    angles = [0.0, 60.0, -60.0, 180.0]
    with _simulator(OK_REPLY) as (host, _, received):
        with init_robot2("rob", 3, angles, host) as link:
            expected = register_message_with_angles("rob", 3, angles).encode() + b"\0"
            assert received["data"] == expected
            assert link.n_beacons == 2


def test_init_robot2_rejects_wrong_number_of_angles():
    with pytest.raises(ValueError):
        init_robot2("rob", 1, [0.0, 90.0], "127.0.0.1:1")


def test_init_robot_beacon_sends_height():
    with _simulator(OK_REPLY) as (host, answer_address, received):
        with init_robot_beacon("beacon", 2, 1.5, host) as link:
            assert received["data"] == beacon_register_message("beacon", 2, 1.5).encode() + b"\0"
            assert b'Height="1.5"' in received["data"]
            assert link.port.remote_address == answer_address


@pytest.fixture
def link():
    port = Port(0, "", 0).open()
    port.set_receive_timeout(5.0)
    with RobLink(port, SimParams(n_beacons=1)) as robot:
        yield robot


@pytest.fixture
def sender():
    sock = _udp_socket()
    yield sock
    sock.close()


def _to(link):
    return ("127.0.0.1", link.port.address[1])


def test_read_sensors_returns_size_and_updates_measures(link, sender):
    document = b'<Measures Time="7"><Sensors Compass="12.5"/></Measures>'
    sender.sendto(document, _to(link))
    assert read_sensors(link) == len(document)
    assert link.measures.time == 7
    assert link.measures.compass_ready
    assert link.measures.compass == 12.5


def test_read_sensors_empty_message_raises(link, sender):
    sender.sendto(b"", _to(link))
    with pytest.raises(NetworkError):
        read_sensors(link)


def test_read_sensors_timeout_raises(link):
    link.port.set_receive_timeout(0.1)
    with pytest.raises(NetworkError):
        read_sensors(link)


def test_read_map_reads_walls(tmp_path):
    lab = tmp_path / "lab.xml"
    lab.write_text(
        '<Lab Name="test">'
        '<Row Pos="0" Pattern="  |"/>'
        '<Row Pos="1" Pattern="---"/>'
        "</Lab>"
    )
    lab_map = read_map(lab)
    assert len(lab_map) == MAP_ROWS
    assert all(len(row) == MAP_COLS for row in lab_map)
    assert lab_map[0].count("|") == 1
    assert lab_map[1].count("-") == 1
    assert lab_map[2:] == empty_map()[2:]


def test_read_map_without_rows_is_empty(tmp_path):
    lab = tmp_path / "lab.xml"
    lab.write_text('<Lab Name="empty"></Lab>')
    assert read_map(str(lab)) == empty_map()


def test_read_map_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_map(tmp_path / "missing.xml")