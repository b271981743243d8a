import pytest

from ciberrob.netif import NetworkError, Port, parse_remote_host


def test_parse_host_with_port():
    assert parse_remote_host("localhost:6001", 6000) == ("localhost", 6001)


def test_parse_host_without_port_uses_default():
    assert parse_remote_host("localhost", 6000) == ("localhost", 6000)


def test_parse_host_with_empty_port_keeps_whole_string():
    assert parse_remote_host("localhost:", 6000) == ("localhost:", 6000)


def test_parse_empty_host_part_keeps_whole_string():
    assert parse_remote_host(":7000", 6000) == (":7000", 6000)


def test_parse_truncates_long_host():
    host, port = parse_remote_host("a" * 400, 6000)
    assert host == "a" * 255
    assert port == 6000


def test_port_constructor_applies_host_port():
    port = Port(6000, "127.0.0.1:6010")
    assert (port.host, port.port) == ("127.0.0.1", 6010)
    assert port.is_open is False


@pytest.fixture
def server():
    with Port() as srv:
        yield srv


def test_round_trip_over_loopback(server):
    server_port = server.address[1]
    with Port(server_port, "127.0.0.1") as client:
        client.send(b"<Robot/>\x00")
        server.set_receive_timeout(2.0)
        assert server.receive() == b"<Robot/>\x00"
        assert server.last_sender[1] == client.address[1]

        server.set_remote(server.last_sender)
        server.send(b"reply")
        client.set_receive_timeout(2.0)
        assert client.receive() == b"reply"
        assert client.last_sender[1] == server_port


def test_set_remote_redirects_sends(server):
    with Port(1, "127.0.0.1") as client:
        client.set_remote(("127.0.0.1", server.address[1]))
        client.send(b"x")
        server.set_receive_timeout(2.0)
        assert server.receive() == b"x"


def test_receive_timeout_raises(server):
    server.set_receive_timeout(0.05)
    with pytest.raises(NetworkError):
        server.receive()


def test_nonblocking_receive_without_data_raises():
    port = Port().open(blocking=False)
    try:
        with pytest.raises(NetworkError):
            port.receive()
    finally:
        port.close()


def test_send_without_remote_raises(server):
    with pytest.raises(NetworkError):
        server.send(b"data")


def test_operations_on_closed_port_raise():
    with Port() as port:
        assert port.is_open is True
    assert port.is_open is False
    with pytest.raises(NetworkError):
        port.receive()
    with pytest.raises(NetworkError):
        port.send(b"data")


def test_network_error_is_os_error():
    with pytest.raises(OSError):
        Port().receive()