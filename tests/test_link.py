import socket
import time
import uuid

import pytest

from sumikko.link import PositionClient, PositionServer, address_for
from sumikko.protocol import Point, decode_point, encode_point


def unique_name():
    return "t" + uuid.uuid4().hex[:10]


def pump(*parties, until, rounds=100):
    for _ in range(rounds):
        for party in parties:
            party.poll()
        if until():
            return True
        time.sleep(0.005)
    return False


def test_address_is_stable_per_name():
    name = unique_name()
    assert address_for(name) == address_for(name)
    assert address_for(name) != address_for(unique_name())


def test_address_rejects_empty_name():
    with pytest.raises(ValueError):
        address_for("")


def test_client_needs_a_name():
    with pytest.raises(ValueError):
        PositionClient([], lambda: Point(0, 0), lambda p: None)


def test_exchange_between_server_and_client():
    name = unique_name()
    server_got, client_got, server_errors = [], [], []
    with PositionServer(
        name, lambda: Point(10, 20), server_got.append, lambda: server_errors.append(1)
    ) as server, PositionClient([name], lambda: Point(30, 40), client_got.append) as client:
        assert pump(client, server, until=lambda: server_got and client_got)
    assert client_got[0] == Point(10, 20)
    assert server_got[0] == Point(30, 40)
    assert server_errors


def test_server_speaks_the_point_encoding():
    name = unique_name()
    got = []
    with PositionServer(name, lambda: Point(-7, 123), got.append) as server:
        address = address_for(name)
        family = socket.AF_UNIX if isinstance(address, str) else socket.AF_INET
        with socket.socket(family, socket.SOCK_STREAM) as raw:
            raw.connect(address)
            server.poll()
            raw.settimeout(1.0)
            data = b""
            while len(data) < 8:
                chunk = raw.recv(8 - len(data))
                assert chunk
                data += chunk
            assert data == encode_point(Point(-7, 123))
            assert decode_point(data) == Point(-7, 123)
            raw.sendall(encode_point(Point(5, 6)))
        assert pump(server, until=lambda: got)
    assert got == [Point(5, 6)]


def test_client_reports_missing_server():
    errors = []
    client = PositionClient([unique_name()], lambda: Point(0, 0), lambda p: None,
                            lambda: errors.append(1))
    with client:
        assert client.poll() == 0
    assert errors == [1]


def test_client_cycles_through_names_on_failure():
    first, second = unique_name(), unique_name()
    with PositionClient([first, second], lambda: Point(0, 0), lambda p: None) as client:
        assert client.target == first
        client.poll()
        assert client.target == second
        client.poll()
        assert client.target == first


def test_closed_server_refuses_clients():
    name = unique_name()
    errors = []
    server = PositionServer(name, lambda: Point(1, 2), lambda p: None)
    server.close()
    assert server.poll() == 0
    with PositionClient([name], lambda: Point(0, 0), lambda p: None,
                        lambda: errors.append(1)) as client:
        client.poll()
    assert errors == [1]