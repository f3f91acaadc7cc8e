import errno
import socket

from event_intake.server import ports
from event_intake.server.ports import acquire_listener

HOST = "127.0.0.1"


def _busy_socket():
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    s.bind((HOST, 0))
    s.listen(1)
    return s


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((HOST, 0))
        return s.getsockname()[1]


def test_binds_first_candidate():
    port = _free_port()
    result = acquire_listener([port], HOST)
    try:
        assert result.ok
        assert result.port == port
        assert result.sock.getsockname()[1] == port
        assert result.attempted == [port]
        assert result.error is None
    finally:
        result.sock.close()


def test_skips_ports_in_use():
    busy = [_busy_socket(), _busy_socket()]
    busy_ports = [s.getsockname()[1] for s in busy]
    free = _free_port()
    try:
        result = acquire_listener(busy_ports + [free], HOST)
        assert result.ok
        assert result.port == free
        assert result.attempted == busy_ports + [free]
        result.sock.close()
    finally:
        for s in busy:
            s.close()


def test_all_ports_in_use_gives_no_listener():
    busy = [_busy_socket(), _busy_socket()]
    busy_ports = [s.getsockname()[1] for s in busy]
    try:
        result = acquire_listener(busy_ports, HOST)
        assert not result.ok
        assert result.port is None
        assert result.attempted == busy_ports
        assert result.error == "all candidate ports are in use"
    finally:
        for s in busy:
            s.close()


def test_other_bind_error_stops_the_search(monkeypatch):
    calls = []

    def denied(host, port, backlog):
        calls.append(port)
        raise PermissionError(errno.EACCES, "Permission denied")

    monkeypatch.setattr(ports, "_bind", denied)

    result = acquire_listener([80, 8080], HOST)

    assert not result.ok
    assert calls == [80]
    assert result.attempted == [80]
    assert "Permission denied" in result.error


def test_empty_candidate_list():
    result = acquire_listener([], HOST)

    assert not result.ok
    assert result.attempted == []
