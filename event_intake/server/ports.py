import errno
import socket
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from event_intake.core.logging import log_evt


@dataclass
class PortAcquisition:
    port: Optional[int] = None
    sock: Optional[socket.socket] = None
    attempted: List[int] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.sock is not None


def _bind(host: str, port: int, backlog: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(backlog)
    except OSError:
        sock.close()
        raise
    return sock


def acquire_listener(ports: Iterable[int], host: str = "0.0.0.0", backlog: int = 2048) -> PortAcquisition:
    """Bind a listening socket on the first candidate port that is free.

    A port already in use moves on to the next candidate; any other bind
    error ends the search. The returned socket is owned by the caller.
    """
    result = PortAcquisition()
    for port in ports:
        result.attempted.append(port)
        try:
            sock = _bind(host, port, backlog)
        except OSError as exc:
            if exc.errno == errno.EADDRINUSE:
                log_evt("warning", "port_in_use", host=host, port=port)
                continue
            result.error = f"bind {host}:{port} failed: {exc}"
            log_evt("error", "bind_failed", host=host, port=port, error=exc)
            return result

        result.port = port
        result.sock = sock
        log_evt("info", "listening", host=host, port=port)
        return result

    result.error = "all candidate ports are in use"
    return result
