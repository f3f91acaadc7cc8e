import ssl
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import sessionmaker

from event_intake.core.config import DATABASE_SSL, DB_CONNECT_TIMEOUT, DB_SOCKET_TIMEOUT
from event_intake.core.logging import log_evt
from event_intake.db.models import Base, EventRegistration


@dataclass(frozen=True)
class ConnectionStatus:
    connected: bool
    error: Optional[str]
    checked_at: datetime


def _sanitize_database_url(url: str) -> str:
    """Strip query params like sslmode=require and pin the pg8000 driver; SSL goes via connect_args."""
    if not url:
        return url
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql"):
        if "?" in url:
            url = url.split("?", 1)[0]
        scheme, rest = url.split("://", 1)
        if "+" not in scheme:
            url = f"postgresql+pg8000://{rest}"
    return url


def _connect_args(url: str, connect_timeout: float, socket_timeout: float, ssl_enabled: bool) -> dict:
    connect_args = {}
    if url.startswith("postgresql"):
        # pg8000 applies this to the connect and to every socket read/write after it.
        connect_args["timeout"] = socket_timeout
        if ssl_enabled:
            connect_args["ssl_context"] = ssl.create_default_context()

    if "sqlite" in url:
        connect_args = {"check_same_thread": False, "timeout": connect_timeout}
    return connect_args


def _make_engine(url: str, connect_timeout: float, socket_timeout: float, ssl_enabled: bool) -> Engine:
    url = _sanitize_database_url(url)
    return create_engine(
        url,
        pool_pre_ping=True,
        connect_args=_connect_args(url, connect_timeout, socket_timeout, ssl_enabled),
    )


class Database:
    """Handle on the durable store.

    A single connection attempt is made (``connect`` directly, or ``start`` to run it on a
    background thread). ``is_connected`` is the readiness flag the request path checks.
    """

    def __init__(
        self,
        url: str,
        connect_timeout: float = DB_CONNECT_TIMEOUT,
        socket_timeout: float = DB_SOCKET_TIMEOUT,
        ssl_enabled: bool = DATABASE_SSL,
    ):
        self.url = (url or "").strip()
        self.connect_timeout = connect_timeout
        self.socket_timeout = socket_timeout
        self.ssl_enabled = ssl_enabled

        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None
        self.status: Optional[ConnectionStatus] = None

        self._connected = False
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def is_connected(self) -> bool:
        return self._connected

    def start(self) -> None:
        with self._lock:
            if self._thread is not None or self.status is not None:
                return
            self._thread = threading.Thread(target=self.connect, name="db-connect", daemon=True)
            self._thread.start()

    def wait(self, timeout: Optional[float] = None) -> Optional[ConnectionStatus]:
        if self._thread is not None:
            self._thread.join(timeout)
        return self.status

    def connect(self) -> ConnectionStatus:
        if not self.url:
            return self._record(False, "DATABASE_URL is not set")

        engine = None
        try:
            engine = _make_engine(self.url, self.connect_timeout, self.socket_timeout, self.ssl_enabled)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            Base.metadata.create_all(bind=engine)
        except Exception as exc:
            if engine is not None:
                engine.dispose()
            return self._record(False, str(exc) or exc.__class__.__name__)

        self.engine = engine
        self.SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
        return self._record(True, None)

    def save(self, row: EventRegistration) -> int:
        """Insert one row and return its primary key."""
        if self.SessionLocal is None:
            raise RuntimeError("Database is not connected")

        db = self.SessionLocal()
        try:
            db.add(row)
            db.commit()
            db.refresh(row)
            return row.id
        except DBAPIError as exc:
            db.rollback()
            if exc.connection_invalidated:
                self._connected = False
                log_evt("warning", "db_connection_lost", error=exc.orig)
            raise
        finally:
            db.close()

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self._connected = False

    def _record(self, connected: bool, error: Optional[str]) -> ConnectionStatus:
        self.status = ConnectionStatus(connected=connected, error=error, checked_at=datetime.now(timezone.utc))
        self._connected = connected
        if connected:
            log_evt("info", "db_connected")
        else:
            log_evt("warning", "db_unavailable", error=error, mode="fallback")
        return self.status
