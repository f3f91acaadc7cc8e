import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from starlette.concurrency import run_in_threadpool

from event_intake.core.logging import log_evt
from event_intake.db.models import EventRegistration
from event_intake.db.session import Database

DEFAULT_PHONE = "Not provided"
DEFAULT_EVENT_TYPE = "wedding"
DEFAULT_SPECIAL_REQUESTS = "None"

STORED_MESSAGE = "Event registration successful!"
TEMPORARY_MESSAGE = "Event registration stored temporarily!"
TEMPORARY_NOTE = "Database connection unavailable. Data stored in memory only."


def parse_event_date(value: str) -> Optional[datetime]:
    """ISO date or date-time; date-only and naive values are read as UTC.

    Anything unparseable yields ``None`` rather than an error.
    """
    raw = (value or "").strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        # Out-of-range offsets near year 1 / 9999 overflow on conversion.
        return None


def format_datetime(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class RegistrationRecord:
    first_name: str
    last_name: str
    email: str
    event_date: Optional[datetime]
    guest_count: str
    phone: str = DEFAULT_PHONE
    event_type: str = DEFAULT_EVENT_TYPE
    special_requests: str = DEFAULT_SPECIAL_REQUESTS
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_row(self) -> EventRegistration:
        return EventRegistration(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            phone=self.phone,
            event_type=self.event_type,
            event_date=self.event_date,
            guest_count=self.guest_count,
            special_requests=self.special_requests,
            created_at=self.created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "eventType": self.event_type,
            "eventDate": format_datetime(self.event_date),
            "guestCount": self.guest_count,
            "specialRequests": self.special_requests,
            "createdAt": format_datetime(self.created_at),
        }


class FallbackStore:
    """Append-only, in-memory stand-in for the database. Lost on restart."""

    def __init__(self):
        self._items: List[RegistrationRecord] = []
        self._lock = threading.Lock()

    def append(self, record: RegistrationRecord) -> None:
        with self._lock:
            self._items.append(record)

    def snapshot(self) -> List[RegistrationRecord]:
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


@dataclass(frozen=True)
class StoreOutcome:
    message: str
    data: Dict[str, Any]
    note: Optional[str] = None

    def to_body(self) -> Dict[str, Any]:
        body = {"success": True, "message": self.message, "data": self.data}
        if self.note is not None:
            body["note"] = self.note
        return body


class RegistrationService:
    def __init__(self, database: Database, fallback: Optional[FallbackStore] = None):
        self.database = database
        self.fallback = fallback if fallback is not None else FallbackStore()

    async def store(self, record: RegistrationRecord) -> StoreOutcome:
        """Persist durably when the database is ready, otherwise keep it in memory.

        Database errors propagate to the caller.
        """
        if self.database.is_connected():
            row_id = await run_in_threadpool(self.database.save, record.to_row())
            log_evt("info", "registration_stored", registration_id=row_id, email=record.email)
            data = record.to_dict()
            data["id"] = row_id
            return StoreOutcome(message=STORED_MESSAGE, data=data)

        self.fallback.append(record)
        log_evt("info", "registration_buffered", email=record.email, buffered=len(self.fallback))
        return StoreOutcome(message=TEMPORARY_MESSAGE, data=record.to_dict(), note=TEMPORARY_NOTE)
