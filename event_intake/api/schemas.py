from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from event_intake.services.registrations import (
    DEFAULT_EVENT_TYPE,
    DEFAULT_PHONE,
    DEFAULT_SPECIAL_REQUESTS,
    RegistrationRecord,
    parse_event_date,
)

REQUIRED_FIELDS = ("first_name", "last_name", "email", "event_date", "guest_count")


class RegistrationRequest(BaseModel):
    """Loosely typed form body; every field is optional text until checked."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    event_type: Optional[str] = None
    event_date: Optional[str] = None
    guest_count: Optional[str] = None
    special_requests: Optional[str] = None

    def missing_fields(self) -> List[str]:
        # Presence only: whitespace counts as a value and is kept as sent.
        return [name for name in REQUIRED_FIELDS if getattr(self, name) in (None, "")]

    def to_record(self) -> RegistrationRecord:
        return RegistrationRecord(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            event_date=parse_event_date(self.event_date),
            guest_count=self.guest_count,
            phone=self.phone or DEFAULT_PHONE,
            event_type=self.event_type or DEFAULT_EVENT_TYPE,
            special_requests=self.special_requests or DEFAULT_SPECIAL_REQUESTS,
        )
