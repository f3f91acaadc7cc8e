from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class EventRegistration(Base):
    __tablename__ = "event_registrations"

    id = Column(Integer, primary_key=True, index=True)

    first_name = Column(String(120), nullable=False)
    last_name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(80), nullable=False, default="Not provided")

    event_type = Column(String(80), nullable=False, default="wedding")
    # NULL when the submitted date could not be parsed
    event_date = Column(DateTime(timezone=True), nullable=True)
    guest_count = Column(String(40), nullable=False)

    special_requests = Column(Text, nullable=False, default="None")

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
