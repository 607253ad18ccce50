"""Availability model definitions."""

import uuid

from sqlalchemy import Column, String, Boolean
from backend.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class AvailabilityRule(Base):
    """Represents a clinician's standing weekly availability for one day of the week."""
    __tablename__ = "availability"

    id = Column(String(36), primary_key=True, default=_new_id)
    clinician_id = Column(String(36), nullable=False, index=True)
    day_of_week = Column(String, nullable=False)  # "Monday" or "1"
    start_time = Column(String, nullable=False)  # HH:MM
    end_time = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
