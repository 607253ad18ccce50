"""Appointment model definitions."""

from sqlalchemy import Column, Date, String
from backend.database import Base
from backend.models.availability import _new_id


class Appointment(Base):
    """Represents a booked session between a clinician and a client."""
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=_new_id)
    clinician_id = Column(String(36), nullable=False, index=True)
    client_id = Column(String(36), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(String, nullable=False)
    end_time = Column(String, nullable=False)
    type = Column(String)
    status = Column(String)  # scheduled/documented/...
