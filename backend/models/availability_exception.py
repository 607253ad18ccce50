"""Availability exception model definitions."""

from sqlalchemy import Column, Date, String, Boolean, ForeignKey
from backend.database import Base
from backend.models.availability import _new_id


class AvailabilityException(Base):
    """Overrides one weekly rule occurrence on one date, or adds ad-hoc hours."""
    __tablename__ = "availability_exceptions"

    id = Column(String(36), primary_key=True, default=_new_id)
    clinician_id = Column(String(36), nullable=False, index=True)
    specific_date = Column(Date, nullable=False)
    original_rule_id = Column("original_availability_id", String(36), ForeignKey("availability.id"), nullable=True)
    start_time = Column(String, nullable=True)
    end_time = Column(String, nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False)
