"""Single-date availability model definitions."""

from sqlalchemy import Column, Date, String, Boolean
from backend.database import Base
from backend.models.availability import _new_id


class SingleDateAvailability(Base):
    """Represents a one-off availability window on exactly one calendar date."""
    __tablename__ = "availability_single_date"

    id = Column(String(36), primary_key=True, default=_new_id)
    clinician_id = Column(String(36), nullable=False, index=True)
    date = Column(Date, nullable=False)
    start_time = Column(String, nullable=False)
    end_time = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
