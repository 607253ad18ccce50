"""Time-off model definitions."""

from sqlalchemy import Boolean, Column, Date, String
from backend.database import Base
from backend.models.availability import _new_id


class TimeOffBlock(Base):
    """Represents a clinician's time away, over one or more calendar dates."""
    __tablename__ = "time_off_blocks"

    id = Column(String(36), primary_key=True, default=_new_id)
    clinician_id = Column(String(36), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    # Both null means the whole day on every covered date.
    start_time = Column(String, nullable=True)
    end_time = Column(String, nullable=True)
    reason = Column(String)
    is_active = Column(Boolean, default=True, nullable=False)
