"""Row and result shapes shared by the schedule resolution engine."""

from collections.abc import Iterator
from datetime import date, datetime, time, timedelta
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from backend.core import config


class ResolutionScope(str, Enum):
    DAY = 'day'
    MONTH = 'month'


class IntervalSource(str, Enum):
    RULE = 'rule'
    EXCEPTION = 'exception'
    AD_HOC = 'ad_hoc'
    SINGLE_DATE = 'single_date'


class SlotClassification(str, Enum):
    AVAILABLE = 'available'
    BOOKED = 'booked'
    UNAVAILABLE = 'unavailable'


class DateRange(BaseModel):
    """Inclusive range of calendar dates."""

    start: date
    end: date

    @model_validator(mode='after')
    def validate_order(self) -> 'DateRange':
        if self.end < self.start:
            raise ValueError('Date range end must not be before its start.')
        return self

    @classmethod
    def single(cls, day: date) -> 'DateRange':
        return cls(start=day, end=day)

    @classmethod
    def week_of(cls, day: date) -> 'DateRange':
        # Weeks start on Sunday.
        start = day - timedelta(days=(day.weekday() + 1) % 7)
        return cls(start=start, end=start + timedelta(days=6))

    @classmethod
    def month_grid(cls, day: date) -> 'DateRange':
        """Every day shown on a Sunday-first month grid, including the spill-over days."""
        month_start = day.replace(day=1)
        next_month = (month_start + timedelta(days=32)).replace(day=1)
        month_end = next_month - timedelta(days=1)
        return cls(
            start=cls.week_of(month_start).start,
            end=cls.week_of(month_end).end,
        )

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def length(self) -> int:
        return (self.end - self.start).days + 1


class AvailabilityRuleData(BaseModel):
    id: str
    clinician_id: str
    day_of_week: str
    start_time: str | time
    end_time: str | time
    is_active: bool = True

    class Config:
        from_attributes = True


class AvailabilityExceptionData(BaseModel):
    id: str
    clinician_id: str
    specific_date: date
    original_rule_id: str | None = None
    start_time: str | time | None = None
    end_time: str | time | None = None
    is_deleted: bool = False

    class Config:
        from_attributes = True


class SingleDateAvailabilityData(BaseModel):
    id: str
    clinician_id: str
    date: date
    start_time: str | time
    end_time: str | time
    is_active: bool = True

    class Config:
        from_attributes = True


class AppointmentData(BaseModel):
    id: str
    clinician_id: str
    client_id: str
    date: date
    start_time: str | time
    end_time: str | time
    type: str | None = None
    status: str | None = None

    class Config:
        from_attributes = True


class TimeOffData(BaseModel):
    id: str
    clinician_id: str
    start_date: date
    end_date: date
    start_time: str | time | None = None
    end_time: str | time | None = None
    reason: str | None = None
    is_active: bool = True

    class Config:
        from_attributes = True

    @property
    def is_all_day(self) -> bool:
        return not self.start_time and not self.end_time


class ScheduleInputs(BaseModel):
    """The full set of rows one render is resolved from."""

    rules: list[AvailabilityRuleData] = Field(default_factory=list)
    exceptions: list[AvailabilityExceptionData] = Field(default_factory=list)
    single_dates: list[SingleDateAvailabilityData] = Field(default_factory=list)
    appointments: list[AppointmentData] = Field(default_factory=list)
    time_off: list[TimeOffData] = Field(default_factory=list)


class ResolvedInterval(BaseModel):
    date: date
    start: datetime
    end: datetime
    source: IntervalSource
    source_ids: list[str]
    is_modified: bool = False


class TimeBlock(BaseModel):
    start: datetime
    end: datetime
    source_ids: list[str] = Field(default_factory=list)
    is_modified: bool = False


class AppointmentBlock(BaseModel):
    id: str
    client_id: str
    date: date
    start: datetime
    end: datetime
    type: str | None = None
    status: str | None = None


class TimeOffSpan(BaseModel):
    id: str
    date: date
    start: datetime
    end: datetime


class SlotGrid(BaseModel):
    start_hour: int = Field(default=6, ge=0, le=23)
    end_hour: int = Field(default=22, ge=1, le=24)
    step_minutes: int = Field(default=30, gt=0, le=60)

    @model_validator(mode='after')
    def validate_bounds(self) -> 'SlotGrid':
        if self.start_hour >= self.end_hour:
            raise ValueError('Slot grid start hour must be before its end hour.')
        if 60 % self.step_minutes != 0:
            raise ValueError('Slot grid step must evenly divide an hour.')
        return self

    @classmethod
    def from_config(cls) -> 'SlotGrid':
        return cls(
            start_hour=config.SLOT_GRID_START_HOUR,
            end_hour=config.SLOT_GRID_END_HOUR,
            step_minutes=config.SLOT_STEP_MINUTES,
        )

    @property
    def step(self) -> timedelta:
        return timedelta(minutes=self.step_minutes)

    def wall_times(self) -> list[time]:
        first = self.start_hour * 60
        last = self.end_hour * 60
        return [time(minutes // 60, minutes % 60) for minutes in range(first, last, self.step_minutes)]


class RenderSlot(BaseModel):
    instant: datetime
    classification: SlotClassification
    is_block_start: bool = False
    is_block_end: bool = False
    is_appointment_start: bool = False
    source_ids: list[str] = Field(default_factory=list)
    appointment_id: str | None = None


class DaySchedule(BaseModel):
    date: date
    time_zone: str
    blocks: list[TimeBlock]
    slots: list[RenderSlot]
    appointments: list[AppointmentBlock] = Field(default_factory=list)
    time_off: list[TimeOffSpan] = Field(default_factory=list)


class DaySummary(BaseModel):
    date: date
    has_availability: bool
    is_modified: bool
    display_hours: str
    appointment_count: int = 0
