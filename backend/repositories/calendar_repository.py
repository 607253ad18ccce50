"""Read-only access to the calendar rows a schedule is resolved from."""

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.models.appointment import Appointment
from backend.models.availability import AvailabilityRule
from backend.models.availability_exception import AvailabilityException
from backend.models.single_date_availability import SingleDateAvailability
from backend.models.time_off import TimeOffBlock
from backend.scheduling.errors import DataFetchFailure
from backend.scheduling.schemas import (
    AppointmentData,
    AvailabilityExceptionData,
    AvailabilityRuleData,
    DateRange,
    ScheduleInputs,
    SingleDateAvailabilityData,
    TimeOffData,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


class CalendarRepository:
    def __init__(self, db: Session):
        self.db = db

    def _fetch(self, query_name: str, run: Callable[[], list[T]]) -> list[T]:
        try:
            return run()
        except SQLAlchemyError as exc:
            logger.exception('Calendar query %s failed', query_name)
            raise DataFetchFailure(query_name) from exc

    def list_availability_rules(self, clinician_id: str) -> list[AvailabilityRuleData]:
        def run():
            rows = self.db.query(AvailabilityRule).filter(
                AvailabilityRule.clinician_id == clinician_id,
            ).order_by(AvailabilityRule.start_time.asc(), AvailabilityRule.id.asc()).all()
            return [AvailabilityRuleData.model_validate(row) for row in rows]

        return self._fetch('availability rules', run)

    def list_availability_exceptions(self, clinician_id: str, date_range: DateRange) -> list[AvailabilityExceptionData]:
        def run():
            rows = self.db.query(AvailabilityException).filter(
                AvailabilityException.clinician_id == clinician_id,
                AvailabilityException.specific_date >= date_range.start,
                AvailabilityException.specific_date <= date_range.end,
            ).order_by(AvailabilityException.specific_date.asc(), AvailabilityException.id.asc()).all()
            return [AvailabilityExceptionData.model_validate(row) for row in rows]

        return self._fetch('availability exceptions', run)

    def list_single_date_availability(self, clinician_id: str, date_range: DateRange) -> list[SingleDateAvailabilityData]:
        def run():
            rows = self.db.query(SingleDateAvailability).filter(
                SingleDateAvailability.clinician_id == clinician_id,
                SingleDateAvailability.date >= date_range.start,
                SingleDateAvailability.date <= date_range.end,
            ).order_by(SingleDateAvailability.date.asc(), SingleDateAvailability.id.asc()).all()
            return [SingleDateAvailabilityData.model_validate(row) for row in rows]

        return self._fetch('single-date availability', run)

    def list_appointments(self, clinician_id: str, date_range: DateRange) -> list[AppointmentData]:
        def run():
            rows = self.db.query(Appointment).filter(
                Appointment.clinician_id == clinician_id,
                Appointment.date >= date_range.start,
                Appointment.date <= date_range.end,
            ).order_by(Appointment.date.asc(), Appointment.start_time.asc(), Appointment.id.asc()).all()
            return [AppointmentData.model_validate(row) for row in rows]

        return self._fetch('appointments', run)

    def list_time_off(self, clinician_id: str, date_range: DateRange) -> list[TimeOffData]:
        def run():
            rows = self.db.query(TimeOffBlock).filter(
                TimeOffBlock.clinician_id == clinician_id,
                TimeOffBlock.is_active.is_(True),
                TimeOffBlock.start_date <= date_range.end,
                TimeOffBlock.end_date >= date_range.start,
            ).order_by(TimeOffBlock.start_date.asc(), TimeOffBlock.id.asc()).all()
            return [TimeOffData.model_validate(row) for row in rows]

        return self._fetch('time off', run)


def fetch_schedule_inputs(repository: CalendarRepository, clinician_id: str, date_range: DateRange) -> ScheduleInputs:
    """Run every read; any failure aborts the render instead of yielding a partial schedule."""
    return ScheduleInputs(
        rules=repository.list_availability_rules(clinician_id),
        exceptions=repository.list_availability_exceptions(clinician_id, date_range),
        single_dates=repository.list_single_date_availability(clinician_id, date_range),
        appointments=repository.list_appointments(clinician_id, date_range),
        time_off=repository.list_time_off(clinician_id, date_range),
    )
