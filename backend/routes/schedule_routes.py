from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.core import config
from backend.database import SessionLocal, ensure_calendar_schema
from backend.repositories.calendar_repository import CalendarRepository
from backend.scheduling.errors import DataFetchFailure
from backend.scheduling.schedule import resolve_day_schedule, resolve_range_summary, resolve_week_schedule
from backend.scheduling.schemas import DateRange, DaySchedule, DaySummary

router = APIRouter(tags=['schedule'])


def ensure_database_ready() -> None:
    try:
        ensure_calendar_schema()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail='Database unavailable. Verify DATABASE_URL and database credentials.',
        ) from exc


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def normalize_clinician_id(clinician_id: str) -> str:
    normalized = clinician_id.strip()
    if not normalized:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Clinician id is required.',
        )
    return normalized


def build_date_range(start_date: date, end_date: date) -> DateRange:
    try:
        date_range = DateRange(start=start_date, end=end_date)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='End date must not be before start date.',
        ) from exc

    if date_range.length > config.MAX_RANGE_DAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Date ranges are limited to {config.MAX_RANGE_DAYS} days.',
        )

    return date_range


def schedule_unavailable(exc: DataFetchFailure) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f'Schedule unavailable: could not load {exc.query}.',
    )


@router.get('/day', response_model=DaySchedule)
def get_day_schedule(
    clinician_id: str = Query(...),
    day: date = Query(..., alias='date'),
    time_zone: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    normalized_clinician_id = normalize_clinician_id(clinician_id)
    ensure_database_ready()

    try:
        return resolve_day_schedule(CalendarRepository(db), normalized_clinician_id, day, time_zone)
    except DataFetchFailure as exc:
        raise schedule_unavailable(exc) from exc


@router.get('/week', response_model=list[DaySchedule])
def get_week_schedule(
    clinician_id: str = Query(...),
    day: date = Query(..., alias='date'),
    time_zone: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    normalized_clinician_id = normalize_clinician_id(clinician_id)
    ensure_database_ready()

    try:
        return resolve_week_schedule(CalendarRepository(db), normalized_clinician_id, day, time_zone)
    except DataFetchFailure as exc:
        raise schedule_unavailable(exc) from exc


@router.get('/summary', response_model=list[DaySummary])
def get_range_summary(
    clinician_id: str = Query(...),
    start_date: date = Query(...),
    end_date: date = Query(...),
    time_zone: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    normalized_clinician_id = normalize_clinician_id(clinician_id)
    date_range = build_date_range(start_date, end_date)
    ensure_database_ready()

    try:
        summaries = resolve_range_summary(CalendarRepository(db), normalized_clinician_id, date_range, time_zone)
    except DataFetchFailure as exc:
        raise schedule_unavailable(exc) from exc

    return [summaries[day] for day in date_range.days()]


@router.get('/month', response_model=list[DaySummary])
def get_month_summary(
    clinician_id: str = Query(...),
    day: date = Query(..., alias='date'),
    time_zone: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    normalized_clinician_id = normalize_clinician_id(clinician_id)
    date_range = DateRange.month_grid(day)
    ensure_database_ready()

    try:
        summaries = resolve_range_summary(CalendarRepository(db), normalized_clinician_id, date_range, time_zone)
    except DataFetchFailure as exc:
        raise schedule_unavailable(exc) from exc

    return [summaries[grid_day] for grid_day in date_range.days()]
