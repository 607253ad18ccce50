"""Day, week and range schedules resolved for the calendar views."""

from collections import defaultdict
from datetime import date, tzinfo

from backend.repositories.calendar_repository import CalendarRepository, fetch_schedule_inputs
from backend.scheduling.appointment_projector import project
from backend.scheduling.cache import ScheduleCache, ScheduleCacheKey, schedule_cache
from backend.scheduling.exception_resolver import resolve
from backend.scheduling.expander import expand
from backend.scheduling.interval_merger import merge
from backend.scheduling.schemas import (
    DateRange,
    DaySchedule,
    DaySummary,
    ResolutionScope,
    ScheduleInputs,
    SlotGrid,
)
from backend.scheduling.slot_renderer import render_slots
from backend.scheduling.time_off import project_time_off, subtract
from backend.scheduling.time_normalization import format_wall_time, time_zone_name, time_zone_or_default


def _cache_key(clinician_id: str, date_range: DateRange, zone: tzinfo, scope: str) -> ScheduleCacheKey:
    return ScheduleCacheKey(clinician_id, date_range.start, date_range.end, time_zone_name(zone), scope)


def _group_by_date(items) -> dict[date, list]:
    grouped = defaultdict(list)
    for item in items:
        grouped[item.date].append(item)
    return grouped


def build_day_schedules(
    inputs: ScheduleInputs,
    date_range: DateRange,
    time_zone: tzinfo,
    grid: SlotGrid,
) -> list[DaySchedule]:
    expanded = expand(inputs.rules, date_range)
    intervals = resolve(expanded, inputs.exceptions, inputs.single_dates, ResolutionScope.DAY, time_zone)
    appointments = project(inputs.appointments, date_range, time_zone)
    time_off = project_time_off(inputs.time_off, date_range, time_zone)

    intervals_by_date = _group_by_date(intervals)
    appointments_by_date = _group_by_date(appointments)
    time_off_by_date = _group_by_date(time_off)

    schedules = []
    for day in date_range.days():
        blocks = subtract(merge(intervals_by_date.get(day, [])), time_off_by_date.get(day, []))
        day_appointments = appointments_by_date.get(day, [])
        schedules.append(
            DaySchedule(
                date=day,
                time_zone=time_zone_name(time_zone),
                blocks=blocks,
                slots=render_slots(blocks, day_appointments, grid, day, time_zone),
                appointments=day_appointments,
                time_off=time_off_by_date.get(day, []),
            )
        )

    return schedules


def summarize_range(inputs: ScheduleInputs, date_range: DateRange, time_zone: tzinfo) -> dict[date, DaySummary]:
    expanded = expand(inputs.rules, date_range)
    intervals = resolve(expanded, inputs.exceptions, inputs.single_dates, ResolutionScope.MONTH, time_zone)
    appointments = project(inputs.appointments, date_range, time_zone)
    time_off = project_time_off(inputs.time_off, date_range, time_zone)

    intervals_by_date = _group_by_date(intervals)
    appointments_by_date = _group_by_date(appointments)
    time_off_by_date = _group_by_date(time_off)

    summaries: dict[date, DaySummary] = {}
    for day in date_range.days():
        blocks = subtract(merge(intervals_by_date.get(day, [])), time_off_by_date.get(day, []))
        display_hours = ''
        if blocks:
            earliest = min(block.start for block in blocks)
            latest = max(block.end for block in blocks)
            display_hours = f'{format_wall_time(earliest, time_zone)}-{format_wall_time(latest, time_zone)}'

        summaries[day] = DaySummary(
            date=day,
            has_availability=bool(blocks),
            is_modified=any(block.is_modified for block in blocks),
            display_hours=display_hours,
            appointment_count=len(appointments_by_date.get(day, [])),
        )

    return summaries


def resolve_day_schedule(
    repository: CalendarRepository,
    clinician_id: str,
    day: date,
    time_zone: str | None,
    grid: SlotGrid | None = None,
    cache: ScheduleCache = schedule_cache,
) -> DaySchedule:
    zone = time_zone_or_default(time_zone)
    grid = grid or SlotGrid.from_config()
    date_range = DateRange.single(day)
    inputs = fetch_schedule_inputs(repository, clinician_id, date_range)

    key = _cache_key(clinician_id, date_range, zone, f'days:{grid.start_hour}-{grid.end_hour}/{grid.step_minutes}')
    schedules = cache.get_or_compute(key, inputs, lambda: build_day_schedules(inputs, date_range, zone, grid))
    return schedules[0]


def resolve_week_schedule(
    repository: CalendarRepository,
    clinician_id: str,
    day: date,
    time_zone: str | None,
    grid: SlotGrid | None = None,
    cache: ScheduleCache = schedule_cache,
) -> list[DaySchedule]:
    zone = time_zone_or_default(time_zone)
    grid = grid or SlotGrid.from_config()
    date_range = DateRange.week_of(day)
    inputs = fetch_schedule_inputs(repository, clinician_id, date_range)

    key = _cache_key(clinician_id, date_range, zone, f'days:{grid.start_hour}-{grid.end_hour}/{grid.step_minutes}')
    return cache.get_or_compute(key, inputs, lambda: build_day_schedules(inputs, date_range, zone, grid))


def resolve_range_summary(
    repository: CalendarRepository,
    clinician_id: str,
    date_range: DateRange,
    time_zone: str | None,
    cache: ScheduleCache = schedule_cache,
) -> dict[date, DaySummary]:
    zone = time_zone_or_default(time_zone)
    inputs = fetch_schedule_inputs(repository, clinician_id, date_range)

    key = _cache_key(clinician_id, date_range, zone, 'summary')
    return cache.get_or_compute(key, inputs, lambda: summarize_range(inputs, date_range, zone))
