"""Wall-clock, day-of-week and time zone normalization."""

import logging
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum

import pytz

from backend.core import config
from backend.scheduling.errors import InvalidTimeZone, MalformedTimeValue

logger = logging.getLogger(__name__)


class CanonicalDay(str, Enum):
    SUNDAY = 'Sunday'
    MONDAY = 'Monday'
    TUESDAY = 'Tuesday'
    WEDNESDAY = 'Wednesday'
    THURSDAY = 'Thursday'
    FRIDAY = 'Friday'
    SATURDAY = 'Saturday'


# Sunday is 0, matching the numeric encoding some rows are stored with.
_DAYS_BY_NUMBER = {str(index): day for index, day in enumerate(CanonicalDay)}
_DAYS_BY_NAME = {day.value.lower(): day for day in CanonicalDay}

TIME_ZONE_DISPLAY_NAMES = {
    'Eastern Time (ET)': 'America/New_York',
    'Central Time (CT)': 'America/Chicago',
    'Mountain Time (MT)': 'America/Denver',
    'Pacific Time (PT)': 'America/Los_Angeles',
    'Alaska Time': 'America/Anchorage',
    'Hawaii Time': 'Pacific/Honolulu',
    'Arizona': 'America/Phoenix',
}


def normalize_day_of_week(raw: str) -> CanonicalDay | str:
    """Map "0"-"6" (Sunday first) or a day name to a CanonicalDay.

    Unrecognized values are returned unchanged so they simply never match a date.
    """
    if raw is None:
        return raw

    value = str(raw).strip()
    if value in _DAYS_BY_NUMBER:
        return _DAYS_BY_NUMBER[value]

    return _DAYS_BY_NAME.get(value.lower(), raw)


def weekday_of(day: date) -> CanonicalDay:
    return _DAYS_BY_NUMBER[str((day.weekday() + 1) % 7)]


def ensure_iana_time_zone(time_zone: str | None) -> str:
    if not time_zone or not time_zone.strip():
        raise InvalidTimeZone(time_zone)

    name = time_zone.strip()
    return TIME_ZONE_DISPLAY_NAMES.get(name, name)


def resolve_time_zone(time_zone: str | tzinfo | None) -> tzinfo:
    if isinstance(time_zone, tzinfo):
        return time_zone

    name = ensure_iana_time_zone(time_zone)
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError as exc:
        raise InvalidTimeZone(time_zone) from exc


def time_zone_or_default(time_zone: str | tzinfo | None) -> tzinfo:
    try:
        return resolve_time_zone(time_zone)
    except InvalidTimeZone:
        logger.warning(
            'Invalid time zone %r, falling back to %s',
            time_zone,
            config.DEFAULT_TIME_ZONE,
        )
        return resolve_time_zone(config.DEFAULT_TIME_ZONE)


def time_zone_name(zone: tzinfo) -> str:
    return getattr(zone, 'zone', None) or str(zone)


def parse_wall_time(value: str | time, row_id: str | None = None) -> time:
    """Parse "HH:MM" or "HH:MM:SS" into a time of day."""
    if isinstance(value, time):
        return value.replace(tzinfo=None)

    if not isinstance(value, str):
        raise MalformedTimeValue(value, row_id)

    parts = value.strip().split(':')
    if len(parts) not in (2, 3) or not all(part.isdigit() and len(part) <= 2 for part in parts):
        raise MalformedTimeValue(value, row_id)

    hour, minute = int(parts[0]), int(parts[1])
    second = int(parts[2]) if len(parts) == 3 else 0
    if hour > 23 or minute > 59 or second > 59:
        raise MalformedTimeValue(value, row_id)

    return time(hour, minute, second)


def to_instant(day: date, wall_time: str | time, time_zone: str | tzinfo) -> datetime:
    """Interpret a wall-clock time on a date in an IANA zone as an aware instant."""
    zone = resolve_time_zone(time_zone)
    local = datetime.combine(day, parse_wall_time(wall_time))

    if hasattr(zone, 'localize'):
        # Wall times skipped by a spring-forward gap are pushed forward by normalize().
        return zone.normalize(zone.localize(local))

    return local.replace(tzinfo=zone)


def _is_end_of_day(wall_time: str | time) -> bool:
    return isinstance(wall_time, str) and wall_time.strip() in {'24:00', '24:00:00'}


def to_end_instant(day: date, wall_time: str | time, time_zone: str | tzinfo, start: datetime | None = None) -> datetime:
    """Like to_instant, for the end of an interval.

    "24:00", or "00:00" after a later start, is the midnight that closes the day.
    """
    if _is_end_of_day(wall_time):
        return to_instant(day + timedelta(days=1), time(0), time_zone)

    end = to_instant(day, wall_time, time_zone)
    if start is not None and end < start and parse_wall_time(wall_time) == time(0):
        return to_instant(day + timedelta(days=1), time(0), time_zone)
    return end


def format_wall_time(instant: datetime, time_zone: str | tzinfo) -> str:
    local = instant.astimezone(resolve_time_zone(time_zone))
    return local.strftime('%I:%M %p').lstrip('0')
