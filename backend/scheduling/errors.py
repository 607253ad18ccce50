"""Error types raised by the schedule resolution engine."""


class ScheduleError(Exception):
    """Base class for schedule resolution errors."""


class InvalidTimeZone(ScheduleError):
    def __init__(self, time_zone: str | None):
        self.time_zone = time_zone
        super().__init__(f"Unrecognized time zone: {time_zone!r}")


class MalformedTimeValue(ScheduleError, ValueError):
    def __init__(self, value: object, row_id: str | None = None):
        self.value = value
        self.row_id = row_id
        detail = f"Malformed time value {value!r}"
        if row_id:
            detail += f" on row {row_id}"
        super().__init__(detail)


class DataFetchFailure(ScheduleError):
    """One of the data-store reads failed; the schedule must not render as empty."""

    def __init__(self, query: str, message: str | None = None):
        self.query = query
        super().__init__(message or f"Failed to load {query}.")
