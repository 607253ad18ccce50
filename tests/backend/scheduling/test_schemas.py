from datetime import date

import pytest
from pydantic import ValidationError

from backend.scheduling.schemas import DateRange, SlotGrid


def test_date_range_rejects_end_before_start() -> None:
    with pytest.raises(ValidationError):
        DateRange(start=date(2024, 6, 5), end=date(2024, 6, 4))


@pytest.mark.parametrize(
    ('day', 'expected_start'),
    [
        (date(2024, 6, 2), date(2024, 6, 2)),
        (date(2024, 6, 4), date(2024, 6, 2)),
        (date(2024, 6, 8), date(2024, 6, 2)),
    ],
)
def test_week_of_starts_on_sunday(day: date, expected_start: date) -> None:
    week = DateRange.week_of(day)

    assert week.start == expected_start
    assert week.end == date(2024, 6, 8)
    assert week.length == 7


def test_month_grid_includes_spill_over_weeks() -> None:
    grid = DateRange.month_grid(date(2024, 6, 17))

    assert grid.start == date(2024, 5, 26)
    assert grid.end == date(2024, 7, 6)
    assert grid.length == 42
    assert grid.contains(date(2024, 6, 30))
    assert not grid.contains(date(2024, 7, 7))


def test_days_is_inclusive() -> None:
    days = list(DateRange(start=date(2024, 2, 28), end=date(2024, 3, 1)).days())

    assert days == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]


def test_default_slot_grid_has_thirty_two_slots() -> None:
    assert len(list(SlotGrid().wall_times())) == 32
