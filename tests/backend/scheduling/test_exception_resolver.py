from datetime import date, timedelta

import pytest
import pytz

from backend.scheduling.exception_resolver import resolve
from backend.scheduling.expander import expand
from backend.scheduling.schemas import (
    AvailabilityExceptionData,
    AvailabilityRuleData,
    DateRange,
    IntervalSource,
    ResolutionScope,
    SingleDateAvailabilityData,
)
from backend.scheduling.time_normalization import to_instant

CHICAGO = pytz.timezone('America/Chicago')
MONDAY = date(2024, 6, 3)


def make_rule(rule_id: str = 'rule-1', day_of_week: str = 'Monday', start: str = '09:00', end: str = '12:00'):
    return AvailabilityRuleData(
        id=rule_id,
        clinician_id='clinician-1',
        day_of_week=day_of_week,
        start_time=start,
        end_time=end,
    )


def make_exception(exception_id: str = 'exception-1', specific_date: date = MONDAY, **fields):
    return AvailabilityExceptionData(
        id=exception_id,
        clinician_id='clinician-1',
        specific_date=specific_date,
        **fields,
    )


def make_single_date(entry_id: str = 'single-1', day: date = MONDAY, start: str = '13:00', end: str = '15:00'):
    return SingleDateAvailabilityData(
        id=entry_id,
        clinician_id='clinician-1',
        date=day,
        start_time=start,
        end_time=end,
    )


def resolve_monday(rules, exceptions=(), single_dates=(), scope=ResolutionScope.DAY):
    expanded = expand(rules, DateRange.single(MONDAY))
    return resolve(expanded, exceptions, single_dates, scope, CHICAGO)


def test_rule_without_exception_resolves_unmodified() -> None:
    intervals = resolve_monday([make_rule()])

    assert len(intervals) == 1
    assert intervals[0].start == to_instant(MONDAY, '09:00', CHICAGO)
    assert intervals[0].end == to_instant(MONDAY, '12:00', CHICAGO)
    assert intervals[0].source is IntervalSource.RULE
    assert intervals[0].source_ids == ['rule-1']
    assert intervals[0].is_modified is False


def test_deleted_exception_suppresses_rule_occurrence() -> None:
    exception = make_exception(original_rule_id='rule-1', is_deleted=True, start_time='10:00', end_time='11:00')

    intervals = resolve_monday([make_rule()], [exception])

    assert intervals == []


def test_deleted_exception_only_affects_its_own_date() -> None:
    rule = make_rule()
    exception = make_exception(original_rule_id='rule-1', is_deleted=True)
    expanded = expand([rule], DateRange(start=MONDAY, end=MONDAY + timedelta(days=7)))

    intervals = resolve(expanded, [exception], [], ResolutionScope.DAY, CHICAGO)

    assert [interval.date for interval in intervals] == [MONDAY + timedelta(days=7)]


def test_substitute_exception_replaces_times_and_marks_modified() -> None:
    exception = make_exception(original_rule_id='rule-1', start_time='10:00', end_time='11:00')

    intervals = resolve_monday([make_rule()], [exception])

    assert len(intervals) == 1
    assert intervals[0].start == to_instant(MONDAY, '10:00', CHICAGO)
    assert intervals[0].end == to_instant(MONDAY, '11:00', CHICAGO)
    assert intervals[0].is_modified is True
    assert intervals[0].source_ids == ['rule-1', 'exception-1']


def test_exception_for_other_rule_leaves_rule_untouched() -> None:
    exception = make_exception(original_rule_id='rule-2', is_deleted=True)

    intervals = resolve_monday([make_rule()], [exception])

    assert [interval.source_ids for interval in intervals] == [['rule-1']]


@pytest.mark.parametrize('scope', [ResolutionScope.DAY, ResolutionScope.MONTH])
@pytest.mark.parametrize(
    'fields',
    [
        {},
        {'start_time': '10:00'},
        {'end_time': '11:00'},
    ],
)
def test_exception_without_substitute_times_keeps_rule_hours(fields: dict, scope: ResolutionScope) -> None:
    exception = make_exception(original_rule_id='rule-1', **fields)

    intervals = resolve_monday([make_rule()], [exception], scope=scope)

    assert len(intervals) == 1
    assert intervals[0].start == to_instant(MONDAY, '09:00', CHICAGO)
    assert intervals[0].end == to_instant(MONDAY, '12:00', CHICAGO)
    assert intervals[0].source is IntervalSource.RULE
    assert intervals[0].source_ids == ['rule-1']
    assert intervals[0].is_modified is False


def test_ad_hoc_exception_is_added() -> None:
    exception = make_exception('ad-hoc', start_time='14:00', end_time='15:00')

    intervals = resolve_monday([make_rule()], [exception])

    assert [interval.source for interval in intervals] == [IntervalSource.RULE, IntervalSource.AD_HOC]
    assert intervals[1].source_ids == ['ad-hoc']


@pytest.mark.parametrize(
    'fields',
    [
        {'is_deleted': True, 'start_time': '14:00', 'end_time': '15:00'},
        {'start_time': '14:00'},
        {},
    ],
)
def test_ad_hoc_exception_requires_times_and_not_deleted(fields: dict) -> None:
    intervals = resolve_monday([], [make_exception('ad-hoc', **fields)])

    assert intervals == []


def test_single_date_is_additive_in_day_scope() -> None:
    intervals = resolve_monday([make_rule()], single_dates=[make_single_date()])

    assert [interval.source for interval in intervals] == [IntervalSource.RULE, IntervalSource.SINGLE_DATE]


def test_single_date_replaces_rule_intervals_in_month_scope() -> None:
    substitute = make_exception('substitute', original_rule_id='rule-2', start_time='08:00', end_time='09:00')
    ad_hoc = make_exception('ad-hoc', start_time='18:00', end_time='19:00')

    intervals = resolve_monday(
        [make_rule(), make_rule('rule-2', start='07:00', end='08:00')],
        [substitute, ad_hoc],
        [make_single_date()],
        scope=ResolutionScope.MONTH,
    )

    assert [interval.source for interval in intervals] == [IntervalSource.AD_HOC, IntervalSource.SINGLE_DATE]


def test_single_date_on_other_date_does_not_replace_in_month_scope() -> None:
    intervals = resolve_monday(
        [make_rule()],
        single_dates=[make_single_date(day=MONDAY + timedelta(days=1))],
        scope=ResolutionScope.MONTH,
    )

    assert [interval.source for interval in intervals] == [IntervalSource.RULE, IntervalSource.SINGLE_DATE]


def test_inactive_single_date_is_ignored() -> None:
    entry = make_single_date()
    entry.is_active = False

    intervals = resolve_monday([make_rule()], single_dates=[entry], scope=ResolutionScope.MONTH)

    assert [interval.source for interval in intervals] == [IntervalSource.RULE]


def test_malformed_rows_are_skipped_and_logged(caplog) -> None:
    rules = [make_rule('broken', start='9am'), make_rule('good')]

    with caplog.at_level('WARNING'):
        intervals = resolve_monday(rules, [make_exception('bad-ad-hoc', start_time='14:00', end_time='3pm')])

    assert [interval.source_ids for interval in intervals] == [['good']]
    assert 'broken' in caplog.text
    assert 'bad-ad-hoc' in caplog.text


def test_inverted_interval_is_skipped() -> None:
    assert resolve_monday([make_rule(start='12:00', end='09:00')]) == []


@pytest.mark.parametrize('end', ['24:00', '00:00'])
def test_rule_ending_at_midnight_closes_the_day(end: str) -> None:
    intervals = resolve_monday([make_rule(start='18:00', end=end)])

    assert len(intervals) == 1
    assert intervals[0].date == MONDAY
    assert intervals[0].end == to_instant(MONDAY + timedelta(days=1), '00:00', CHICAGO)
