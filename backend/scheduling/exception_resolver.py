"""Applies date-specific exceptions and single-date entries to expanded rules."""

import logging
from collections.abc import Iterable
from datetime import date, time, tzinfo

from backend.scheduling.errors import MalformedTimeValue
from backend.scheduling.schemas import (
    AvailabilityExceptionData,
    AvailabilityRuleData,
    IntervalSource,
    ResolutionScope,
    ResolvedInterval,
    SingleDateAvailabilityData,
)
from backend.scheduling.time_normalization import to_end_instant, to_instant

logger = logging.getLogger(__name__)

RULE_DERIVED_SOURCES = {IntervalSource.RULE, IntervalSource.EXCEPTION}


def build_interval(
    day: date,
    start_time: str | time,
    end_time: str | time,
    time_zone: tzinfo,
    *,
    source: IntervalSource,
    source_ids: list[str],
    is_modified: bool = False,
) -> ResolvedInterval | None:
    """Build one resolved interval, or None (logged) when its times are unusable."""
    row_id = source_ids[-1]
    try:
        start = to_instant(day, start_time, time_zone)
        end = to_end_instant(day, end_time, time_zone, start)
    except MalformedTimeValue as exc:
        logger.warning('Skipping %s row %s on %s: %s', source.value, row_id, day, exc)
        return None

    if end < start:
        logger.warning(
            'Skipping %s row %s on %s: end %s is before start %s',
            source.value,
            row_id,
            day,
            end_time,
            start_time,
        )
        return None

    return ResolvedInterval(
        date=day,
        start=start,
        end=end,
        source=source,
        source_ids=list(source_ids),
        is_modified=is_modified,
    )


def resolve(
    expanded: Iterable[tuple[date, AvailabilityRuleData]],
    exceptions: Iterable[AvailabilityExceptionData],
    single_dates: Iterable[SingleDateAvailabilityData],
    scope: ResolutionScope,
    time_zone: tzinfo,
) -> list[ResolvedInterval]:
    """Resolve rule occurrences, exceptions and single-date entries into intervals.

    Single-date entries are additive in DAY scope. In MONTH scope an entry on a
    date replaces every rule-derived interval for that date, which is what the
    month grid's at-a-glance hours show.
    """
    exceptions_by_rule: dict[tuple[date, str], AvailabilityExceptionData] = {}
    ad_hoc_exceptions: list[AvailabilityExceptionData] = []
    for exception in exceptions:
        if exception.original_rule_id:
            exceptions_by_rule[(exception.specific_date, exception.original_rule_id)] = exception
        else:
            ad_hoc_exceptions.append(exception)

    intervals: list[ResolvedInterval | None] = []

    for day, rule in expanded:
        exception = exceptions_by_rule.get((day, rule.id))

        if exception is None:
            intervals.append(
                build_interval(
                    day,
                    rule.start_time,
                    rule.end_time,
                    time_zone,
                    source=IntervalSource.RULE,
                    source_ids=[rule.id],
                )
            )
        elif exception.is_deleted:
            continue
        elif exception.start_time and exception.end_time:
            intervals.append(
                build_interval(
                    day,
                    exception.start_time,
                    exception.end_time,
                    time_zone,
                    source=IntervalSource.EXCEPTION,
                    source_ids=[rule.id, exception.id],
                    is_modified=True,
                )
            )
        else:
            logger.warning(
                'Exception %s for rule %s on %s has no substitute times, keeping the rule hours',
                exception.id,
                rule.id,
                day,
            )
            intervals.append(
                build_interval(
                    day,
                    rule.start_time,
                    rule.end_time,
                    time_zone,
                    source=IntervalSource.RULE,
                    source_ids=[rule.id],
                )
            )

    for exception in ad_hoc_exceptions:
        if exception.is_deleted or not exception.start_time or not exception.end_time:
            continue
        intervals.append(
            build_interval(
                exception.specific_date,
                exception.start_time,
                exception.end_time,
                time_zone,
                source=IntervalSource.AD_HOC,
                source_ids=[exception.id],
                is_modified=True,
            )
        )

    single_date_intervals = [
        build_interval(
            entry.date,
            entry.start_time,
            entry.end_time,
            time_zone,
            source=IntervalSource.SINGLE_DATE,
            source_ids=[entry.id],
        )
        for entry in single_dates
        if entry.is_active
    ]
    single_date_intervals = [interval for interval in single_date_intervals if interval is not None]

    resolved = [interval for interval in intervals if interval is not None]

    if scope is ResolutionScope.MONTH:
        replaced_dates = {interval.date for interval in single_date_intervals}
        resolved = [
            interval
            for interval in resolved
            if not (interval.source in RULE_DERIVED_SOURCES and interval.date in replaced_dates)
        ]

    return resolved + single_date_intervals
