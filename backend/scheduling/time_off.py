"""Clinician time off, carved out of the merged availability blocks."""

import logging
from collections.abc import Iterable
from datetime import time, timedelta, tzinfo

from backend.scheduling.errors import MalformedTimeValue
from backend.scheduling.schemas import DateRange, TimeBlock, TimeOffData, TimeOffSpan
from backend.scheduling.time_normalization import to_end_instant, to_instant

logger = logging.getLogger(__name__)


def project_time_off(
    entries: Iterable[TimeOffData],
    date_range: DateRange,
    time_zone: tzinfo,
) -> list[TimeOffSpan]:
    """One span per covered date inside the range.

    All-day entries cover midnight to midnight; timed entries cover the same
    wall-clock window on each of their dates.
    """
    spans: list[TimeOffSpan] = []

    for entry in entries:
        if not entry.is_active:
            continue
        if not entry.is_all_day and not (entry.start_time and entry.end_time):
            logger.warning('Skipping time off %s: only one of its start and end times is set', entry.id)
            continue

        first = max(entry.start_date, date_range.start)
        last = min(entry.end_date, date_range.end)
        if last < first:
            continue

        for day in DateRange(start=first, end=last).days():
            try:
                if entry.is_all_day:
                    start = to_instant(day, time(0), time_zone)
                    end = to_instant(day + timedelta(days=1), time(0), time_zone)
                else:
                    start = to_instant(day, entry.start_time, time_zone)
                    end = to_end_instant(day, entry.end_time, time_zone, start)
            except MalformedTimeValue as exc:
                logger.warning('Skipping time off %s: %s', entry.id, exc)
                break

            if end <= start:
                logger.warning('Skipping time off %s: ends before it starts', entry.id)
                break

            spans.append(TimeOffSpan(id=entry.id, date=day, start=start, end=end))

    spans.sort(key=lambda span: (span.start, span.end, span.id))
    return spans


def subtract(blocks: Iterable[TimeBlock], spans: Iterable[TimeOffSpan]) -> list[TimeBlock]:
    """Remove every time-off span from the blocks, splitting blocks that straddle one."""
    spans = list(spans)
    carved: list[TimeBlock] = []

    for block in blocks:
        pieces = [(block.start, block.end)]
        for span in spans:
            remaining = []
            for start, end in pieces:
                if span.end <= start or span.start >= end:
                    remaining.append((start, end))
                    continue
                if start < span.start:
                    remaining.append((start, span.start))
                if span.end < end:
                    remaining.append((span.end, end))
            pieces = remaining

        carved.extend(
            TimeBlock(start=start, end=end, source_ids=list(block.source_ids), is_modified=block.is_modified)
            for start, end in pieces
        )

    return carved
