"""Maps booked appointments onto the requested date range."""

import logging
from collections.abc import Iterable
from datetime import tzinfo

from backend.scheduling.errors import MalformedTimeValue
from backend.scheduling.schemas import AppointmentBlock, AppointmentData, DateRange
from backend.scheduling.time_normalization import to_end_instant, to_instant

logger = logging.getLogger(__name__)


def project(
    appointments: Iterable[AppointmentData],
    date_range: DateRange,
    time_zone: tzinfo,
) -> list[AppointmentBlock]:
    blocks: list[AppointmentBlock] = []

    for appointment in appointments:
        if not date_range.contains(appointment.date):
            continue

        try:
            start = to_instant(appointment.date, appointment.start_time, time_zone)
            end = to_end_instant(appointment.date, appointment.end_time, time_zone, start)
        except MalformedTimeValue as exc:
            logger.warning('Skipping appointment %s on %s: %s', appointment.id, appointment.date, exc)
            continue

        if end < start:
            logger.warning('Skipping appointment %s on %s: ends before it starts', appointment.id, appointment.date)
            continue

        blocks.append(
            AppointmentBlock(
                id=appointment.id,
                client_id=appointment.client_id,
                date=appointment.date,
                start=start,
                end=end,
                type=appointment.type,
                status=appointment.status,
            )
        )

    blocks.sort(key=lambda block: (block.start, block.end, block.id))
    return blocks
