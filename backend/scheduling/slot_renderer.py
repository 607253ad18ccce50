"""Classifies a fixed slot grid against availability blocks and appointments."""

from collections.abc import Sequence
from datetime import date, datetime, timedelta, tzinfo

from backend.scheduling.schemas import AppointmentBlock, RenderSlot, SlotClassification, SlotGrid, TimeBlock
from backend.scheduling.time_normalization import to_instant


def grid_instants(grid: SlotGrid, day: date, time_zone: tzinfo) -> list[datetime]:
    return [to_instant(day, wall_time, time_zone) for wall_time in grid.wall_times()]


def block_for_instant(instant: datetime, blocks: Sequence[TimeBlock]) -> TimeBlock | None:
    for block in blocks:
        if block.start <= instant < block.end:
            return block
    return None


def appointment_for_instant(instant: datetime, appointments: Sequence[AppointmentBlock]) -> AppointmentBlock | None:
    # Overlapping bookings: the one that starts last owns the slot.
    owner = None
    for appointment in sorted(appointments, key=lambda block: (block.start, block.end, block.id)):
        if appointment.start <= instant < appointment.end:
            owner = appointment
    return owner


def is_block_start(instant: datetime, block: TimeBlock | None, step: timedelta) -> bool:
    if block is None:
        return False
    return instant - block.start < step


def is_block_end(instant: datetime, block: TimeBlock | None, step: timedelta) -> bool:
    if block is None:
        return False
    return block.end - (instant + step) < step


def is_appointment_start(instant: datetime, appointment: AppointmentBlock | None, step: timedelta) -> bool:
    if appointment is None:
        return False
    return abs(instant - appointment.start) < step


def render_slots(
    blocks: Sequence[TimeBlock],
    appointments: Sequence[AppointmentBlock],
    grid: SlotGrid,
    day: date,
    time_zone: tzinfo,
) -> list[RenderSlot]:
    """Classify every grid instant of a day as booked, available or unavailable.

    Boundary flags are checked at grid resolution rather than by exact equality
    because blocks are free to start or end between grid points.
    """
    step = grid.step
    slots: list[RenderSlot] = []

    for instant in grid_instants(grid, day, time_zone):
        block = block_for_instant(instant, blocks)
        appointment = appointment_for_instant(instant, appointments)

        if appointment is not None:
            classification = SlotClassification.BOOKED
        elif block is not None:
            classification = SlotClassification.AVAILABLE
        else:
            classification = SlotClassification.UNAVAILABLE

        slots.append(
            RenderSlot(
                instant=instant,
                classification=classification,
                is_block_start=is_block_start(instant, block, step),
                is_block_end=is_block_end(instant, block, step),
                is_appointment_start=is_appointment_start(instant, appointment, step),
                source_ids=list(block.source_ids) if block is not None else [],
                appointment_id=appointment.id if appointment is not None else None,
            )
        )

    return slots
