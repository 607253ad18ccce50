"""Coalesces overlapping or touching intervals into display blocks."""

from collections.abc import Iterable

from backend.scheduling.schemas import ResolvedInterval, TimeBlock


def _sort_key(interval: ResolvedInterval | TimeBlock):
    return interval.start, interval.end, tuple(interval.source_ids)


def merge(intervals: Iterable[ResolvedInterval | TimeBlock]) -> list[TimeBlock]:
    candidates = [interval for interval in intervals if interval.end > interval.start]

    blocks: list[TimeBlock] = []
    current: TimeBlock | None = None

    for interval in sorted(candidates, key=_sort_key):
        if current is not None and interval.start <= current.end:
            current.end = max(current.end, interval.end)
            new_ids = [source_id for source_id in interval.source_ids if source_id not in current.source_ids]
            current.source_ids.extend(new_ids)
            current.is_modified = current.is_modified or interval.is_modified
            continue

        current = TimeBlock(
            start=interval.start,
            end=interval.end,
            source_ids=list(dict.fromkeys(interval.source_ids)),
            is_modified=interval.is_modified,
        )
        blocks.append(current)

    return blocks
