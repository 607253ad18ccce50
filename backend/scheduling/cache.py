"""Resolution cache keyed by request and invalidated by row content."""

import copy
import hashlib
import logging
from collections import OrderedDict
from collections.abc import Callable
from datetime import date
from threading import Lock
from typing import Any, NamedTuple, TypeVar

from backend.core import config
from backend.scheduling.schemas import ScheduleInputs

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ScheduleCacheKey(NamedTuple):
    clinician_id: str
    start: date
    end: date
    time_zone: str
    scope: str


def fingerprint(inputs: ScheduleInputs) -> str:
    return hashlib.sha256(inputs.model_dump_json().encode('utf-8')).hexdigest()


class ScheduleCache:
    """LRU cache of resolved schedules.

    An entry is reused only while both its key and the fingerprint of the rows
    it was computed from are unchanged; any edit to the rows forces a recompute.
    Callers always get their own copy, so mutating a result leaves the entry intact.
    """

    def __init__(self, max_entries: int = config.SCHEDULE_CACHE_SIZE):
        self.max_entries = max_entries
        self._entries: OrderedDict[ScheduleCacheKey, tuple[str, Any]] = OrderedDict()
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get_or_compute(self, key: ScheduleCacheKey, inputs: ScheduleInputs, compute: Callable[[], T]) -> T:
        current_fingerprint = fingerprint(inputs)

        with self._lock:
            cached = self._entries.get(key)
            if cached is not None and cached[0] == current_fingerprint:
                self._entries.move_to_end(key)
                logger.debug('Schedule cache hit for %s', key)
                return copy.deepcopy(cached[1])

        result = compute()

        with self._lock:
            self._entries[key] = (current_fingerprint, copy.deepcopy(result))
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

        return result

    def invalidate(self, clinician_id: str | None = None) -> None:
        with self._lock:
            if clinician_id is None:
                self._entries.clear()
                return

            for key in [key for key in self._entries if key.clinician_id == clinician_id]:
                del self._entries[key]


schedule_cache = ScheduleCache()
