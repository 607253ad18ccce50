"""Projects weekly availability rules onto concrete dates."""

import logging
from collections.abc import Iterable
from datetime import date

from backend.scheduling.schemas import AvailabilityRuleData, DateRange
from backend.scheduling.time_normalization import CanonicalDay, normalize_day_of_week, weekday_of

logger = logging.getLogger(__name__)


def expand(rules: Iterable[AvailabilityRuleData], date_range: DateRange) -> list[tuple[date, AvailabilityRuleData]]:
    active_rules: list[tuple[CanonicalDay | str, AvailabilityRuleData]] = []
    for rule in rules:
        if not rule.is_active:
            continue

        canonical_day = normalize_day_of_week(rule.day_of_week)
        if not isinstance(canonical_day, CanonicalDay):
            logger.warning('Availability rule %s has unrecognized day_of_week %r', rule.id, rule.day_of_week)
        active_rules.append((canonical_day, rule))

    expanded: list[tuple[date, AvailabilityRuleData]] = []
    for day in date_range.days():
        weekday = weekday_of(day)
        for canonical_day, rule in active_rules:
            if canonical_day is weekday:
                expanded.append((day, rule))

    return expanded
