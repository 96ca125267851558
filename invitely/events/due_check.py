import math
from datetime import datetime, timedelta

from invitely.events.dtos import ReminderRule, ReminderUnit

UNIT_DURATIONS = {
    ReminderUnit.DAY: timedelta(days=1),
    ReminderUnit.HOUR: timedelta(hours=1),
}


def units_until(unit: ReminderUnit, event_start: datetime, now: datetime) -> int:
    """Whole units left until the event, rounding any fraction up."""
    return math.ceil((event_start - now) / UNIT_DURATIONS[ReminderUnit(unit)])


def is_due(rule: ReminderRule, event_start: datetime, now: datetime) -> bool:
    """Return True when ``now`` is the moment to fire ``rule`` for an event at ``event_start``.

    A 7-day rule is due from exactly 7 days before the start until just before
    6 days remain, so a periodic check 6 days and 12 hours out still fires it.
    A zero-valued rule is due from the start until just before one unit has
    passed; positive rules are never due once the event has started.
    """
    return units_until(rule.unit, event_start, now) == rule.value


def first_due_rule(
    rules: list[ReminderRule], event_start: datetime, now: datetime
) -> ReminderRule | None:
    """First rule in schedule order that is due, if any."""
    for rule in rules:
        if is_due(rule, event_start, now):
            return rule
    return None
