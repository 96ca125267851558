"""Reminder schedules: parsing, serialization, display and validation.

A schedule is stored on the event as JSON text. Two encodings exist:

* legacy: ``[7, 3, 1]`` -- bare integers, each meaning "N days before";
* current: ``[{"type": "day", "value": 7}, {"type": "hour", "value": 2}]``.

Parsing fails open: anything malformed reads as an empty schedule, which
means "no reminders" for the event.
"""

import json
import logging

from invitely.events.dtos import ReminderRule, ReminderUnit, ScheduleValidation

logger = logging.getLogger(__name__)


def _is_whole_number(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_schedule(raw: str | None) -> list[ReminderRule]:
    """Parse a stored schedule, accepting both the legacy and current encodings."""
    if not raw:
        return []

    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring reminder schedule that is not valid JSON: %r", raw)
        return []

    if not isinstance(parsed, list):
        logger.warning("Ignoring reminder schedule that is not a list: %r", raw)
        return []

    if not parsed:
        return []

    if all(_is_whole_number(item) for item in parsed):
        return [ReminderRule(unit=ReminderUnit.DAY, value=item) for item in parsed]

    rules = []
    for item in parsed:
        if not isinstance(item, dict) or "value" not in item:
            logger.warning("Ignoring reminder schedule with unrecognised entry: %r", raw)
            return []
        try:
            unit = ReminderUnit(item.get("type"))
        except ValueError:
            logger.warning("Ignoring reminder schedule with unknown unit: %r", raw)
            return []
        if not _is_whole_number(item["value"]):
            logger.warning("Ignoring reminder schedule with non-integer value: %r", raw)
            return []
        rules.append(ReminderRule(unit=unit, value=item["value"]))
    return rules


def serialize_schedule(rules: list[ReminderRule]) -> str | None:
    """Serialize to the current encoding; an empty schedule is stored as NULL."""
    if not rules:
        return None
    return json.dumps([rule.to_dict() for rule in rules], separators=(",", ":"))


def format_rule(rule: ReminderRule) -> str:
    label = "day" if rule.unit == ReminderUnit.DAY else "hour"
    suffix = "" if rule.value == 1 else "s"
    return f"{rule.value} {label}{suffix} before"


def validate_schedule(rules: list[ReminderRule]) -> ScheduleValidation:
    """Validate a host-supplied schedule.

    Entries are checked in order and the first problem wins. For each entry the
    value is checked first, then the unit, then whether an earlier entry has the
    same unit and value.
    """
    seen: set[tuple[str, int]] = set()
    for rule in rules:
        value = rule.value
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            return ScheduleValidation(
                valid=False, error=f"Reminder value must be a whole number: {value!r}"
            )
        if value <= 0:
            return ScheduleValidation(
                valid=False, error=f"Reminder value must be positive: {format_rule(rule)}"
            )
        if isinstance(value, float) and not value.is_integer():
            return ScheduleValidation(
                valid=False, error=f"Reminder value must be a whole number: {format_rule(rule)}"
            )

        if rule.unit not in (ReminderUnit.DAY, ReminderUnit.HOUR):
            unit = rule.unit.value if isinstance(rule.unit, ReminderUnit) else rule.unit
            return ScheduleValidation(valid=False, error=f"Invalid reminder type: {unit}")

        key = (ReminderUnit(rule.unit).value, int(value))
        if key in seen:
            return ScheduleValidation(
                valid=False, error=f"Duplicate reminder: {format_rule(rule)}"
            )
        seen.add(key)

    return ScheduleValidation(valid=True)
