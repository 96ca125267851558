from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class EventNotFoundError(Exception):
    """Raised when an event id does not resolve to an event."""

    def __init__(self, event_id: UUID) -> None:
        self.event_id = event_id
        super().__init__("Event not found")


class ReminderUnit(str, Enum):
    DAY = "day"
    HOUR = "hour"


@dataclass(frozen=True)
class ReminderRule:
    """A single "N units before the event" reminder."""

    unit: ReminderUnit
    value: int

    def to_dict(self) -> dict:
        return {"type": self.unit.value, "value": self.value}


@dataclass(frozen=True)
class ScheduleValidation:
    """Outcome of validating a reminder schedule."""

    valid: bool
    error: str | None = None


@dataclass(frozen=True)
class HostDTO:
    """A host or co-host who receives RSVP change notifications."""

    id: UUID
    email: str
    name: str | None = None


@dataclass(frozen=True)
class EventDTO:
    """DTO for event data used by reminders and RSVP admission."""

    id: UUID
    slug: str
    title: str
    start_time: datetime
    description: str | None = None
    location: str | None = None
    rsvp_deadline: datetime | None = None
    reminder_schedule: list[ReminderRule] = field(default_factory=list)
    # None means unlimited
    max_guests_per_invitee: int | None = None
    host_id: UUID | None = None
    reply_to: str | None = None

    def deadline_passed(self, now: datetime) -> bool:
        return self.rsvp_deadline is not None and now > self.rsvp_deadline
