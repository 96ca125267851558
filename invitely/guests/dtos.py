from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from invitely.events.dtos import EventDTO


class RSVPError(Exception):
    """Base class for RSVP rejections. Routers map status_code to the HTTP response."""

    status_code = 400


class GuestNotFoundError(RSVPError):
    status_code = 404

    def __init__(self, message: str = "Invalid RSVP token") -> None:
        super().__init__(message)


class RSVPDeadlinePassedError(RSVPError):
    def __init__(self) -> None:
        super().__init__("The RSVP deadline for this event has passed")


class GuestLimitExceededError(RSVPError):
    """Raised when an attending guest brings more companions than allowed."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class GuestStatus(str, Enum):
    PENDING = "PENDING"
    ATTENDING = "ATTENDING"
    NOT_ATTENDING = "NOT_ATTENDING"
    MAYBE = "MAYBE"


class ChangeType(str, Enum):
    NEW = "NEW"
    UPDATED = "UPDATED"
    STATUS_CHANGED = "STATUS_CHANGED"


@dataclass(frozen=True)
class AdditionalGuestDTO:
    id: UUID
    name: str


@dataclass(frozen=True)
class GuestDTO:
    """DTO for guest data."""

    id: UUID
    event_id: UUID
    email: str
    token: str
    status: GuestStatus = GuestStatus.PENDING
    name: str | None = None
    phone: str | None = None
    dietary_notes: str | None = None
    notify_by_email: bool = True
    notify_by_sms: bool = False
    # per-guest override of the event's max_guests_per_invitee
    max_guests: int | None = None
    additional_guests: list[AdditionalGuestDTO] = field(default_factory=list)
    responded_at: datetime | None = None
    reminder_sent_at: datetime | None = None
    sms_reminder_sent_at: datetime | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.email

    @property
    def email_reminder_pending(self) -> bool:
        return self.notify_by_email and self.reminder_sent_at is None

    @property
    def sms_reminder_pending(self) -> bool:
        return self.notify_by_sms and bool(self.phone) and self.sms_reminder_sent_at is None


@dataclass(frozen=True)
class RSVPChangeDTO:
    """
    What a single RSVP submission writes.
    additional_guest_names=None keeps the stored set; a list replaces it.
    Profile fields left as None are not touched.
    """

    status: GuestStatus
    responded_at: datetime
    additional_guest_names: list[str] | None = None
    name: str | None = None
    phone: str | None = None
    dietary_notes: str | None = None


@dataclass(frozen=True)
class RSVPResultDTO:
    guest: GuestDTO
    event: EventDTO
    change_type: ChangeType
    previous_status: GuestStatus | None = None


@dataclass(frozen=True)
class GuestLimitCheck:
    """Outcome of a capacity check. remaining is math.inf when unlimited."""

    valid: bool
    remaining: float
    error: str | None = None
