from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class ReminderEmail:
    to_address: str
    guest_name: str
    event_title: str
    event_start: datetime
    rsvp_url: str
    event_location: str | None = None
    attending_url: str | None = None
    not_attending_url: str | None = None
    reply_to: str | None = None
    guest_id: UUID | None = None


@dataclass(frozen=True)
class ConfirmationEmail:
    to_address: str
    guest_name: str
    event_title: str
    event_start: datetime
    status: str
    rsvp_url: str
    event_location: str | None = None
    additional_guests: list[str] = field(default_factory=list)
    dietary_notes: str | None = None
    reply_to: str | None = None
    guest_id: UUID | None = None


@dataclass(frozen=True)
class RSVPNotificationEmail:
    to_address: str
    host_name: str
    guest_name: str
    guest_email: str
    event_title: str
    change_type: str
    status: str
    previous_status: str | None = None
    additional_guests: list[str] = field(default_factory=list)
    dietary_notes: str | None = None
    guest_id: UUID | None = None


class EmailServiceBase(ABC):
    """Outbound email. Implementations raise on transport failure; callers decide what to swallow."""

    @abstractmethod
    async def send_reminder(self, email: ReminderEmail) -> None:
        pass

    @abstractmethod
    async def send_confirmation(self, email: ConfirmationEmail) -> None:
        pass

    @abstractmethod
    async def send_rsvp_notification(self, email: RSVPNotificationEmail) -> None:
        pass
