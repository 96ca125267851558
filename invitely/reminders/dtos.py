from dataclasses import dataclass, field

from invitely.events.dtos import EventDTO
from invitely.guests.dtos import GuestDTO


@dataclass(frozen=True)
class ReminderEventDTO:
    """An upcoming event with the guests that still have a reminder channel open."""

    event: EventDTO
    guests: list[GuestDTO] = field(default_factory=list)


@dataclass(frozen=True)
class DispatchSummary:
    emails_sent: int = 0
    sms_sent: int = 0
    errors: int = 0


class ReminderError(Exception):
    """A manual reminder that cannot be sent. Routers map status_code to the HTTP response."""

    status_code = 400


class ReminderGuestNotFoundError(ReminderError):
    status_code = 404

    def __init__(self) -> None:
        super().__init__("Guest not found")


class GuestAlreadyRespondedError(ReminderError):
    def __init__(self) -> None:
        super().__init__("Guest has already responded")


class ReminderDeliveryError(ReminderError):
    status_code = 500

    def __init__(self) -> None:
        super().__init__("Failed to send reminder email")
