from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


class SMSDeliveryError(Exception):
    """Raised when an SMS cannot be handed to the provider."""


@dataclass(frozen=True)
class ReminderSMS:
    to_number: str
    event_title: str
    event_start: datetime
    rsvp_url: str
    guest_name: str | None = None


@dataclass(frozen=True)
class ConfirmationSMS:
    """Sent after a guest answers. status is a GuestStatus value."""

    to_number: str
    event_title: str
    event_start: datetime
    status: str
    guest_name: str | None = None
    event_location: str | None = None


class SMSServiceBase(ABC):
    @abstractmethod
    async def send_reminder(self, sms: ReminderSMS) -> None:
        pass

    @abstractmethod
    async def send_confirmation(self, sms: ConfirmationSMS) -> None:
        pass
