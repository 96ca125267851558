"""Guest write models. Every method is one transaction and returns a DTO."""

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from functools import partial
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from invitely.config.database import async_session_manager
from invitely.guests.dtos import GuestDTO, GuestNotFoundError, GuestStatus, RSVPChangeDTO
from invitely.guests.repository.orm_models import AdditionalGuest, Guest
from invitely.guests.repository.read_models import guest_to_dto


def _additional_guests(names: list[str]) -> list[AdditionalGuest]:
    return [AdditionalGuest(name=name, position=position) for position, name in enumerate(names)]


class RSVPWriteModel(ABC):
    @abstractmethod
    async def invite_guest(
        self,
        event_id: UUID,
        email: str,
        name: str | None = None,
        phone: str | None = None,
        max_guests: int | None = None,
    ) -> GuestDTO:
        """Add a PENDING guest to the event's guest list."""
        raise NotImplementedError

    @abstractmethod
    async def create_guest(self, event_id: UUID, email: str, change: RSVPChangeDTO) -> GuestDTO:
        """Create a guest who answered the public RSVP form without an invitation."""
        raise NotImplementedError

    @abstractmethod
    async def save_rsvp(self, guest_id: UUID, change: RSVPChangeDTO) -> GuestDTO:
        """
        Apply an RSVP to an existing guest.
        The additional-guest set is replaced in the same transaction as the status,
        so a failure leaves the previous set in place.
        """
        raise NotImplementedError


class SqlRSVPWriteModel(RSVPWriteModel):
    """SQL implementation of RSVP write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def invite_guest(
        self,
        event_id: UUID,
        email: str,
        name: str | None = None,
        phone: str | None = None,
        max_guests: int | None = None,
    ) -> GuestDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            guest = Guest(
                uuid=uuid4(),
                event_id=event_id,
                email=email.strip().lower(),
                name=name,
                phone=phone,
                status=GuestStatus.PENDING,
                dietary_notes=None,
                notify_by_email=True,
                notify_by_sms=bool(phone),
                token=str(uuid4()),
                invited_at=datetime.now(UTC),
                responded_at=None,
                reminder_sent_at=None,
                sms_reminder_sent_at=None,
                max_guests=max_guests,
                additional_guests=[],
            )
            session.add(guest)
            await session.flush()
            return guest_to_dto(guest)

    async def create_guest(self, event_id: UUID, email: str, change: RSVPChangeDTO) -> GuestDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            guest = Guest(
                uuid=uuid4(),
                event_id=event_id,
                email=email.strip().lower(),
                name=change.name,
                phone=change.phone,
                status=change.status,
                dietary_notes=change.dietary_notes,
                notify_by_email=True,
                notify_by_sms=bool(change.phone),
                token=str(uuid4()),
                invited_at=None,
                responded_at=change.responded_at,
                reminder_sent_at=None,
                sms_reminder_sent_at=None,
                max_guests=None,
                additional_guests=_additional_guests(change.additional_guest_names or []),
            )
            session.add(guest)
            await session.flush()
            return guest_to_dto(guest)

    async def save_rsvp(self, guest_id: UUID, change: RSVPChangeDTO) -> GuestDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            guest = await session.get(Guest, guest_id)
            if guest is None:
                raise GuestNotFoundError()

            if change.additional_guest_names is not None:
                # delete-orphan removes the previous rows on flush
                guest.additional_guests = _additional_guests(change.additional_guest_names)

            guest.status = change.status
            guest.responded_at = change.responded_at
            if change.name is not None:
                guest.name = change.name
            if change.phone is not None:
                guest.phone = change.phone
                guest.notify_by_sms = bool(change.phone)
            if change.dietary_notes is not None:
                guest.dietary_notes = change.dietary_notes

            await session.flush()
            return guest_to_dto(guest)
