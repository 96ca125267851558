import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invitely.config.database import async_session_manager
from invitely.guests.dtos import AdditionalGuestDTO, GuestDTO
from invitely.guests.repository.orm_models import Guest
from invitely.models.base import as_utc


def guest_to_dto(guest: Guest) -> GuestDTO:
    return GuestDTO(
        id=guest.uuid,
        event_id=guest.event_id,
        email=guest.email,
        token=guest.token,
        status=guest.status,
        name=guest.name,
        phone=guest.phone,
        dietary_notes=guest.dietary_notes,
        notify_by_email=guest.notify_by_email,
        notify_by_sms=guest.notify_by_sms,
        max_guests=guest.max_guests,
        additional_guests=[
            AdditionalGuestDTO(id=additional.uuid, name=additional.name)
            for additional in guest.additional_guests
        ],
        responded_at=as_utc(guest.responded_at),
        reminder_sent_at=as_utc(guest.reminder_sent_at),
        sms_reminder_sent_at=as_utc(guest.sms_reminder_sent_at),
    )


class RSVPReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_guest_by_token(self, token: str) -> GuestDTO | None:
        """
        Get a guest by RSVP token.
        The returned DTO carries the current additional-guest set in submission order.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def get_guest_by_email(self, event_id: UUID, email: str) -> GuestDTO | None:
        raise NotImplementedError


class SqlRSVPReadModel(RSVPReadModel):
    """SQL implementation of RSVP read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def get_guest_by_token(self, token: str) -> GuestDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(select(Guest).where(Guest.token == token))
            guest = result.scalar_one_or_none()
            if guest is None:
                return None
            return guest_to_dto(guest)

    async def get_guest_by_email(self, event_id: UUID, email: str) -> GuestDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            stmt = (
                select(Guest)
                .where(Guest.event_id == event_id)
                .where(Guest.email == email.strip().lower())
            )
            result = await session.execute(stmt)
            guest = result.scalar_one_or_none()
            if guest is None:
                return None
            return guest_to_dto(guest)
