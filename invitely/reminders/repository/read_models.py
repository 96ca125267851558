import abc
from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from invitely.config.database import async_session_manager
from invitely.events.repository.orm_models import Event
from invitely.events.repository.read_models import event_to_dto
from invitely.guests.repository.orm_models import Guest
from invitely.guests.repository.read_models import guest_to_dto
from invitely.reminders.dtos import ReminderEventDTO


class ReminderReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_events_with_due_reminder_candidates(
        self, now: datetime
    ) -> list[ReminderEventDTO]:
        """
        Upcoming events that have a reminder schedule, each with the guests
        who have not been reminded yet on at least one channel.
        Must read committed state fresh on every call.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def get_guest_with_event(self, event_id: UUID, guest_id: UUID) -> ReminderEventDTO | None:
        """The event with just this guest, or None when the guest is not on that event."""
        raise NotImplementedError


class SqlReminderReadModel(ReminderReadModel):
    """SQL implementation of reminder read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def get_events_with_due_reminder_candidates(
        self, now: datetime
    ) -> list[ReminderEventDTO]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            events_stmt = (
                select(Event)
                .where(Event.start_time > now)
                .where(Event.reminder_schedule.is_not(None))
                .order_by(Event.start_time)
            )
            events = (await session.execute(events_stmt)).scalars().all()
            if not events:
                return []

            email_pending = and_(
                Guest.notify_by_email.is_(True),
                Guest.reminder_sent_at.is_(None),
            )
            sms_pending = and_(
                Guest.notify_by_sms.is_(True),
                Guest.phone.is_not(None),
                Guest.phone != "",
                Guest.sms_reminder_sent_at.is_(None),
            )
            guests_stmt = (
                select(Guest)
                .where(Guest.event_id.in_([event.uuid for event in events]))
                .where(or_(email_pending, sms_pending))
                .order_by(Guest.created_at)
            )
            guests = (await session.execute(guests_stmt)).scalars().all()

            guests_by_event: dict = {}
            for guest in guests:
                guests_by_event.setdefault(guest.event_id, []).append(guest_to_dto(guest))

            return [
                ReminderEventDTO(
                    event=event_to_dto(event),
                    guests=guests_by_event.get(event.uuid, []),
                )
                for event in events
            ]

    async def get_guest_with_event(self, event_id: UUID, guest_id: UUID) -> ReminderEventDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            guest = await session.get(Guest, guest_id)
            if guest is None or guest.event_id != event_id:
                return None
            event = await session.get(Event, event_id)
            return ReminderEventDTO(event=event_to_dto(event), guests=[guest_to_dto(guest)])
