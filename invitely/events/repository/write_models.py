"""Event write models. Return DTOs, never ORM models."""

import re
from abc import ABC, abstractmethod
from datetime import datetime
from functools import partial
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invitely.config.database import async_session_manager
from invitely.events.dtos import EventDTO, HostDTO, ReminderRule
from invitely.events.reminder_schedule import serialize_schedule
from invitely.events.repository.orm_models import Event, EventCoHost
from invitely.events.repository.read_models import event_to_dto
from invitely.models.user import User


def slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-") or "event"
    return f"{slug}-{uuid4().hex[:6]}"


class EventWriteModel(ABC):
    @abstractmethod
    async def create_event(
        self,
        title: str,
        start_time: datetime,
        host_email: str,
        host_name: str | None = None,
        description: str | None = None,
        location: str | None = None,
        rsvp_deadline: datetime | None = None,
        max_guests_per_invitee: int | None = None,
        reminder_schedule: list[ReminderRule] | None = None,
    ) -> EventDTO:
        """Create an event, creating the host user on first use."""
        raise NotImplementedError

    @abstractmethod
    async def add_cohost(self, event_id: UUID, email: str, name: str | None = None) -> HostDTO:
        """Add a co-host, creating the user on first use. Adding twice is a no-op."""
        raise NotImplementedError

    @abstractmethod
    async def update_reminder_schedule(
        self, event_id: UUID, rules: list[ReminderRule]
    ) -> EventDTO | None:
        """Replace the event's reminder schedule. Returns None for an unknown event.

        Callers validate the rules first; this only persists them.
        """
        raise NotImplementedError


class SqlEventWriteModel(EventWriteModel):
    """SQL implementation of event write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create_event(
        self,
        title: str,
        start_time: datetime,
        host_email: str,
        host_name: str | None = None,
        description: str | None = None,
        location: str | None = None,
        rsvp_deadline: datetime | None = None,
        max_guests_per_invitee: int | None = None,
        reminder_schedule: list[ReminderRule] | None = None,
    ) -> EventDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            host = await self._get_or_create_user(session, host_email, host_name)
            event = Event(
                slug=slugify(title),
                title=title,
                description=description,
                location=location,
                start_time=start_time,
                rsvp_deadline=rsvp_deadline,
                reminder_schedule=serialize_schedule(reminder_schedule or []),
                max_guests_per_invitee=max_guests_per_invitee,
                host_id=host.uuid,
                reply_to=None,
            )
            session.add(event)
            await session.flush()
            return event_to_dto(event)

    async def add_cohost(self, event_id: UUID, email: str, name: str | None = None) -> HostDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            user = await self._get_or_create_user(session, email, name)
            existing = await session.execute(
                select(EventCoHost).where(
                    EventCoHost.event_id == event_id, EventCoHost.user_id == user.uuid
                )
            )
            if existing.scalar_one_or_none() is None:
                session.add(EventCoHost(event_id=event_id, user_id=user.uuid))
                await session.flush()
            return HostDTO(id=user.uuid, email=user.email, name=user.name)

    async def update_reminder_schedule(
        self, event_id: UUID, rules: list[ReminderRule]
    ) -> EventDTO | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await session.get(Event, event_id)
            if event is None:
                return None
            event.reminder_schedule = serialize_schedule(rules)
            await session.flush()
            return event_to_dto(event)

    async def _get_or_create_user(self, session, email: str, name: str | None) -> User:
        """Get existing user by email or create a new one."""
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user is None:
            user = User(uuid=uuid4(), email=email, name=name, is_active=True)
            session.add(user)
            await session.flush()

        return user
