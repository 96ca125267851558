import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invitely.config.database import async_session_manager
from invitely.events.dtos import EventDTO, HostDTO
from invitely.events.reminder_schedule import parse_schedule
from invitely.events.repository.orm_models import Event, EventCoHost
from invitely.models.base import as_utc
from invitely.models.user import User


def event_to_dto(event: Event) -> EventDTO:
    return EventDTO(
        id=event.uuid,
        slug=event.slug,
        title=event.title,
        start_time=as_utc(event.start_time),
        description=event.description,
        location=event.location,
        rsvp_deadline=as_utc(event.rsvp_deadline),
        reminder_schedule=parse_schedule(event.reminder_schedule),
        max_guests_per_invitee=event.max_guests_per_invitee,
        host_id=event.host_id,
        reply_to=event.reply_to,
    )


class EventReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_event(self, event_id: UUID) -> EventDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_event_hosts_for_notification(self, event_id: UUID) -> list[HostDTO]:
        """
        Host and co-hosts of the event who opted in to RSVP change notifications.
        The primary host comes first.
        """
        raise NotImplementedError


class SqlEventReadModel(EventReadModel):
    """SQL implementation of event read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def get_event(self, event_id: UUID) -> EventDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            event = await session.get(Event, event_id)
            if event is None:
                return None
            return event_to_dto(event)

    async def get_event_hosts_for_notification(self, event_id: UUID) -> list[HostDTO]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            event = await session.get(Event, event_id)
            if event is None:
                return []

            hosts: list[HostDTO] = []
            host = await session.get(User, event.host_id)
            if host is not None and host.notify_on_rsvp_changes:
                hosts.append(HostDTO(id=host.uuid, email=host.email, name=host.name))

            cohost_stmt = (
                select(User)
                .join(EventCoHost, EventCoHost.user_id == User.uuid)
                .where(EventCoHost.event_id == event_id)
                .where(User.notify_on_rsvp_changes.is_(True))
                .order_by(EventCoHost.created_at)
            )
            result = await session.execute(cohost_stmt)
            for cohost in result.scalars().all():
                if cohost.uuid == event.host_id:
                    continue
                hosts.append(HostDTO(id=cohost.uuid, email=cohost.email, name=cohost.name))
            return hosts
