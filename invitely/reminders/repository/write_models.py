from abc import ABC, abstractmethod
from datetime import datetime
from functools import partial
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from invitely.config.database import async_session_manager
from invitely.guests.repository.orm_models import Guest


class ReminderWriteModel(ABC):
    @abstractmethod
    async def mark_reminder_sent(self, guest_id: UUID, sent_at: datetime) -> bool:
        """
        Record the email reminder as sent. Commits before returning.
        Returns False when the marker was already set by another cycle.
        """
        raise NotImplementedError

    @abstractmethod
    async def mark_sms_reminder_sent(self, guest_id: UUID, sent_at: datetime) -> bool:
        raise NotImplementedError


class SqlReminderWriteModel(ReminderWriteModel):
    """SQL implementation of reminder write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def mark_reminder_sent(self, guest_id: UUID, sent_at: datetime) -> bool:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                update(Guest)
                .where(Guest.uuid == guest_id)
                .where(Guest.reminder_sent_at.is_(None))
                .values(reminder_sent_at=sent_at)
            )
            return result.rowcount == 1

    async def mark_sms_reminder_sent(self, guest_id: UUID, sent_at: datetime) -> bool:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                update(Guest)
                .where(Guest.uuid == guest_id)
                .where(Guest.sms_reminder_sent_at.is_(None))
                .values(sms_reminder_sent_at=sent_at)
            )
            return result.rowcount == 1
