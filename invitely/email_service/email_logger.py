from abc import ABC, abstractmethod
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from invitely.config.database import async_session_manager
from invitely.email_service.orm_models import EmailLog


class EmailLogger(ABC):
    """Audit trail for outbound email."""

    @abstractmethod
    async def log_email_attempt(
        self,
        to_address: str,
        from_address: str,
        subject: str,
        html_body: str,
        text_body: str,
        email_type: str,
        guest_id: UUID | None = None,
    ) -> UUID:
        """
        Log an email sending attempt before sending.

        Returns:
            UUID of the created log entry
        """
        pass

    @abstractmethod
    async def log_email_success(self, log_uuid: UUID, provider_email_id: str | None) -> None:
        pass

    @abstractmethod
    async def log_email_failure(self, log_uuid: UUID, error_message: str) -> None:
        pass


class SQLEmailLogger(EmailLogger):
    """SQL database implementation of EmailLogger."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def log_email_attempt(
        self,
        to_address: str,
        from_address: str,
        subject: str,
        html_body: str,
        text_body: str,
        email_type: str,
        guest_id: UUID | None = None,
    ) -> UUID:
        email_log = EmailLog(
            uuid=uuid4(),
            to_address=to_address,
            from_address=from_address,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            email_type=email_type,
            guest_id=guest_id,
            status="pending",
        )

        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            session.add(email_log)
            await session.flush()
            return email_log.uuid

    async def log_email_success(self, log_uuid: UUID, provider_email_id: str | None) -> None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            email_log = await session.get(EmailLog, log_uuid)
            if email_log:
                email_log.provider_email_id = provider_email_id
                email_log.status = "sent"

    async def log_email_failure(self, log_uuid: UUID, error_message: str) -> None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            email_log = await session.get(EmailLog, log_uuid)
            if email_log:
                email_log.status = "failed"
                email_log.error_message = error_message


class NoOpEmailLogger(EmailLogger):
    """No-op implementation for testing or when logging is disabled."""

    async def log_email_attempt(
        self,
        to_address: str,
        from_address: str,
        subject: str,
        html_body: str,
        text_body: str,
        email_type: str,
        guest_id: UUID | None = None,
    ) -> UUID:
        return uuid4()

    async def log_email_success(self, log_uuid: UUID, provider_email_id: str | None) -> None:
        pass

    async def log_email_failure(self, log_uuid: UUID, error_message: str) -> None:
        pass
