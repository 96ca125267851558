import logging
from typing import Protocol
from uuid import UUID

import httpx

from invitely.email_service.base import (
    ConfirmationEmail,
    EmailServiceBase,
    ReminderEmail,
    RSVPNotificationEmail,
)
from invitely.email_service.email_logger import EmailLogger, NoOpEmailLogger
from invitely.email_service.templates import EmailTemplates

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


class ResendEmailConfig(Protocol):
    resend_api_key: str
    emails_from: str


class ResendEmailService(EmailServiceBase):
    def __init__(
        self,
        config: ResendEmailConfig,
        email_logger: EmailLogger | None = None,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self.email_logger = email_logger or NoOpEmailLogger()
        self._http_client_class = http_client_class

    async def _send(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
        email_type: str,
        guest_id: UUID | None = None,
        reply_to: str | None = None,
    ) -> str | None:
        """Send email via Resend and log via injected logger."""
        log_uuid = await self.email_logger.log_email_attempt(
            to_address=to_address,
            from_address=self._config.emails_from,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            email_type=email_type,
            guest_id=guest_id,
        )

        payload = {
            "from": self._config.emails_from,
            "to": [to_address],
            "subject": subject,
            "html": html_body,
            "text": text_body,
        }
        if reply_to:
            payload["reply_to"] = reply_to

        try:
            async with self._http_client_class() as client:
                response = await client.post(
                    RESEND_EMAILS_URL,
                    headers={
                        "Authorization": f"Bearer {self._config.resend_api_key}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Resend rejected %s email to %s: %s", email_type, to_address, e)
            await self.email_logger.log_email_failure(log_uuid=log_uuid, error_message=str(e))
            raise

        provider_email_id = response.json().get("id")
        await self.email_logger.log_email_success(
            log_uuid=log_uuid, provider_email_id=provider_email_id
        )
        return provider_email_id

    async def send_reminder(self, email: ReminderEmail) -> None:
        subject, html_body, text_body = EmailTemplates.render_reminder(email)
        await self._send(
            to_address=email.to_address,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            email_type="reminder",
            guest_id=email.guest_id,
            reply_to=email.reply_to,
        )

    async def send_confirmation(self, email: ConfirmationEmail) -> None:
        subject, html_body, text_body = EmailTemplates.render_confirmation(email)
        await self._send(
            to_address=email.to_address,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            email_type="confirmation",
            guest_id=email.guest_id,
            reply_to=email.reply_to,
        )

    async def send_rsvp_notification(self, email: RSVPNotificationEmail) -> None:
        subject, html_body, text_body = EmailTemplates.render_rsvp_notification(email)
        await self._send(
            to_address=email.to_address,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            email_type="rsvp_notification",
            guest_id=email.guest_id,
        )
