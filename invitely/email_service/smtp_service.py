import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from invitely.config.settings import settings
from invitely.email_service.base import (
    ConfirmationEmail,
    EmailServiceBase,
    ReminderEmail,
    RSVPNotificationEmail,
)
from invitely.email_service.templates import EmailTemplates


class SMTPEmailService(EmailServiceBase):
    def __init__(self):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_user
        self.password = settings.smtp_password
        self.from_address = settings.emails_from

    def _create_message(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
        reply_to: str | None = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_address
        if reply_to:
            msg["Reply-To"] = reply_to

        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        return msg

    def _send(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.host, self.port) as server:
            if self.username and self.password:
                server.starttls()
                server.login(self.username, self.password)
            server.send_message(msg)

    async def _deliver(self, to_address: str, rendered: tuple[str, str, str], reply_to=None) -> None:
        subject, html_body, text_body = rendered
        msg = self._create_message(
            to_address=to_address,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            reply_to=reply_to,
        )
        # smtplib blocks; keep it off the event loop
        await asyncio.to_thread(self._send, msg)

    async def send_reminder(self, email: ReminderEmail) -> None:
        await self._deliver(email.to_address, EmailTemplates.render_reminder(email), email.reply_to)

    async def send_confirmation(self, email: ConfirmationEmail) -> None:
        await self._deliver(
            email.to_address, EmailTemplates.render_confirmation(email), email.reply_to
        )

    async def send_rsvp_notification(self, email: RSVPNotificationEmail) -> None:
        await self._deliver(email.to_address, EmailTemplates.render_rsvp_notification(email))
