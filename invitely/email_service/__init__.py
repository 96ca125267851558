from invitely.config.settings import settings
from invitely.email_service.base import (
    ConfirmationEmail,
    EmailServiceBase,
    ReminderEmail,
    RSVPNotificationEmail,
)
from invitely.email_service.email_logger import SQLEmailLogger
from invitely.email_service.resend_service import ResendEmailService
from invitely.email_service.smtp_service import SMTPEmailService
from invitely.email_service.templates import EmailTemplates


def get_email_service() -> EmailServiceBase:
    if settings.resend_api_key:
        email_logger = SQLEmailLogger()
        return ResendEmailService(config=settings, email_logger=email_logger)
    return SMTPEmailService()


__all__ = [
    "ConfirmationEmail",
    "EmailServiceBase",
    "EmailTemplates",
    "ReminderEmail",
    "RSVPNotificationEmail",
    "get_email_service",
]
