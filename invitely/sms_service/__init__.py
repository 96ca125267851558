from invitely.config.settings import settings
from invitely.sms_service.base import (
    ConfirmationSMS,
    ReminderSMS,
    SMSDeliveryError,
    SMSServiceBase,
)
from invitely.sms_service.twilio_service import TwilioSMSService


def get_sms_service() -> SMSServiceBase | None:
    """Twilio when fully configured, otherwise None (SMS reminders off)."""
    if settings.twilio_account_sid and settings.twilio_auth_token and settings.twilio_from_number:
        return TwilioSMSService(config=settings)
    return None


__all__ = [
    "ConfirmationSMS",
    "ReminderSMS",
    "SMSDeliveryError",
    "SMSServiceBase",
    "get_sms_service",
]
