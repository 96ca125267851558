"""
Twilio SMS delivery over the REST API.
"""

import logging
from typing import Protocol

import httpx

from invitely.email_service.templates import format_event_date
from invitely.sms_service.base import (
    ConfirmationSMS,
    ReminderSMS,
    SMSDeliveryError,
    SMSServiceBase,
)

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{account_sid}/Messages.json"


class TwilioConfig(Protocol):
    twilio_account_sid: str
    twilio_auth_token: str
    twilio_from_number: str


def reminder_message(sms: ReminderSMS) -> str:
    greeting = f"Hi {sms.guest_name}!" if sms.guest_name else "Hi!"
    return (
        f"{greeting} Reminder: {sms.event_title} is on "
        f"{format_event_date(sms.event_start)}. View or update your RSVP: {sms.rsvp_url}"
    )


def confirmation_message(sms: ConfirmationSMS) -> str:
    greeting = f"Hi {sms.guest_name}!" if sms.guest_name else "Hi!"
    if sms.status == "ATTENDING":
        where = f" at {sms.event_location}" if sms.event_location else ""
        return (
            f"{greeting} You're confirmed for {sms.event_title} on "
            f"{format_event_date(sms.event_start)}{where}. See you there!"
        )
    if sms.status == "NOT_ATTENDING":
        return (
            f"{greeting} Thanks for letting us know you can't make it to "
            f"{sms.event_title}. Maybe next time!"
        )
    if sms.status == "MAYBE":
        return f"{greeting} Thanks for responding to {sms.event_title}. We hope you can make it!"
    return f"{greeting} Thanks for your response to {sms.event_title}."


class TwilioSMSService(SMSServiceBase):
    def __init__(
        self,
        config: TwilioConfig,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self._http_client_class = http_client_class

    async def _send(self, to_number: str, body: str) -> str | None:
        # Twilio only accepts E.164 numbers
        if not to_number.startswith("+"):
            raise SMSDeliveryError(f"Phone number must be in E.164 format: {to_number}")

        account_sid = self._config.twilio_account_sid
        async with self._http_client_class() as client:
            response = await client.post(
                TWILIO_MESSAGES_URL.format(account_sid=account_sid),
                auth=(account_sid, self._config.twilio_auth_token),
                data={
                    "To": to_number,
                    "From": self._config.twilio_from_number,
                    "Body": body,
                },
            )
            response.raise_for_status()

        message_sid = response.json().get("sid")
        logger.info("SMS sent to %s, sid=%s", to_number, message_sid)
        return message_sid

    async def send_reminder(self, sms: ReminderSMS) -> None:
        await self._send(sms.to_number, reminder_message(sms))

    async def send_confirmation(self, sms: ConfirmationSMS) -> None:
        await self._send(sms.to_number, confirmation_message(sms))
