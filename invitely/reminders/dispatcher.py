"""
One reminder cycle, run by an external periodic trigger.

Each run loads fresh candidates, so guests marked by an earlier or concurrent
run are skipped by the load itself. A guest is sent at most one reminder per
channel: the marker is written right after a successful send, and a failed
send leaves it unset so the next run retries.

Failures loading candidates or writing a marker propagate. A failure sending
to one guest is logged, counted and skipped.

A host can also remind a single guest on demand; there a failed send is
raised to the caller instead.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from invitely.email_service import EmailServiceBase, ReminderEmail
from invitely.events.dtos import EventDTO
from invitely.events.due_check import first_due_rule
from invitely.events.reminder_schedule import format_rule
from invitely.guests.dtos import GuestDTO, GuestStatus
from invitely.guests.urls import build_quick_rsvp_link, build_rsvp_link
from invitely.reminders.dtos import (
    DispatchSummary,
    GuestAlreadyRespondedError,
    ReminderDeliveryError,
    ReminderGuestNotFoundError,
)
from invitely.reminders.repository.read_models import ReminderReadModel
from invitely.reminders.repository.write_models import ReminderWriteModel
from invitely.sms_service import ReminderSMS, SMSServiceBase

logger = logging.getLogger(__name__)


def _dedupe(guests: list[GuestDTO]) -> list[GuestDTO]:
    seen = set()
    unique = []
    for guest in guests:
        if guest.id in seen:
            continue
        seen.add(guest.id)
        unique.append(guest)
    return unique


class ReminderDispatcher:
    def __init__(
        self,
        read_model: ReminderReadModel,
        write_model: ReminderWriteModel,
        email_service: EmailServiceBase,
        sms_service: SMSServiceBase | None = None,
    ) -> None:
        self._read_model = read_model
        self._write_model = write_model
        self._email_service = email_service
        self._sms_service = sms_service

    async def run_cycle(self, now: datetime | None = None) -> DispatchSummary:
        now = now or datetime.now(UTC)
        emails_sent = sms_sent = errors = 0

        candidates = await self._read_model.get_events_with_due_reminder_candidates(now)
        for candidate in candidates:
            event = candidate.event
            rule = first_due_rule(event.reminder_schedule, event.start_time, now)
            if rule is None:
                continue

            guests = _dedupe(candidate.guests)
            logger.info(
                "Reminder %s due for event %s, %d candidate guest(s)",
                format_rule(rule),
                event.id,
                len(guests),
            )
            for guest in guests:
                if guest.email_reminder_pending:
                    if await self._send_email(event, guest, now):
                        emails_sent += 1
                    else:
                        errors += 1
                if self._sms_service is not None and guest.sms_reminder_pending:
                    if await self._send_sms(event, guest, now):
                        sms_sent += 1
                    else:
                        errors += 1

        summary = DispatchSummary(emails_sent=emails_sent, sms_sent=sms_sent, errors=errors)
        logger.info(
            "Reminder cycle done: %d email(s), %d sms, %d error(s)",
            summary.emails_sent,
            summary.sms_sent,
            summary.errors,
        )
        return summary

    async def remind_guest(
        self, event_id: UUID, guest_id: UUID, now: datetime | None = None
    ) -> bool:
        """
        Remind one guest right away, outside the event's schedule.

        Only guests who have not answered can be reminded. The email marker
        is written even when the guest opted out of email, so the scheduled
        cycle does not remind them again. Returns whether an email went out.
        """
        now = now or datetime.now(UTC)
        candidate = await self._read_model.get_guest_with_event(event_id, guest_id)
        if candidate is None:
            raise ReminderGuestNotFoundError()

        guest = candidate.guests[0]
        if guest.status != GuestStatus.PENDING:
            raise GuestAlreadyRespondedError()

        if not guest.notify_by_email:
            await self._write_model.mark_reminder_sent(guest.id, now)
            return False

        if not await self._send_email(candidate.event, guest, now):
            raise ReminderDeliveryError()
        logger.info("Manual reminder sent to guest %s of event %s", guest.id, event_id)
        return True

    async def _send_email(self, event: EventDTO, guest: GuestDTO, now: datetime) -> bool:
        try:
            await self._email_service.send_reminder(
                ReminderEmail(
                    to_address=guest.email,
                    guest_name=guest.display_name,
                    event_title=event.title,
                    event_start=event.start_time,
                    event_location=event.location,
                    rsvp_url=build_rsvp_link(guest.token),
                    attending_url=build_quick_rsvp_link(guest.token, GuestStatus.ATTENDING),
                    not_attending_url=build_quick_rsvp_link(guest.token, GuestStatus.NOT_ATTENDING),
                    reply_to=event.reply_to,
                    guest_id=guest.id,
                )
            )
        except Exception:
            logger.exception("Failed to send reminder email to guest %s", guest.id)
            return False

        await self._write_model.mark_reminder_sent(guest.id, now)
        return True

    async def _send_sms(self, event: EventDTO, guest: GuestDTO, now: datetime) -> bool:
        try:
            await self._sms_service.send_reminder(
                ReminderSMS(
                    to_number=guest.phone,
                    guest_name=guest.name,
                    event_title=event.title,
                    event_start=event.start_time,
                    rsvp_url=build_rsvp_link(guest.token),
                )
            )
        except Exception:
            logger.exception("Failed to send reminder SMS to guest %s", guest.id)
            return False

        await self._write_model.mark_sms_reminder_sent(guest.id, now)
        return True
