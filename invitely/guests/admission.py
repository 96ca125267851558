"""
RSVP admission: every status change a guest makes goes through here.

Any status may follow any other. What is constrained is the data that comes
with it: only an ATTENDING guest keeps additional guests, and the party must
fit the capacity limit. Rejections raise an RSVPError subclass before anything
is written. Email and SMS confirmations go out after the write has
committed and never fail the request.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from invitely.email_service import (
    ConfirmationEmail,
    EmailServiceBase,
    RSVPNotificationEmail,
)
from invitely.events.dtos import EventDTO, EventNotFoundError
from invitely.events.repository.read_models import EventReadModel
from invitely.guests.capacity import validate_guest_limit
from invitely.guests.dtos import (
    ChangeType,
    GuestDTO,
    GuestLimitExceededError,
    GuestNotFoundError,
    GuestStatus,
    RSVPChangeDTO,
    RSVPDeadlinePassedError,
    RSVPResultDTO,
)
from invitely.guests.repository.read_models import RSVPReadModel
from invitely.guests.repository.write_models import RSVPWriteModel
from invitely.guests.urls import build_rsvp_link
from invitely.sms_service import ConfirmationSMS, SMSServiceBase

logger = logging.getLogger(__name__)


def clean_names(names: list[str] | None) -> list[str] | None:
    """Strip names and drop blank ones. None stays None (list not supplied)."""
    if names is None:
        return None
    return [name.strip() for name in names if name and name.strip()]


def _names(guest: GuestDTO) -> list[str]:
    return [additional.name for additional in guest.additional_guests]


class RSVPAdmission:
    def __init__(
        self,
        rsvp_read_model: RSVPReadModel,
        rsvp_write_model: RSVPWriteModel,
        event_read_model: EventReadModel,
        email_service: EmailServiceBase | None = None,
        sms_service: SMSServiceBase | None = None,
    ) -> None:
        self._rsvp_read_model = rsvp_read_model
        self._rsvp_write_model = rsvp_write_model
        self._event_read_model = event_read_model
        self._email_service = email_service
        self._sms_service = sms_service

    async def submit(
        self,
        event_id: UUID,
        email: str,
        status: GuestStatus,
        additional_guests: list[str] | None = None,
        name: str | None = None,
        phone: str | None = None,
        dietary_notes: str | None = None,
    ) -> RSVPResultDTO:
        """Public RSVP form: creates the guest on first response, updates it afterwards."""
        event = await self._get_event(event_id)
        now = datetime.now(UTC)
        self._check_deadline(event, now)

        existing = await self._rsvp_read_model.get_guest_by_email(event_id, email)
        change = self._build_change(
            event=event,
            guest=existing,
            status=status,
            additional_guests=clean_names(additional_guests),
            now=now,
            name=name,
            phone=phone,
            dietary_notes=dietary_notes,
        )

        if existing is None:
            guest = await self._rsvp_write_model.create_guest(event_id, email, change)
            result = RSVPResultDTO(guest=guest, event=event, change_type=ChangeType.NEW)
            await self._notify(result)
            return result

        guest = await self._rsvp_write_model.save_rsvp(existing.id, change)
        return await self._finish_update(event, existing, guest, change)

    async def update(
        self,
        token: str,
        status: GuestStatus | None = None,
        additional_guests: list[str] | None = None,
        name: str | None = None,
        phone: str | None = None,
        dietary_notes: str | None = None,
    ) -> RSVPResultDTO:
        """Edit through the guest's RSVP link. Arguments left as None are not changed."""
        existing = await self._rsvp_read_model.get_guest_by_token(token)
        if existing is None:
            raise GuestNotFoundError()

        event = await self._get_event(existing.event_id)
        now = datetime.now(UTC)
        self._check_deadline(event, now)

        change = self._build_change(
            event=event,
            guest=existing,
            status=status or existing.status,
            additional_guests=clean_names(additional_guests),
            now=now,
            name=name,
            phone=phone,
            dietary_notes=dietary_notes,
        )
        guest = await self._rsvp_write_model.save_rsvp(existing.id, change)
        return await self._finish_update(event, existing, guest, change)

    async def quick_update(self, token: str, status: GuestStatus) -> RSVPResultDTO:
        """One-click answer from an email link."""
        return await self.update(token, status=status)

    async def _get_event(self, event_id: UUID) -> EventDTO:
        event = await self._event_read_model.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    @staticmethod
    def _check_deadline(event: EventDTO, now: datetime) -> None:
        if event.deadline_passed(now):
            raise RSVPDeadlinePassedError()

    @staticmethod
    def _build_change(
        event: EventDTO,
        guest: GuestDTO | None,
        status: GuestStatus,
        additional_guests: list[str] | None,
        now: datetime,
        name: str | None = None,
        phone: str | None = None,
        dietary_notes: str | None = None,
    ) -> RSVPChangeDTO:
        if status != GuestStatus.ATTENDING:
            # Only attending guests bring anyone; a supplied list is ignored
            additional_guests = []
        else:
            if additional_guests is not None:
                count = len(additional_guests)
            else:
                count = len(guest.additional_guests) if guest else 0
            if count > 0:
                check = validate_guest_limit(
                    event.max_guests_per_invitee,
                    count,
                    guest.max_guests if guest else None,
                )
                if not check.valid:
                    raise GuestLimitExceededError(check.error)

        return RSVPChangeDTO(
            status=status,
            responded_at=now,
            additional_guest_names=additional_guests,
            name=name,
            phone=phone,
            dietary_notes=dietary_notes,
        )

    async def _finish_update(
        self, event: EventDTO, before: GuestDTO, after: GuestDTO, change: RSVPChangeDTO
    ) -> RSVPResultDTO:
        status_changed = before.status != after.status
        changed = (
            status_changed
            or _names(before) != _names(after)
            or (change.name is not None and change.name != before.name)
            or (change.phone is not None and change.phone != before.phone)
            or (change.dietary_notes is not None and change.dietary_notes != before.dietary_notes)
        )
        result = RSVPResultDTO(
            guest=after,
            event=event,
            change_type=ChangeType.STATUS_CHANGED if status_changed else ChangeType.UPDATED,
            previous_status=before.status if status_changed else None,
        )
        await self._notify(result, notify_hosts=changed)
        return result

    async def _notify(self, result: RSVPResultDTO, notify_hosts: bool = True) -> None:
        if self._email_service is not None:
            await self._send_emails(result, notify_hosts)

        guest, event = result.guest, result.event
        if self._sms_service is None or not (guest.notify_by_sms and guest.phone):
            return
        try:
            await self._sms_service.send_confirmation(
                ConfirmationSMS(
                    to_number=guest.phone,
                    guest_name=guest.display_name,
                    event_title=event.title,
                    event_start=event.start_time,
                    event_location=event.location,
                    status=guest.status.value,
                )
            )
        except Exception:
            logger.exception("Failed to send RSVP confirmation SMS to guest %s", guest.id)

    async def _send_emails(self, result: RSVPResultDTO, notify_hosts: bool) -> None:
        guest, event = result.guest, result.event
        if guest.notify_by_email:
            try:
                await self._email_service.send_confirmation(
                    ConfirmationEmail(
                        to_address=guest.email,
                        guest_name=guest.display_name,
                        event_title=event.title,
                        event_start=event.start_time,
                        event_location=event.location,
                        status=guest.status.value,
                        rsvp_url=build_rsvp_link(guest.token),
                        additional_guests=_names(guest),
                        dietary_notes=guest.dietary_notes,
                        reply_to=event.reply_to,
                        guest_id=guest.id,
                    )
                )
            except Exception:
                logger.exception("Failed to send RSVP confirmation to %s", guest.email)

        if not notify_hosts:
            return

        try:
            hosts = await self._event_read_model.get_event_hosts_for_notification(event.id)
        except Exception:
            logger.exception("Failed to load hosts of event %s for RSVP notification", event.id)
            return

        for host in hosts:
            try:
                await self._email_service.send_rsvp_notification(
                    RSVPNotificationEmail(
                        to_address=host.email,
                        host_name=host.name or host.email,
                        guest_name=guest.display_name,
                        guest_email=guest.email,
                        event_title=event.title,
                        change_type=result.change_type.value,
                        status=guest.status.value,
                        previous_status=(
                            result.previous_status.value if result.previous_status else None
                        ),
                        additional_guests=_names(guest),
                        dietary_notes=guest.dietary_notes,
                        guest_id=guest.id,
                    )
                )
            except Exception:
                logger.exception("Failed to send RSVP notification to host %s", host.email)
