import logging
from datetime import UTC, datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from invitely.config.settings import settings
from invitely.email_service import get_email_service
from invitely.events.dtos import EventNotFoundError
from invitely.events.repository.read_models import EventReadModel, SqlEventReadModel
from invitely.guests.admission import RSVPAdmission
from invitely.guests.capacity import effective_limit
from invitely.guests.dtos import GuestNotFoundError, GuestStatus, RSVPDeadlinePassedError, RSVPError
from invitely.guests.repository.read_models import RSVPReadModel, SqlRSVPReadModel
from invitely.guests.repository.write_models import SqlRSVPWriteModel
from invitely.guests.schemas import GuestResponse, RSVPResponse
from invitely.guests.urls import QUICK_RSVP_URL, RSVP_TOKEN_URL, build_event_page_link
from invitely.sms_service import get_sms_service

logger = logging.getLogger(__name__)

router = APIRouter()

QUICK_SUCCESS_MESSAGES = {
    GuestStatus.ATTENDING: "rsvp_attending",
    GuestStatus.NOT_ATTENDING: "rsvp_not_attending",
    GuestStatus.MAYBE: "rsvp_maybe",
}


class RSVPUpdateSubmit(BaseModel):
    """Fields left out are not changed."""

    status: GuestStatus | None = None
    name: str | None = None
    phone: str | None = None
    dietary_notes: str | None = None
    additional_guests: list[str] | None = None


class EventSummaryResponse(BaseModel):
    id: UUID
    slug: str
    title: str
    start_time: datetime
    location: str | None = None
    rsvp_deadline: datetime | None = None
    deadline_passed: bool
    # Party size including the guest; None means unlimited
    max_guests: int | None = None


class RSVPInfoResponse(BaseModel):
    guest: GuestResponse
    event: EventSummaryResponse


def get_rsvp_read_model() -> RSVPReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRSVPReadModel()


def get_event_read_model() -> EventReadModel:
    """Dependency to get event read model instance."""
    return SqlEventReadModel()


def get_rsvp_admission() -> RSVPAdmission:
    """Dependency to get the RSVP admission workflow."""
    return RSVPAdmission(
        rsvp_read_model=SqlRSVPReadModel(),
        rsvp_write_model=SqlRSVPWriteModel(),
        event_read_model=SqlEventReadModel(),
        email_service=get_email_service(),
        sms_service=get_sms_service(),
    )


@router.get(RSVP_TOKEN_URL, response_model=RSVPInfoResponse)
async def get_rsvp(
    token: str,
    read_model: RSVPReadModel = Depends(get_rsvp_read_model),
    event_read_model: EventReadModel = Depends(get_event_read_model),
) -> RSVPInfoResponse:
    """Prefill data for the guest's RSVP page."""
    guest = await read_model.get_guest_by_token(token)
    if guest is None:
        raise HTTPException(status_code=404, detail="Invalid RSVP token")

    event = await event_read_model.get_event(guest.event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")

    return RSVPInfoResponse(
        guest=GuestResponse.from_dto(guest),
        event=EventSummaryResponse(
            id=event.id,
            slug=event.slug,
            title=event.title,
            start_time=event.start_time,
            location=event.location,
            rsvp_deadline=event.rsvp_deadline,
            deadline_passed=event.deadline_passed(datetime.now(UTC)),
            max_guests=effective_limit(event.max_guests_per_invitee, guest.max_guests),
        ),
    )


@router.patch(RSVP_TOKEN_URL, response_model=RSVPResponse)
async def update_rsvp(
    token: str,
    rsvp_data: RSVPUpdateSubmit,
    admission: RSVPAdmission = Depends(get_rsvp_admission),
) -> RSVPResponse:
    try:
        result = await admission.update(
            token=token,
            status=rsvp_data.status,
            additional_guests=rsvp_data.additional_guests,
            name=rsvp_data.name,
            phone=rsvp_data.phone,
            dietary_notes=rsvp_data.dietary_notes,
        )
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RSVPError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return RSVPResponse.from_result(result)


@router.get(QUICK_RSVP_URL)
async def quick_rsvp(
    token: str,
    status: str | None = None,
    admission: RSVPAdmission = Depends(get_rsvp_admission),
) -> RedirectResponse:
    """
    One-click RSVP from an email link.
    Always answers with a redirect to the frontend; the outcome is in the query string.
    """
    try:
        quick_status = GuestStatus(status) if status else None
    except ValueError:
        quick_status = None
    if quick_status not in QUICK_SUCCESS_MESSAGES:
        return RedirectResponse(f"{settings.frontend_url}/rsvp/{token}?error=invalid_status")

    try:
        result = await admission.quick_update(token, quick_status)
    except (GuestNotFoundError, EventNotFoundError):
        return RedirectResponse(f"{settings.frontend_url}?error=invalid_token")
    except RSVPDeadlinePassedError:
        return RedirectResponse(f"{settings.frontend_url}/rsvp/{token}?error=deadline_passed")
    except RSVPError as e:
        logger.warning("Quick RSVP rejected for token %s: %s", token, e)
        return RedirectResponse(f"{settings.frontend_url}/rsvp/{token}?error=rsvp_rejected")

    message = QUICK_SUCCESS_MESSAGES[quick_status]
    return RedirectResponse(
        f"{build_event_page_link(result.event.slug)}?token={token}&success={message}"
    )
