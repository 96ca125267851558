from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr

from invitely.email_service import get_email_service
from invitely.events.dtos import EventNotFoundError
from invitely.events.repository.read_models import SqlEventReadModel
from invitely.guests.admission import RSVPAdmission
from invitely.guests.dtos import GuestStatus, RSVPError
from invitely.guests.repository.read_models import SqlRSVPReadModel
from invitely.guests.repository.write_models import SqlRSVPWriteModel
from invitely.guests.schemas import RSVPResponse
from invitely.guests.urls import RSVP_URL
from invitely.sms_service import get_sms_service

router = APIRouter()


class RSVPSubmit(BaseModel):
    event_id: UUID
    email: EmailStr
    status: GuestStatus
    name: str | None = None
    phone: str | None = None
    dietary_notes: str | None = None
    additional_guests: list[str] = []


def get_rsvp_admission() -> RSVPAdmission:
    """Dependency to get the RSVP admission workflow."""
    return RSVPAdmission(
        rsvp_read_model=SqlRSVPReadModel(),
        rsvp_write_model=SqlRSVPWriteModel(),
        event_read_model=SqlEventReadModel(),
        email_service=get_email_service(),
        sms_service=get_sms_service(),
    )


@router.post(RSVP_URL, response_model=RSVPResponse)
async def submit_rsvp(
    rsvp_data: RSVPSubmit,
    admission: RSVPAdmission = Depends(get_rsvp_admission),
) -> RSVPResponse:
    """
    Answer the public RSVP form of an event.
    The first answer for an email creates the guest; later answers update it.
    """
    try:
        result = await admission.submit(
            event_id=rsvp_data.event_id,
            email=rsvp_data.email,
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
