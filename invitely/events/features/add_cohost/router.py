from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr

from invitely.events.repository.read_models import EventReadModel, SqlEventReadModel
from invitely.events.repository.write_models import EventWriteModel, SqlEventWriteModel
from invitely.events.urls import COHOSTS_URL
from invitely.security import verify_admin_secret

router = APIRouter(dependencies=[Depends(verify_admin_secret)])


class CoHostSubmit(BaseModel):
    email: EmailStr
    name: str | None = None


class CoHostResponse(BaseModel):
    event_id: UUID
    user_id: UUID
    email: str
    name: str | None = None


def get_event_read_model() -> EventReadModel:
    return SqlEventReadModel()


def get_event_write_model() -> EventWriteModel:
    return SqlEventWriteModel()


@router.post(COHOSTS_URL, response_model=CoHostResponse, status_code=201)
async def add_cohost(
    event_id: UUID,
    request: CoHostSubmit,
    read_model: EventReadModel = Depends(get_event_read_model),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> CoHostResponse:
    """Add a co-host who gets notified of RSVP changes like the host."""
    event = await read_model.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")

    host = await write_model.add_cohost(event.id, request.email, request.name)
    return CoHostResponse(event_id=event.id, user_id=host.id, email=host.email, name=host.name)
