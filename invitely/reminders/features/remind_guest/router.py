from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from invitely.email_service import get_email_service
from invitely.reminders.dispatcher import ReminderDispatcher
from invitely.reminders.dtos import ReminderError
from invitely.reminders.repository.read_models import SqlReminderReadModel
from invitely.reminders.repository.write_models import SqlReminderWriteModel
from invitely.reminders.urls import REMIND_GUEST_URL
from invitely.security import verify_admin_secret

router = APIRouter(dependencies=[Depends(verify_admin_secret)])


class RemindGuestResponse(BaseModel):
    success: bool
    email_sent: bool


def get_reminder_dispatcher() -> ReminderDispatcher:
    """Dependency to get the reminder dispatcher."""
    return ReminderDispatcher(
        read_model=SqlReminderReadModel(),
        write_model=SqlReminderWriteModel(),
        email_service=get_email_service(),
    )


@router.post(REMIND_GUEST_URL, response_model=RemindGuestResponse)
async def remind_guest(
    event_id: UUID,
    guest_id: UUID,
    dispatcher: ReminderDispatcher = Depends(get_reminder_dispatcher),
) -> RemindGuestResponse:
    """Send a guest who has not answered yet a reminder now."""
    try:
        email_sent = await dispatcher.remind_guest(event_id, guest_id)
    except ReminderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return RemindGuestResponse(success=True, email_sent=email_sent)
