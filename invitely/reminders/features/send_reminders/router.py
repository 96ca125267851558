import logging

import sentry_sdk
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from invitely.email_service import get_email_service
from invitely.reminders.dispatcher import ReminderDispatcher
from invitely.reminders.repository.read_models import SqlReminderReadModel
from invitely.reminders.repository.write_models import SqlReminderWriteModel
from invitely.reminders.urls import CRON_REMINDERS_URL
from invitely.security import verify_cron_secret
from invitely.sms_service import get_sms_service

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_cron_secret)])


class SendRemindersResponse(BaseModel):
    success: bool
    emails_sent: int
    sms_sent: int
    errors: int


def get_reminder_dispatcher() -> ReminderDispatcher:
    """Dependency to get the reminder dispatcher."""
    return ReminderDispatcher(
        read_model=SqlReminderReadModel(),
        write_model=SqlReminderWriteModel(),
        email_service=get_email_service(),
        sms_service=get_sms_service(),
    )


@router.post(CRON_REMINDERS_URL, response_model=SendRemindersResponse)
async def send_reminders(
    dispatcher: ReminderDispatcher = Depends(get_reminder_dispatcher),
) -> SendRemindersResponse:
    """
    Run one reminder cycle. Meant to be hit by an external scheduler.
    Individual delivery failures are counted in `errors`; a 500 means the cycle itself failed.
    """
    try:
        summary = await dispatcher.run_cycle()
    except Exception as e:
        logger.exception("Reminder cycle failed")
        sentry_sdk.capture_exception(e)
        raise HTTPException(status_code=500, detail="Failed to process reminders")

    return SendRemindersResponse(
        success=True,
        emails_sent=summary.emails_sent,
        sms_sent=summary.sms_sent,
        errors=summary.errors,
    )
