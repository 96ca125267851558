from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from invitely.events.dtos import EventDTO, ReminderRule, ReminderUnit
from invitely.events.reminder_schedule import format_rule, validate_schedule
from invitely.events.repository.read_models import EventReadModel, SqlEventReadModel
from invitely.events.repository.write_models import EventWriteModel, SqlEventWriteModel
from invitely.events.urls import REMINDERS_URL
from invitely.security import verify_admin_secret

router = APIRouter(dependencies=[Depends(verify_admin_secret)])


class ReminderRuleSubmit(BaseModel):
    # Plain str so an unknown unit gets the schedule validation message, not a 422
    type: str
    value: int


class UpdateRemindersRequest(BaseModel):
    reminder_schedule: list[ReminderRuleSubmit] | None = None


class ReminderRuleResponse(BaseModel):
    type: ReminderUnit
    value: int
    label: str


class RemindersResponse(BaseModel):
    event_id: UUID
    title: str
    reminder_schedule: list[ReminderRuleResponse]


def get_event_read_model() -> EventReadModel:
    """Dependency to get event read model instance."""
    return SqlEventReadModel()


def get_event_write_model() -> EventWriteModel:
    """Dependency to get event write model instance."""
    return SqlEventWriteModel()


def _to_response(event: EventDTO) -> RemindersResponse:
    return RemindersResponse(
        event_id=event.id,
        title=event.title,
        reminder_schedule=[
            ReminderRuleResponse(type=rule.unit, value=rule.value, label=format_rule(rule))
            for rule in event.reminder_schedule
        ],
    )


@router.get(REMINDERS_URL, response_model=RemindersResponse)
async def get_reminders(
    event_id: UUID,
    read_model: EventReadModel = Depends(get_event_read_model),
) -> RemindersResponse:
    """Current reminder schedule of an event, in firing order as configured."""
    event = await read_model.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return _to_response(event)


@router.patch(REMINDERS_URL, response_model=RemindersResponse)
async def update_reminders(
    event_id: UUID,
    request: UpdateRemindersRequest,
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> RemindersResponse:
    """
    Replace the reminder schedule of an event.
    An empty or null schedule switches reminders off.
    """
    submitted = [
        ReminderRule(unit=rule.type, value=rule.value)
        for rule in request.reminder_schedule or []
    ]

    validation = validate_schedule(submitted)
    if not validation.valid:
        raise HTTPException(status_code=400, detail=validation.error)

    rules = [ReminderRule(unit=ReminderUnit(rule.unit), value=rule.value) for rule in submitted]
    event = await write_model.update_reminder_schedule(event_id, rules)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return _to_response(event)
