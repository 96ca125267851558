from uuid import uuid4

import pytest

from invitely.config.settings import settings
from invitely.events.dtos import ReminderRule, ReminderUnit
from invitely.events.features.update_reminders.router import (
    get_event_read_model,
    get_event_write_model,
)
from invitely.events.tests.inmemory_models import InMemoryEventStore, create_test_event
from invitely.events.urls import REMINDERS_URL


@pytest.fixture
def event():
    return create_test_event(reminder_schedule=[ReminderRule(unit=ReminderUnit.DAY, value=7)])


@pytest.fixture
def store(event):
    return InMemoryEventStore(events=[event])


@pytest.fixture
def overrides(store):
    return {
        get_event_read_model: lambda: store,
        get_event_write_model: lambda: store,
    }


@pytest.mark.asyncio
async def test_get_reminders(client_factory, event, overrides):
    async with client_factory(overrides) as client:
        response = await client.get(REMINDERS_URL.format(event_id=event.id))

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Winter Party"
    assert data["reminder_schedule"] == [{"type": "day", "value": 7, "label": "7 days before"}]


@pytest.mark.asyncio
async def test_get_reminders_unknown_event(client_factory, overrides):
    async with client_factory(overrides) as client:
        response = await client.get(REMINDERS_URL.format(event_id=uuid4()))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_reminders(client_factory, event, store, overrides):
    payload = {
        "reminder_schedule": [
            {"type": "day", "value": 3},
            {"type": "hour", "value": 1},
        ]
    }

    async with client_factory(overrides) as client:
        response = await client.patch(REMINDERS_URL.format(event_id=event.id), json=payload)

    assert response.status_code == 200
    labels = [rule["label"] for rule in response.json()["reminder_schedule"]]
    assert labels == ["3 days before", "1 hour before"]
    assert store.events[event.id].reminder_schedule == [
        ReminderRule(unit=ReminderUnit.DAY, value=3),
        ReminderRule(unit=ReminderUnit.HOUR, value=1),
    ]


@pytest.mark.asyncio
async def test_update_reminders_null_turns_reminders_off(client_factory, event, store, overrides):
    async with client_factory(overrides) as client:
        response = await client.patch(
            REMINDERS_URL.format(event_id=event.id), json={"reminder_schedule": None}
        )

    assert response.status_code == 200
    assert response.json()["reminder_schedule"] == []
    assert store.events[event.id].reminder_schedule == []


@pytest.mark.asyncio
async def test_update_reminders_rejects_duplicate(client_factory, event, store, overrides):
    payload = {"reminder_schedule": [{"type": "day", "value": 7}, {"type": "day", "value": 7}]}

    async with client_factory(overrides) as client:
        response = await client.patch(REMINDERS_URL.format(event_id=event.id), json=payload)

    assert response.status_code == 400
    assert response.json()["detail"] == "Duplicate reminder: 7 days before"
    assert store.events[event.id].reminder_schedule == [ReminderRule(unit=ReminderUnit.DAY, value=7)]


@pytest.mark.asyncio
async def test_update_reminders_rejects_non_positive(client_factory, event, overrides):
    payload = {"reminder_schedule": [{"type": "hour", "value": 0}]}

    async with client_factory(overrides) as client:
        response = await client.patch(REMINDERS_URL.format(event_id=event.id), json=payload)

    assert response.status_code == 400
    assert "must be positive" in response.json()["detail"]


@pytest.mark.asyncio
async def test_update_reminders_rejects_unknown_unit(client_factory, event, overrides):
    payload = {"reminder_schedule": [{"type": "week", "value": 1}]}

    async with client_factory(overrides) as client:
        response = await client.patch(REMINDERS_URL.format(event_id=event.id), json=payload)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid reminder type: week"


@pytest.mark.asyncio
async def test_admin_secret_required_when_configured(client_factory, event, overrides, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_SECRET", "let-me-in")

    async with client_factory(overrides) as client:
        denied = await client.get(REMINDERS_URL.format(event_id=event.id))
        allowed = await client.get(
            REMINDERS_URL.format(event_id=event.id),
            headers={"Authorization": "Bearer let-me-in"},
        )

    assert denied.status_code == 401
    assert allowed.status_code == 200
