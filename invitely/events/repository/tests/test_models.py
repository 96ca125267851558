"""Tests for the SQL event read/write models against the test database."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import select, update

from invitely.config.database import async_session_manager
from invitely.events.dtos import ReminderRule, ReminderUnit
from invitely.events.repository.orm_models import Event
from invitely.events.repository.read_models import SqlEventReadModel
from invitely.events.repository.write_models import SqlEventWriteModel, slugify
from invitely.models.user import User

START = datetime(2026, 12, 12, 18, 0, tzinfo=UTC)


def test_slugify():
    slug = slugify("Ana & Bo's Party!")

    assert slug.startswith("ana-bo-s-party-")
    assert len(slug.rsplit("-", 1)[1]) == 6


@pytest.mark.asyncio
async def test_create_event_creates_host_and_stores_schedule(database):
    write_model = SqlEventWriteModel()

    event = await write_model.create_event(
        title="Winter Party",
        start_time=START,
        host_email="host@example.com",
        host_name="Hannah Host",
        max_guests_per_invitee=3,
        reminder_schedule=[
            ReminderRule(unit=ReminderUnit.DAY, value=7),
            ReminderRule(unit=ReminderUnit.HOUR, value=2),
        ],
    )

    assert event.title == "Winter Party"
    assert event.max_guests_per_invitee == 3
    assert event.reminder_schedule == [
        ReminderRule(unit=ReminderUnit.DAY, value=7),
        ReminderRule(unit=ReminderUnit.HOUR, value=2),
    ]

    async with async_session_manager() as session:
        stored = await session.get(Event, event.id)
        assert stored.reminder_schedule == '[{"type":"day","value":7},{"type":"hour","value":2}]'
        host = (await session.execute(select(User).where(User.email == "host@example.com"))).scalar_one()
        assert stored.host_id == host.uuid


@pytest.mark.asyncio
async def test_create_event_without_schedule_stores_null(database):
    event = await SqlEventWriteModel().create_event(
        title="No Reminders", start_time=START, host_email="host@example.com"
    )

    async with async_session_manager() as session:
        stored = await session.get(Event, event.id)
        assert stored.reminder_schedule is None


@pytest.mark.asyncio
async def test_get_event_reads_legacy_schedule(database):
    event = await SqlEventWriteModel().create_event(
        title="Legacy", start_time=START, host_email="host@example.com"
    )
    async with async_session_manager() as session:
        await session.execute(
            update(Event).where(Event.uuid == event.id).values(reminder_schedule="[7,1]")
        )

    loaded = await SqlEventReadModel().get_event(event.id)

    assert loaded.reminder_schedule == [
        ReminderRule(unit=ReminderUnit.DAY, value=7),
        ReminderRule(unit=ReminderUnit.DAY, value=1),
    ]
    assert loaded.start_time == START


@pytest.mark.asyncio
async def test_get_event_unknown_id(database):
    assert await SqlEventReadModel().get_event(uuid4()) is None


@pytest.mark.asyncio
async def test_update_reminder_schedule_replaces_and_clears(database):
    write_model = SqlEventWriteModel()
    event = await write_model.create_event(
        title="Party",
        start_time=START,
        host_email="host@example.com",
        reminder_schedule=[ReminderRule(unit=ReminderUnit.DAY, value=7)],
    )

    updated = await write_model.update_reminder_schedule(
        event.id, [ReminderRule(unit=ReminderUnit.HOUR, value=4)]
    )
    assert updated.reminder_schedule == [ReminderRule(unit=ReminderUnit.HOUR, value=4)]

    cleared = await write_model.update_reminder_schedule(event.id, [])
    assert cleared.reminder_schedule == []

    async with async_session_manager() as session:
        stored = await session.get(Event, event.id)
        assert stored.reminder_schedule is None


@pytest.mark.asyncio
async def test_update_reminder_schedule_unknown_event(database):
    assert await SqlEventWriteModel().update_reminder_schedule(uuid4(), []) is None


@pytest.mark.asyncio
async def test_hosts_for_notification_respect_opt_out(database):
    write_model = SqlEventWriteModel()
    event = await write_model.create_event(
        title="Party",
        start_time=START + timedelta(days=1),
        host_email="host@example.com",
        host_name="Host",
    )
    await write_model.add_cohost(event.id, "cohost@example.com", "Co Host")
    await write_model.add_cohost(event.id, "quiet@example.com", "Quiet Host")
    async with async_session_manager() as session:
        await session.execute(
            update(User)
            .where(User.email == "quiet@example.com")
            .values(notify_on_rsvp_changes=False)
        )

    hosts = await SqlEventReadModel().get_event_hosts_for_notification(event.id)

    assert [host.email for host in hosts] == ["host@example.com", "cohost@example.com"]


@pytest.mark.asyncio
async def test_add_cohost_twice_keeps_one_link(database):
    write_model = SqlEventWriteModel()
    event = await write_model.create_event(
        title="Party",
        start_time=START + timedelta(days=1),
        host_email="host@example.com",
    )

    first = await write_model.add_cohost(event.id, "cohost@example.com", "Co Host")
    second = await write_model.add_cohost(event.id, "cohost@example.com")

    assert first == second
    assert first.name == "Co Host"
    hosts = await SqlEventReadModel().get_event_hosts_for_notification(event.id)
    assert [host.email for host in hosts] == ["host@example.com", "cohost@example.com"]
