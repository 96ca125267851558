from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from invitely.email_service.tests.inmemory_email_service import InMemoryEmailService
from invitely.events.dtos import EventNotFoundError, HostDTO
from invitely.events.tests.inmemory_models import InMemoryEventStore, create_test_event
from invitely.guests.admission import RSVPAdmission, clean_names
from invitely.guests.dtos import (
    ChangeType,
    GuestLimitExceededError,
    GuestNotFoundError,
    GuestStatus,
    RSVPDeadlinePassedError,
)
from invitely.guests.tests.inmemory_models import (
    InMemoryRSVPReadModel,
    InMemoryRSVPWriteModel,
    create_test_guest,
)
from invitely.sms_service.tests.inmemory_sms_service import InMemorySMSService


@pytest.fixture
def event():
    return create_test_event(max_guests_per_invitee=3)


@pytest.fixture
def event_store(event):
    return InMemoryEventStore(
        events=[event],
        hosts={event.id: [HostDTO(id=uuid4(), email="host@example.com", name="Hannah Host")]},
    )


@pytest.fixture
def rsvp_read_model():
    return InMemoryRSVPReadModel()


@pytest.fixture
def rsvp_write_model(rsvp_read_model):
    return InMemoryRSVPWriteModel(rsvp_read_model)


@pytest.fixture
def email_service():
    return InMemoryEmailService()


@pytest.fixture
def admission(rsvp_read_model, rsvp_write_model, event_store, email_service):
    return RSVPAdmission(
        rsvp_read_model=rsvp_read_model,
        rsvp_write_model=rsvp_write_model,
        event_read_model=event_store,
        email_service=email_service,
    )


def add_guest(read_model, event, **kwargs):
    guest = create_test_guest(event_id=event.id, **kwargs)
    read_model.guests[guest.id] = guest
    return guest


def test_clean_names():
    assert clean_names(None) is None
    assert clean_names(["  Anna ", "", "   ", "Ben"]) == ["Anna", "Ben"]


@pytest.mark.asyncio
async def test_first_submission_creates_guest(admission, event, email_service):
    result = await admission.submit(
        event_id=event.id,
        email="Jane@Example.com",
        status=GuestStatus.ATTENDING,
        additional_guests=[" Anna "],
        name="Jane",
    )

    assert result.change_type == ChangeType.NEW
    assert result.guest.email == "jane@example.com"
    assert result.guest.status == GuestStatus.ATTENDING
    assert [g.name for g in result.guest.additional_guests] == ["Anna"]
    assert len(email_service.confirmations) == 1
    assert email_service.confirmations[0].status == "ATTENDING"
    assert len(email_service.notifications) == 1
    assert email_service.notifications[0].change_type == "NEW"


@pytest.mark.asyncio
async def test_second_submission_updates_same_guest(admission, event, rsvp_read_model):
    first = await admission.submit(event.id, "jane@example.com", GuestStatus.MAYBE)
    second = await admission.submit(event.id, "jane@example.com", GuestStatus.ATTENDING)

    assert second.guest.id == first.guest.id
    assert second.change_type == ChangeType.STATUS_CHANGED
    assert second.previous_status == GuestStatus.MAYBE
    assert len(rsvp_read_model.guests) == 1


@pytest.mark.asyncio
async def test_submit_unknown_event(admission):
    with pytest.raises(EventNotFoundError):
        await admission.submit(uuid4(), "jane@example.com", GuestStatus.ATTENDING)


@pytest.mark.asyncio
async def test_update_unknown_token(admission):
    with pytest.raises(GuestNotFoundError):
        await admission.update("no-such-token", status=GuestStatus.ATTENDING)


@pytest.mark.asyncio
async def test_update_guest_of_missing_event(admission, rsvp_read_model):
    guest = create_test_guest(event_id=uuid4())
    rsvp_read_model.guests[guest.id] = guest

    with pytest.raises(EventNotFoundError):
        await admission.update(guest.token, status=GuestStatus.ATTENDING)


@pytest.mark.asyncio
async def test_deadline_passed_rejects_without_write(
    rsvp_read_model, rsvp_write_model, event_store, email_service
):
    event = create_test_event(rsvp_deadline=datetime.now(UTC) - timedelta(hours=1))
    event_store.events[event.id] = event
    guest = add_guest(rsvp_read_model, event)
    admission = RSVPAdmission(rsvp_read_model, rsvp_write_model, event_store, email_service)

    with pytest.raises(RSVPDeadlinePassedError, match="deadline for this event has passed"):
        await admission.update(guest.token, status=GuestStatus.ATTENDING)

    assert rsvp_write_model.saved == []
    assert rsvp_read_model.guests[guest.id].status == GuestStatus.PENDING
    assert email_service.confirmations == []


@pytest.mark.asyncio
async def test_over_capacity_rejects_without_write(admission, event, rsvp_read_model, rsvp_write_model):
    guest = add_guest(
        rsvp_read_model, event, status=GuestStatus.ATTENDING, additional_guests=["Anna"]
    )

    with pytest.raises(GuestLimitExceededError) as exc_info:
        await admission.update(guest.token, additional_guests=["Anna", "Ben", "Cleo"])

    assert str(exc_info.value) == (
        "You can only bring 2 additional guests (total of 3 including yourself)"
    )
    assert rsvp_write_model.saved == []
    assert [g.name for g in rsvp_read_model.guests[guest.id].additional_guests] == ["Anna"]


@pytest.mark.asyncio
async def test_exact_capacity_is_admitted(admission, event, rsvp_read_model):
    guest = add_guest(rsvp_read_model, event)

    result = await admission.update(
        guest.token, status=GuestStatus.ATTENDING, additional_guests=["Anna", "Ben"]
    )

    assert [g.name for g in result.guest.additional_guests] == ["Anna", "Ben"]


@pytest.mark.asyncio
async def test_per_guest_override_raises_limit(admission, event, rsvp_read_model):
    guest = add_guest(rsvp_read_model, event, max_guests=5)

    result = await admission.update(
        guest.token,
        status=GuestStatus.ATTENDING,
        additional_guests=["Anna", "Ben", "Cleo", "Dan"],
    )

    assert len(result.guest.additional_guests) == 4


@pytest.mark.asyncio
async def test_non_attending_clears_additional_guests(admission, event, rsvp_read_model):
    guest = add_guest(
        rsvp_read_model, event, status=GuestStatus.ATTENDING, additional_guests=["Anna", "Ben"]
    )

    result = await admission.update(
        guest.token, status=GuestStatus.NOT_ATTENDING, additional_guests=["Cleo"]
    )

    assert result.guest.status == GuestStatus.NOT_ATTENDING
    assert result.guest.additional_guests == []


@pytest.mark.asyncio
async def test_quick_update_keeps_additional_guests_when_attending(admission, event, rsvp_read_model):
    guest = add_guest(rsvp_read_model, event, status=GuestStatus.MAYBE, additional_guests=["Anna"])

    result = await admission.quick_update(guest.token, GuestStatus.ATTENDING)

    assert result.change_type == ChangeType.STATUS_CHANGED
    assert [g.name for g in result.guest.additional_guests] == ["Anna"]


@pytest.mark.asyncio
async def test_quick_update_rechecks_stored_set_against_limit(admission, event, rsvp_read_model):
    guest = add_guest(
        rsvp_read_model, event, status=GuestStatus.MAYBE, additional_guests=["Anna", "Ben", "Cleo"]
    )

    with pytest.raises(GuestLimitExceededError):
        await admission.quick_update(guest.token, GuestStatus.ATTENDING)


@pytest.mark.asyncio
async def test_profile_fields_only_change_when_supplied(admission, event, rsvp_read_model):
    guest = add_guest(rsvp_read_model, event, name="John Doe", phone="+15551234567")

    result = await admission.update(guest.token, dietary_notes="vegetarian")

    assert result.guest.name == "John Doe"
    assert result.guest.phone == "+15551234567"
    assert result.guest.dietary_notes == "vegetarian"
    assert result.guest.status == GuestStatus.PENDING
    assert result.change_type == ChangeType.UPDATED


@pytest.mark.asyncio
async def test_unchanged_update_skips_host_notification(admission, event, rsvp_read_model, email_service):
    guest = add_guest(rsvp_read_model, event, status=GuestStatus.ATTENDING)

    result = await admission.update(guest.token, status=GuestStatus.ATTENDING)

    assert result.change_type == ChangeType.UPDATED
    assert len(email_service.confirmations) == 1
    assert email_service.notifications == []


@pytest.mark.asyncio
async def test_status_change_notifies_every_host(
    admission, event, event_store, rsvp_read_model, email_service
):
    await event_store.add_cohost(event.id, "cohost@example.com")
    guest = add_guest(rsvp_read_model, event)

    await admission.update(guest.token, status=GuestStatus.NOT_ATTENDING)

    assert [n.to_address for n in email_service.notifications] == [
        "host@example.com",
        "cohost@example.com",
    ]
    assert email_service.notifications[0].previous_status == "PENDING"
    assert email_service.notifications[1].host_name == "cohost@example.com"


@pytest.mark.asyncio
async def test_guest_without_email_notifications_gets_no_confirmation(
    admission, event, rsvp_read_model, email_service
):
    guest = add_guest(rsvp_read_model, event, notify_by_email=False)

    await admission.update(guest.token, status=GuestStatus.ATTENDING)

    assert email_service.confirmations == []
    assert len(email_service.notifications) == 1


@pytest.mark.asyncio
async def test_email_failure_does_not_fail_rsvp(
    rsvp_read_model, rsvp_write_model, event_store, event, caplog
):
    email_service = InMemoryEmailService(failing_addresses={"john@example.com", "host@example.com"})
    admission = RSVPAdmission(rsvp_read_model, rsvp_write_model, event_store, email_service)
    guest = add_guest(rsvp_read_model, event)

    result = await admission.update(guest.token, status=GuestStatus.ATTENDING)

    assert result.guest.status == GuestStatus.ATTENDING
    assert rsvp_read_model.guests[guest.id].status == GuestStatus.ATTENDING
    assert "Failed to send RSVP confirmation to john@example.com" in caplog.text
    assert "Failed to send RSVP notification to host host@example.com" in caplog.text


@pytest.mark.asyncio
async def test_write_failure_propagates(rsvp_read_model, event_store, event, email_service):
    write_model = InMemoryRSVPWriteModel(rsvp_read_model, fail_on_save=True)
    admission = RSVPAdmission(rsvp_read_model, write_model, event_store, email_service)
    guest = add_guest(rsvp_read_model, event)

    with pytest.raises(RuntimeError):
        await admission.update(guest.token, status=GuestStatus.ATTENDING)

    assert email_service.confirmations == []


@pytest.mark.asyncio
async def test_works_without_email_service(rsvp_read_model, rsvp_write_model, event_store, event):
    admission = RSVPAdmission(rsvp_read_model, rsvp_write_model, event_store)

    result = await admission.submit(event.id, "jane@example.com", GuestStatus.MAYBE)

    assert result.change_type == ChangeType.NEW


@pytest.mark.asyncio
async def test_sms_confirmation_for_guest_with_phone(
    rsvp_read_model, rsvp_write_model, event_store, event
):
    sms_service = InMemorySMSService()
    admission = RSVPAdmission(
        rsvp_read_model, rsvp_write_model, event_store, sms_service=sms_service
    )

    await admission.submit(
        event.id, "jane@example.com", GuestStatus.ATTENDING, name="Jane", phone="+15551234567"
    )
    await admission.submit(event.id, "nophone@example.com", GuestStatus.ATTENDING)

    [sms] = sms_service.confirmations
    assert sms.to_number == "+15551234567"
    assert sms.guest_name == "Jane"
    assert sms.status == "ATTENDING"
    assert sms.event_title == event.title
    assert sms.event_start == event.start_time
    assert sms.event_location == "Town Hall"


@pytest.mark.asyncio
async def test_sms_confirmation_falls_back_to_email_as_name(
    rsvp_read_model, rsvp_write_model, event_store, event, email_service
):
    sms_service = InMemorySMSService()
    admission = RSVPAdmission(
        rsvp_read_model, rsvp_write_model, event_store, email_service, sms_service
    )
    guest = add_guest(rsvp_read_model, event, name=None, phone="+15551234567")

    await admission.update(guest.token, status=GuestStatus.NOT_ATTENDING)

    [sms] = sms_service.confirmations
    assert sms.guest_name == "john@example.com"
    assert sms.status == "NOT_ATTENDING"
    assert len(email_service.confirmations) == 1


@pytest.mark.asyncio
async def test_sms_failure_does_not_fail_rsvp(
    rsvp_read_model, rsvp_write_model, event_store, event, email_service, caplog
):
    sms_service = InMemorySMSService(failing_numbers={"+15551234567"})
    admission = RSVPAdmission(
        rsvp_read_model, rsvp_write_model, event_store, email_service, sms_service
    )
    guest = add_guest(rsvp_read_model, event, phone="+15551234567")

    result = await admission.update(guest.token, status=GuestStatus.ATTENDING)

    assert result.guest.status == GuestStatus.ATTENDING
    assert sms_service.confirmations == []
    assert len(email_service.confirmations) == 1
    assert f"Failed to send RSVP confirmation SMS to guest {guest.id}" in caplog.text
