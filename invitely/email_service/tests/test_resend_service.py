"""Unit tests for ResendEmailService, mocking the HTTP client."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

import httpx
import pytest

from invitely.email_service.base import ConfirmationEmail, ReminderEmail, RSVPNotificationEmail
from invitely.email_service.email_logger import EmailLogger
from invitely.email_service.resend_service import RESEND_EMAILS_URL, ResendEmailService
from invitely.email_service.tests.mock_http import MockHttpClient, MockResponse

START = datetime(2026, 12, 12, 18, 0, tzinfo=UTC)


class MockConfig:
    resend_api_key = "test-api-key"
    emails_from = "Invitely <hello@example.com>"


class RecordingEmailLogger(EmailLogger):
    def __init__(self):
        self.attempts: list[dict] = []
        self.successes: list[tuple[UUID, str | None]] = []
        self.failures: list[tuple[UUID, str]] = []

    async def log_email_attempt(self, **kwargs) -> UUID:
        self.attempts.append(kwargs)
        return uuid4()

    async def log_email_success(self, log_uuid: UUID, provider_email_id: str | None) -> None:
        self.successes.append((log_uuid, provider_email_id))

    async def log_email_failure(self, log_uuid: UUID, error_message: str) -> None:
        self.failures.append((log_uuid, error_message))


@pytest.fixture
def email_logger():
    return RecordingEmailLogger()


def reminder(**kwargs) -> ReminderEmail:
    values = {
        "to_address": "jane@example.com",
        "guest_name": "Jane",
        "event_title": "Winter Party",
        "event_start": START,
        "rsvp_url": "http://localhost:3000/rsvp/abc",
    }
    values.update(kwargs)
    return ReminderEmail(**values)


@pytest.mark.asyncio
async def test_send_reminder_posts_to_resend(email_logger):
    http_client = MockHttpClient()
    service = ResendEmailService(MockConfig(), email_logger, http_client_class=http_client)

    await service.send_reminder(reminder(reply_to="host@example.com"))

    [call] = http_client.post_calls
    assert call["url"] == RESEND_EMAILS_URL
    assert call["headers"]["Authorization"] == "Bearer test-api-key"
    assert call["json"]["to"] == ["jane@example.com"]
    assert call["json"]["from"] == "Invitely <hello@example.com>"
    assert call["json"]["subject"] == "Reminder: Please RSVP for Winter Party"
    assert call["json"]["reply_to"] == "host@example.com"
    assert "http://localhost:3000/rsvp/abc" in call["json"]["text"]

    assert email_logger.attempts[0]["email_type"] == "reminder"
    assert email_logger.successes[0][1] == "email-123"


@pytest.mark.asyncio
async def test_no_reply_to_when_unset(email_logger):
    http_client = MockHttpClient()
    service = ResendEmailService(MockConfig(), email_logger, http_client_class=http_client)

    await service.send_reminder(reminder())

    assert "reply_to" not in http_client.post_calls[0]["json"]


@pytest.mark.asyncio
async def test_provider_error_is_logged_and_raised(email_logger):
    http_client = MockHttpClient(MockResponse(status_code=422))
    service = ResendEmailService(MockConfig(), email_logger, http_client_class=http_client)

    with pytest.raises(httpx.HTTPStatusError):
        await service.send_reminder(reminder())

    assert email_logger.successes == []
    assert "HTTP 422" in email_logger.failures[0][1]


@pytest.mark.asyncio
async def test_send_confirmation(email_logger):
    http_client = MockHttpClient()
    service = ResendEmailService(MockConfig(), email_logger, http_client_class=http_client)
    guest_id = uuid4()

    await service.send_confirmation(
        ConfirmationEmail(
            to_address="jane@example.com",
            guest_name="Jane",
            event_title="Winter Party",
            event_start=START,
            status="ATTENDING",
            rsvp_url="http://localhost:3000/rsvp/abc",
            additional_guests=["Anna"],
            guest_id=guest_id,
        )
    )

    payload = http_client.post_calls[0]["json"]
    assert payload["subject"] == "RSVP Confirmed for Winter Party"
    assert "Additional guests: Anna" in payload["text"]
    assert email_logger.attempts[0]["guest_id"] == guest_id
    assert email_logger.attempts[0]["email_type"] == "confirmation"


@pytest.mark.asyncio
async def test_send_rsvp_notification(email_logger):
    http_client = MockHttpClient()
    service = ResendEmailService(MockConfig(), email_logger, http_client_class=http_client)

    await service.send_rsvp_notification(
        RSVPNotificationEmail(
            to_address="host@example.com",
            host_name="Hannah",
            guest_name="Jane",
            guest_email="jane@example.com",
            event_title="Winter Party",
            change_type="NEW",
            status="MAYBE",
        )
    )

    payload = http_client.post_calls[0]["json"]
    assert payload["to"] == ["host@example.com"]
    assert payload["subject"] == "New RSVP for Winter Party"
    assert email_logger.attempts[0]["email_type"] == "rsvp_notification"
