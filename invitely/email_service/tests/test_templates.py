from datetime import UTC, datetime

from invitely.email_service.base import ConfirmationEmail, ReminderEmail, RSVPNotificationEmail
from invitely.email_service.templates import EmailTemplates, format_event_date, status_label

START = datetime(2026, 12, 12, 18, 0, tzinfo=UTC)


def test_format_event_date():
    assert format_event_date(START) == "Saturday, December 12, 2026 at 6:00 PM UTC"
    assert format_event_date(START.replace(hour=0, minute=5)) == (
        "Saturday, December 12, 2026 at 12:05 AM UTC"
    )


def test_status_label():
    assert status_label("NOT_ATTENDING") == "Not attending"
    assert status_label("SOMETHING_ELSE") == "SOMETHING_ELSE"


def test_render_reminder_with_quick_links():
    subject, html_body, text_body = EmailTemplates.render_reminder(
        ReminderEmail(
            to_address="jane@example.com",
            guest_name="Jane",
            event_title="Winter Party",
            event_start=START,
            rsvp_url="http://localhost:3000/rsvp/abc",
            attending_url="http://localhost:8000/api/v1/rsvp/abc/quick?status=ATTENDING",
            not_attending_url="http://localhost:8000/api/v1/rsvp/abc/quick?status=NOT_ATTENDING",
        )
    )

    assert subject == "Reminder: Please RSVP for Winter Party"
    assert "quick?status=ATTENDING" in html_body
    assert "Where: TBA" in text_body
    assert "Saturday, December 12, 2026 at 6:00 PM UTC" in text_body


def test_render_reminder_escapes_html():
    _, html_body, text_body = EmailTemplates.render_reminder(
        ReminderEmail(
            to_address="jane@example.com",
            guest_name="<script>",
            event_title="Tom & Jerry",
            event_start=START,
            rsvp_url="http://localhost:3000/rsvp/abc",
        )
    )

    assert "&lt;script&gt;" in html_body
    assert "<script>" not in html_body
    assert "Tom &amp; Jerry" in html_body
    assert "Tom & Jerry" in text_body


def test_render_confirmation():
    subject, _, text_body = EmailTemplates.render_confirmation(
        ConfirmationEmail(
            to_address="jane@example.com",
            guest_name="Jane",
            event_title="Winter Party",
            event_start=START,
            status="ATTENDING",
            rsvp_url="http://localhost:3000/rsvp/abc",
            additional_guests=["Anna", "Ben"],
        )
    )

    assert subject == "RSVP Confirmed for Winter Party"
    assert "Your response: Attending" in text_body
    assert "Additional guests: Anna, Ben" in text_body
    assert "Dietary notes: None" in text_body


def test_render_status_change_notification():
    subject, _, text_body = EmailTemplates.render_rsvp_notification(
        RSVPNotificationEmail(
            to_address="host@example.com",
            host_name="Hannah",
            guest_name="Jane",
            guest_email="jane@example.com",
            event_title="Winter Party",
            change_type="STATUS_CHANGED",
            status="NOT_ATTENDING",
            previous_status="ATTENDING",
        )
    )

    assert subject == "RSVP Status Changed for Winter Party"
    assert "changed their response from Attending to Not attending" in text_body
