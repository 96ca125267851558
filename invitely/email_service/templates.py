from dataclasses import dataclass
from datetime import datetime
from html import escape

from invitely.email_service.base import ConfirmationEmail, ReminderEmail, RSVPNotificationEmail

STATUS_LABELS = {
    "PENDING": "No response yet",
    "ATTENDING": "Attending",
    "NOT_ATTENDING": "Not attending",
    "MAYBE": "Maybe",
}

CHANGE_TYPE_LABELS = {
    "NEW": "New RSVP",
    "UPDATED": "RSVP Updated",
    "STATUS_CHANGED": "RSVP Status Changed",
}


def format_event_date(value: datetime) -> str:
    """e.g. 'Saturday, October 17, 2026 at 3:00 PM UTC'."""
    hour = value.strftime("%I").lstrip("0") or "12"
    zone = value.strftime("%Z")
    formatted = f"{value.strftime('%A, %B')} {value.day}, {value.year} at {hour}:{value.strftime('%M %p')}"
    return f"{formatted} {zone}" if zone else formatted


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


@dataclass
class EmailTemplates:
    REMINDER_SUBJECT = "Reminder: Please RSVP for {event_title}"
    REMINDER_HTML = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h1 style="color: #0a0f2c;">{event_title} is coming up</h1>

        <p>Hi {guest_name},</p>

        <p>This is a friendly reminder about <strong>{event_title}</strong>.</p>

        <div style="background-color: #f4f6fb; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <p><strong>When:</strong> {event_date}</p>
            <p><strong>Where:</strong> {event_location}</p>
        </div>

        {quick_links}

        <div style="text-align: center; margin: 30px 0;">
            <a href="{rsvp_url}" style="background-color: #07c8f9; color: white; padding: 15px 30px; text-decoration: none; border-radius: 5px; font-size: 18px;">
                View or update your RSVP
            </a>
        </div>

        <p style="word-break: break-all;"><a href="{rsvp_url}">{rsvp_url}</a></p>
    </body>
    </html>
    """
    REMINDER_QUICK_LINKS_HTML = """
        <p style="text-align: center;">
            <a href="{attending_url}">I'll be there</a> &middot;
            <a href="{not_attending_url}">I can't make it</a>
        </p>
    """
    REMINDER_TEXT = """
    Hi {guest_name},

    This is a friendly reminder about {event_title}.

    When: {event_date}
    Where: {event_location}

    View or update your RSVP:
    {rsvp_url}
    """

    CONFIRMATION_SUBJECT = "RSVP Confirmed for {event_title}"
    CONFIRMATION_HTML = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h1 style="color: #0a0f2c;">Thanks for your RSVP!</h1>

        <p>Hi {guest_name},</p>

        <p>We've recorded your response for <strong>{event_title}</strong> on {event_date}.</p>

        <div style="background-color: #f4f6fb; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <p><strong>Your response:</strong> {status}</p>
            <p><strong>Additional guests:</strong> {additional_guests}</p>
            <p><strong>Dietary notes:</strong> {dietary_notes}</p>
        </div>

        <p>Need to change something? <a href="{rsvp_url}">Update your RSVP</a>.</p>
    </body>
    </html>
    """
    CONFIRMATION_TEXT = """
    Hi {guest_name},

    We've recorded your response for {event_title} on {event_date}.

    Your response: {status}
    Additional guests: {additional_guests}
    Dietary notes: {dietary_notes}

    Need to change something? {rsvp_url}
    """

    NOTIFICATION_SUBJECT = "{change_label} for {event_title}"
    NOTIFICATION_HTML = """
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
    </head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h1 style="color: #0a0f2c;">{change_label}</h1>

        <p>Hi {host_name},</p>

        <p><strong>{guest_name}</strong> ({guest_email}) {summary} for <strong>{event_title}</strong>.</p>

        <div style="background-color: #f4f6fb; padding: 20px; border-radius: 8px; margin: 20px 0;">
            <p><strong>Response:</strong> {status}</p>
            <p><strong>Additional guests:</strong> {additional_guests}</p>
            <p><strong>Dietary notes:</strong> {dietary_notes}</p>
        </div>
    </body>
    </html>
    """
    NOTIFICATION_TEXT = """
    Hi {host_name},

    {guest_name} ({guest_email}) {summary} for {event_title}.

    Response: {status}
    Additional guests: {additional_guests}
    Dietary notes: {dietary_notes}
    """

    @classmethod
    def render_reminder(cls, email: ReminderEmail) -> tuple[str, str, str]:
        """Returns: (subject, html_body, text_body)"""
        values = {
            "guest_name": email.guest_name,
            "event_title": email.event_title,
            "event_date": format_event_date(email.event_start),
            "event_location": email.event_location or "TBA",
            "rsvp_url": email.rsvp_url,
        }
        quick_links = ""
        if email.attending_url and email.not_attending_url:
            quick_links = cls.REMINDER_QUICK_LINKS_HTML.format(
                attending_url=escape(email.attending_url),
                not_attending_url=escape(email.not_attending_url),
            )
        subject = cls.REMINDER_SUBJECT.format(event_title=email.event_title)
        html_body = cls.REMINDER_HTML.format(quick_links=quick_links, **_escaped(values))
        text_body = cls.REMINDER_TEXT.format(**values)
        return subject, html_body, text_body

    @classmethod
    def render_confirmation(cls, email: ConfirmationEmail) -> tuple[str, str, str]:
        """Returns: (subject, html_body, text_body)"""
        values = {
            "guest_name": email.guest_name,
            "event_title": email.event_title,
            "event_date": format_event_date(email.event_start),
            "status": status_label(email.status),
            "additional_guests": ", ".join(email.additional_guests) or "None",
            "dietary_notes": email.dietary_notes or "None",
            "rsvp_url": email.rsvp_url,
        }
        subject = cls.CONFIRMATION_SUBJECT.format(event_title=email.event_title)
        return (
            subject,
            cls.CONFIRMATION_HTML.format(**_escaped(values)),
            cls.CONFIRMATION_TEXT.format(**values),
        )

    @classmethod
    def render_rsvp_notification(cls, email: RSVPNotificationEmail) -> tuple[str, str, str]:
        """Returns: (subject, html_body, text_body)"""
        change_label = CHANGE_TYPE_LABELS.get(email.change_type, "RSVP Updated")
        if email.change_type == "NEW":
            summary = "responded"
        elif email.change_type == "STATUS_CHANGED" and email.previous_status:
            summary = (
                f"changed their response from {status_label(email.previous_status)} "
                f"to {status_label(email.status)}"
            )
        else:
            summary = "updated their RSVP"

        values = {
            "change_label": change_label,
            "host_name": email.host_name,
            "guest_name": email.guest_name,
            "guest_email": email.guest_email,
            "summary": summary,
            "event_title": email.event_title,
            "status": status_label(email.status),
            "additional_guests": ", ".join(email.additional_guests) or "None",
            "dietary_notes": email.dietary_notes or "None",
        }
        subject = cls.NOTIFICATION_SUBJECT.format(
            change_label=change_label, event_title=email.event_title
        )
        return (
            subject,
            cls.NOTIFICATION_HTML.format(**_escaped(values)),
            cls.NOTIFICATION_TEXT.format(**values),
        )


def _escaped(values: dict[str, str]) -> dict[str, str]:
    return {key: escape(value) for key, value in values.items()}
