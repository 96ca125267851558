from invitely.config.settings import settings
from invitely.guests.dtos import GuestStatus

RSVP_URL = "/api/v1/rsvp"
RSVP_TOKEN_URL = "/api/v1/rsvp/{token}"
QUICK_RSVP_URL = "/api/v1/rsvp/{token}/quick"


def build_rsvp_link(token: str) -> str:
    """Guest-facing RSVP page on the frontend."""
    return f"{settings.frontend_url}/rsvp/{token}"


def build_quick_rsvp_link(token: str, status: GuestStatus) -> str:
    """One-click link for emails; hits the API, which redirects to the frontend."""
    return f"{settings.api_url}{QUICK_RSVP_URL.format(token=token)}?status={status.value}"


def build_event_page_link(slug: str) -> str:
    return f"{settings.frontend_url}/events/{slug}"
