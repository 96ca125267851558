"""Collects every ORM module so that ``metadata`` knows all tables.

Alembic and the test fixtures import this module instead of the feature
packages one by one.
"""

from invitely.email_service.orm_models import EmailLog
from invitely.events.repository.orm_models import Event, EventCoHost
from invitely.guests.repository.orm_models import AdditionalGuest, Guest
from invitely.models.base import BaseModel
from invitely.models.user import User

metadata = BaseModel.metadata

__all__ = [
    "metadata",
    "User",
    "Event",
    "EventCoHost",
    "Guest",
    "AdditionalGuest",
    "EmailLog",
]
