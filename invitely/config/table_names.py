from enum import Enum


class TableNames(str, Enum):
    USERS = "users"
    EVENTS = "events"
    EVENT_COHOSTS = "event_cohosts"
    GUESTS = "guests"
    ADDITIONAL_GUESTS = "additional_guests"
    EMAIL_LOGS = "email_logs"
