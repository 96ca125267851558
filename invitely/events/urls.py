REMINDERS_URL = "/api/v1/events/{event_id}/reminders"
COHOSTS_URL = "/api/v1/events/{event_id}/cohosts"
