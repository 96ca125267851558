CRON_REMINDERS_URL = "/api/v1/cron/reminders"
REMIND_GUEST_URL = "/api/v1/events/{event_id}/guests/{guest_id}/remind"
