from fastapi import APIRouter

from .features.remind_guest.router import router as remind_guest_router
from .features.send_reminders.router import router as send_reminders_router

router = APIRouter()

router.include_router(send_reminders_router)
router.include_router(remind_guest_router)
