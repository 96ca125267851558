from fastapi import APIRouter

from .features.add_cohost.router import router as add_cohost_router
from .features.update_reminders.router import router as update_reminders_router

router = APIRouter()

router.include_router(update_reminders_router)
router.include_router(add_cohost_router)
