from fastapi import APIRouter
from app.api.settings import export, notifications

router = APIRouter()
router.include_router(notifications.router, prefix="/notifications", tags=["Settings"])
router.include_router(export.router, prefix="/export", tags=["Settings"])
