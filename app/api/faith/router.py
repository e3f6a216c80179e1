from fastapi import APIRouter
from app.api.faith import azkar, bookmarks, salat

router = APIRouter()
router.include_router(azkar.router, prefix="/azkar", tags=["Faith"])
router.include_router(salat.router, prefix="/salat", tags=["Faith"])
router.include_router(bookmarks.router, prefix="/bookmarks", tags=["Faith"])
