from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import UserContext, get_current_user
from app.db.session import get_db
from app.schemas.settings import NotificationPreferencesUpdate
from app.services.notification_preferences import get_preferences, update_preferences

router = APIRouter()


@router.get("")
def get_notification_preferences(db: Session = Depends(get_db), user: UserContext = Depends(get_current_user)):
    return {"data": get_preferences(db, user)}


@router.patch("")
def patch_notification_preferences(
    payload: NotificationPreferencesUpdate,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    return {"data": update_preferences(db, user, payload)}
