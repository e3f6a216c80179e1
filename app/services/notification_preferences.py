from __future__ import annotations

from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.deps import UserContext
from app.models.notification_preference import NotificationPreference
from app.schemas.settings import NotificationPreferencesUpdate
from app.services.universal_query import row_to_dict


def _find_preferences(db: Session, user: UserContext) -> NotificationPreference | None:
    return db.query(NotificationPreference).filter(NotificationPreference.user_id == user.user_id).first()


def _get_or_create(db: Session, user: UserContext) -> NotificationPreference:
    row = _find_preferences(db, user)
    if row is not None:
        return row
    row = NotificationPreference(user_id=user.user_id)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        # Defaults were created by a concurrent first read.
        db.rollback()
        row = _find_preferences(db, user)
        if row is None:
            raise
        return row
    db.refresh(row)
    return row


def get_preferences(db: Session, user: UserContext) -> dict[str, Any]:
    return row_to_dict(_get_or_create(db, user))


def update_preferences(db: Session, user: UserContext, payload: NotificationPreferencesUpdate) -> dict[str, Any]:
    row = _get_or_create(db, user)
    changes = payload.model_dump(exclude_unset=True)
    for key, value in changes.items():
        if value is None and key not in {"quiet_hours_start", "quiet_hours_end"}:
            continue
        setattr(row, key, value)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row_to_dict(row)
