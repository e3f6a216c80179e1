from __future__ import annotations

import uuid

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session

from app.core.deps import UserContext, get_current_user, get_optional_user
from app.db.session import get_db
from app.services.actions import ActionContext, dispatch
from app.services.azkar import AZKAR_READ_ACTIONS, AZKAR_WRITE_ACTIONS, delete_reminder
from app.services.query_validation import raw_params

router = APIRouter()


@router.get("")
def read_azkar(
    request: Request,
    action: str | None = None,
    db: Session = Depends(get_db),
    user: UserContext | None = Depends(get_optional_user),
):
    params = raw_params(request.query_params)
    params.pop("action", None)
    ctx = ActionContext(db=db, params=params, user=user)
    return dispatch(AZKAR_READ_ACTIONS, action, ctx, default="azkar")


@router.post("", status_code=201)
def write_azkar(
    action: str | None = None,
    body: dict | None = Body(default=None),
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    ctx = ActionContext(db=db, user=user, body=body or {})
    return dispatch(AZKAR_WRITE_ACTIONS, action, ctx)


@router.delete("/reminders/{reminder_id}")
def remove_reminder(
    reminder_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    delete_reminder(db, user, reminder_id)
    return {"status": "ok"}
