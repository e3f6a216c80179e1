from __future__ import annotations

import uuid
from typing import Any

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.deps import UserContext
from app.models.azkar import Azkar
from app.models.azkar_reminder import AzkarReminder
from app.schemas.faith import AzkarQueryParams, AzkarReminderCreate
from app.schemas.query import SortKey
from app.services.actions import Action, ActionContext
from app.services.query_predicates import equals, substring
from app.services.query_sources import SourceSpec, run_query
from app.services.query_validation import validate_params
from app.services.universal_query import SqlAlchemyAdapter, row_to_dict

AZKAR_SOURCE = SourceSpec(
    source_id="azkar",
    model=Azkar,
    bindings={
        "type": equals("type"),
        "search": substring("title_english", "text_english"),
    },
    default_sort=(SortKey(field="type"), SortKey(field="title_english")),
    max_limit=50,
)


def _list_azkar(ctx: ActionContext) -> dict[str, Any]:
    params = validate_params(AzkarQueryParams, ctx.params)
    adapter = SqlAlchemyAdapter.for_specs(ctx.db, AZKAR_SOURCE)
    return run_query(adapter, AZKAR_SOURCE, params).to_response()


def _list_types(ctx: ActionContext) -> dict[str, Any]:
    rows = ctx.db.query(Azkar.type).filter(Azkar.type.is_not(None)).distinct().all()
    return {"data": sorted({row[0] for row in rows})}


def _list_reminders(ctx: ActionContext) -> dict[str, Any]:
    user = ctx.require_user()
    rows = (
        ctx.db.query(AzkarReminder, Azkar)
        .outerjoin(Azkar, Azkar.id == AzkarReminder.azkar_id)
        .filter(AzkarReminder.user_id == user.user_id)
        .order_by(AzkarReminder.reminder_time.asc(), AzkarReminder.id.asc())
        .all()
    )
    data = []
    for reminder, azkar in rows:
        item = row_to_dict(reminder)
        item["azkar"] = (
            {
                "id": azkar.id,
                "title_arabic": azkar.title_arabic,
                "title_english": azkar.title_english,
                "type": azkar.type,
                "repetition_count": azkar.repetition_count,
            }
            if azkar is not None
            else None
        )
        data.append(item)
    return {"data": data}


def _reminder_exists(db: Session, user: UserContext, payload: AzkarReminderCreate) -> bool:
    existing = (
        db.query(AzkarReminder.id)
        .filter(
            AzkarReminder.user_id == user.user_id,
            AzkarReminder.azkar_id == payload.azkar_id,
            AzkarReminder.reminder_time == payload.reminder_time,
        )
        .first()
    )
    return existing is not None


def create_reminder(db: Session, user: UserContext, payload: AzkarReminderCreate) -> dict[str, Any]:
    if db.get(Azkar, payload.azkar_id) is None:
        raise HTTPException(status_code=400, detail="Invalid azkar ID")
    if _reminder_exists(db, user, payload):
        raise HTTPException(status_code=409, detail="Reminder already exists for this time")
    row = AzkarReminder(
        user_id=user.user_id,
        azkar_id=payload.azkar_id,
        reminder_time=payload.reminder_time,
        days_of_week=list(payload.days_of_week),
        is_enabled=payload.is_enabled,
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Reminder already exists for this time")
    db.refresh(row)
    return row_to_dict(row)


def _create_reminder(ctx: ActionContext) -> dict[str, Any]:
    payload = validate_params(AzkarReminderCreate, ctx.body or {})
    return {"data": create_reminder(ctx.db, ctx.require_user(), payload)}


def delete_reminder(db: Session, user: UserContext, reminder_id: uuid.UUID) -> None:
    row = db.query(AzkarReminder).filter(AzkarReminder.id == reminder_id, AzkarReminder.user_id == user.user_id).first()
    if row is None:
        raise HTTPException(status_code=404, detail="Reminder not found")
    db.delete(row)
    db.commit()


AZKAR_READ_ACTIONS = {
    "azkar": Action(_list_azkar, requires_user=False),
    "types": Action(_list_types, requires_user=False),
    "reminders": Action(_list_reminders),
}

AZKAR_WRITE_ACTIONS = {
    "reminder": Action(_create_reminder),
}
