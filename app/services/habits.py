from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.deps import UserContext
from app.models.habit import Habit
from app.models.habit_log import HabitLog
from app.schemas.habits import HabitCheckin, HabitCreate, HabitQueryParams, HabitUpdate
from app.schemas.query import SortKey
from app.services.habit_stats import enrich_with_stats, habit_stats, owned_habit
from app.services.query_predicates import equals, substring
from app.services.query_sources import SourceSpec, run_query
from app.services.universal_query import SqlAlchemyAdapter, row_to_dict

HABITS_SOURCE = SourceSpec(
    source_id="habits",
    model=Habit,
    bindings={
        "is_active": equals("is_active"),
        "cadence": equals("cadence"),
        "search": substring("title", "description"),
    },
    default_sort=(SortKey(field="created_at", dir="desc"),),
)


def _habit_or_404(db: Session, user: UserContext, habit_id: uuid.UUID) -> Habit:
    row = owned_habit(db, user_id=user.user_id, habit_id=habit_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    return row


def list_habits(db: Session, user: UserContext, params: HabitQueryParams) -> dict[str, Any]:
    adapter = SqlAlchemyAdapter.for_specs(db, HABITS_SOURCE)
    result = run_query(adapter, HABITS_SOURCE, params, scope={"user_id": user.user_id})
    if params.include_stats:
        result = result.model_copy(update={"rows": enrich_with_stats(db, user_id=user.user_id, rows=result.rows)})
    return result.to_response()


def create_habit(db: Session, user: UserContext, payload: HabitCreate) -> dict[str, Any]:
    row = Habit(user_id=user.user_id, **payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row_to_dict(row)


def get_habit(db: Session, user: UserContext, habit_id: uuid.UUID) -> dict[str, Any]:
    item = row_to_dict(_habit_or_404(db, user, habit_id))
    item["stats"] = habit_stats(db, user_id=user.user_id, habit=item)
    return item


def update_habit(db: Session, user: UserContext, habit_id: uuid.UUID, payload: HabitUpdate) -> dict[str, Any]:
    row = _habit_or_404(db, user, habit_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key in {"title", "cadence", "target_value", "color", "is_active"}:
            continue
        setattr(row, key, value)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row_to_dict(row)


def archive_habit(db: Session, user: UserContext, habit_id: uuid.UUID) -> None:
    row = _habit_or_404(db, user, habit_id)
    row.is_active = False
    db.add(row)
    db.commit()


def _find_checkin(db: Session, habit_id: uuid.UUID, log_date) -> HabitLog | None:
    return db.query(HabitLog).filter(HabitLog.habit_id == habit_id, HabitLog.log_date == log_date).first()


def _apply_checkin(row: HabitLog, payload: HabitCheckin, now: datetime) -> None:
    row.value = int(row.value or 0) + payload.value
    if payload.notes is not None:
        row.notes = payload.notes
    if payload.mood_rating is not None:
        row.mood_rating = payload.mood_rating
    row.logged_at = now


def check_in(db: Session, user: UserContext, habit_id: uuid.UUID, payload: HabitCheckin) -> tuple[dict[str, Any], bool]:
    habit = _habit_or_404(db, user, habit_id)
    if not habit.is_active:
        raise HTTPException(status_code=400, detail="Habit is archived")
    now = datetime.now(timezone.utc)
    log_date = payload.log_date or now.date()
    if log_date > now.date():
        raise HTTPException(status_code=400, detail="Cannot check in for a future date")
    row = _find_checkin(db, habit.id, log_date)
    created = row is None
    if row is None:
        row = HabitLog(user_id=user.user_id, habit_id=habit.id, log_date=log_date, value=0)
    _apply_checkin(row, payload, now)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        # Same-day check-in raced this one; add to the stored value instead.
        db.rollback()
        row = _find_checkin(db, habit.id, log_date)
        if row is None:
            raise
        created = False
        _apply_checkin(row, payload, now)
        db.add(row)
        db.commit()
    db.refresh(row)
    item = row_to_dict(row)
    habit_item = row_to_dict(habit)
    item["stats"] = habit_stats(db, user_id=user.user_id, habit=habit_item)
    return item, created
