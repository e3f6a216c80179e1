from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.habit import Habit
from app.models.habit_log import HabitLog


def _today() -> date:
    return datetime.now(timezone.utc).date()


def streak_stats(logged_days: Iterable[date], *, end_date: date, cadence: str = "daily", days_back: int | None = None) -> dict[str, Any]:
    """Streaks over the window ``[end_date - days_back, end_date]``.

    The current streak only counts when ``end_date`` itself is logged.
    Streaks are tracked for daily habits; other cadences still report
    completions.
    """
    days_back = settings.STATS_LOOKBACK_DAYS if days_back is None else days_back
    window_start = end_date - timedelta(days=days_back)
    days = {d for d in logged_days if window_start <= d <= end_date}
    total_days = days_back + 1
    completed = len(days)

    current = 0
    longest = 0
    if cadence == "daily":
        check = end_date
        while check in days:
            current += 1
            check -= timedelta(days=1)
        run = 0
        check = window_start
        while check <= end_date:
            run = run + 1 if check in days else 0
            longest = max(longest, run)
            check += timedelta(days=1)

    return {
        "current_streak": current,
        "longest_streak": longest,
        "total_completions": completed,
        "completion_rate": round(completed / total_days * 100, 2) if total_days else 0.0,
    }


def habit_stats(db: Session, *, user_id: uuid.UUID, habit: dict[str, Any], today: date | None = None) -> dict[str, Any]:
    today = today or _today()
    habit_id = habit["id"]
    logged_days = [
        row[0]
        for row in db.query(HabitLog.log_date)
        .filter(HabitLog.habit_id == habit_id, HabitLog.user_id == user_id)
        .all()
    ]
    stats = streak_stats(logged_days, end_date=today, cadence=str(habit.get("cadence") or "daily"))
    today_value = (
        db.query(func.coalesce(func.sum(HabitLog.value), 0))
        .filter(HabitLog.habit_id == habit_id, HabitLog.user_id == user_id, HabitLog.log_date == today)
        .scalar()
    )
    stats["today_value"] = int(today_value or 0)
    stats["completed_today"] = stats["today_value"] >= int(habit.get("target_value") or 1)
    return stats


def enrich_with_stats(db: Session, *, user_id: uuid.UUID, rows: list[dict[str, Any]], today: date | None = None) -> list[dict[str, Any]]:
    return [{**row, "stats": habit_stats(db, user_id=user_id, habit=row, today=today)} for row in rows]


def owned_habit(db: Session, *, user_id: uuid.UUID, habit_id: uuid.UUID) -> Habit | None:
    return db.query(Habit).filter(Habit.id == habit_id, Habit.user_id == user_id).first()
