from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Any

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.salat_log import SalatLog

PRAYERS = ("fajr", "dhuhr", "asr", "maghrib", "isha")
PRAYER_ORDER = {name: index for index, name in enumerate(PRAYERS, start=1)}


def _today() -> date:
    return datetime.now(timezone.utc).date()


def daily_status(db: Session, *, user_id: uuid.UUID, target_date: date) -> list[dict[str, Any]]:
    logs = {
        row.prayer_name: row
        for row in db.query(SalatLog).filter(SalatLog.user_id == user_id, SalatLog.prayer_date == target_date).all()
    }
    out = []
    for prayer in PRAYERS:
        log = logs.get(prayer)
        out.append(
            {
                "prayer_name": prayer,
                "status": log.status if log is not None else "missed",
                "is_congregation": bool(log.is_congregation) if log is not None else False,
                "logged_at": log.logged_at if log is not None else None,
            }
        )
    return out


def streak_from_logs(logs: list[tuple[date, str, str]], *, end_date: date, days_back: int | None = None) -> dict[str, Any]:
    """Salat streak over (prayer_date, prayer_name, status) tuples.

    A day is complete when all five prayers are logged as ``completed``.
    """
    days_back = settings.STATS_LOOKBACK_DAYS if days_back is None else days_back
    window_start = end_date - timedelta(days=days_back)
    completed_by_day: dict[date, set[str]] = defaultdict(set)
    logged_days: set[date] = set()
    total_prayers = 0
    for prayer_date, prayer_name, status in logs:
        if not window_start <= prayer_date <= end_date:
            continue
        total_prayers += 1
        logged_days.add(prayer_date)
        if status == "completed":
            completed_by_day[prayer_date].add(prayer_name)

    def _complete(day: date) -> bool:
        return len(completed_by_day.get(day, ())) == len(PRAYERS)

    current = 0
    check = end_date
    while check >= window_start and _complete(check):
        current += 1
        check -= timedelta(days=1)

    longest = 0
    run = 0
    completed_days = 0
    previous = None
    for day in sorted(logged_days):
        if _complete(day):
            run = run + 1 if previous == day - timedelta(days=1) else 1
            previous = day
            completed_days += 1
            longest = max(longest, run)
        else:
            run = 0

    total_days = len(logged_days)
    return {
        "current_streak": current,
        "longest_streak": longest,
        "total_prayers": total_prayers,
        "completion_rate": round(completed_days / total_days * 100, 2) if total_days else 0.0,
    }


def salat_streak(db: Session, *, user_id: uuid.UUID, end_date: date | None = None) -> dict[str, Any]:
    end_date = end_date or _today()
    window_start = end_date - timedelta(days=settings.STATS_LOOKBACK_DAYS)
    rows = (
        db.query(SalatLog.prayer_date, SalatLog.prayer_name, SalatLog.status)
        .filter(SalatLog.user_id == user_id, SalatLog.prayer_date >= window_start, SalatLog.prayer_date <= end_date)
        .all()
    )
    return streak_from_logs([(r[0], r[1], r[2]) for r in rows], end_date=end_date)


def monthly_stats(db: Session, *, user_id: uuid.UUID, end_date: date | None = None, months: int = 6) -> list[dict[str, Any]]:
    end_date = end_date or _today()
    month_index = end_date.year * 12 + end_date.month - 1 - (months - 1)
    window_start = date(month_index // 12, month_index % 12 + 1, 1)
    rows = (
        db.query(SalatLog.prayer_date, SalatLog.status)
        .filter(SalatLog.user_id == user_id, SalatLog.prayer_date >= window_start, SalatLog.prayer_date <= end_date)
        .all()
    )
    buckets: dict[str, dict[str, int]] = defaultdict(lambda: {"completed": 0, "missed": 0, "qada": 0})
    for prayer_date, status in rows:
        key = prayer_date.strftime("%Y-%m")
        if status in buckets[key]:
            buckets[key][status] += 1
    return [{"month": key, **counts, "total": sum(counts.values())} for key, counts in sorted(buckets.items(), reverse=True)]
