from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.deps import UserContext
from app.models.salat_log import SalatLog
from app.schemas.faith import SalatLogIn, SalatQueryParams
from app.schemas.query import SortKey
from app.services.query_predicates import at_least, at_most, equals
from app.services.query_sources import SourceSpec, run_query
from app.services.salat_stats import daily_status, monthly_stats, salat_streak
from app.services.universal_query import SqlAlchemyAdapter, row_to_dict

SALAT_SOURCE = SourceSpec(
    source_id="salat_logs",
    model=SalatLog,
    bindings={
        "start_date": at_least("prayer_date"),
        "end_date": at_most("prayer_date"),
        "prayer_name": equals("prayer_name"),
    },
    default_sort=(SortKey(field="prayer_date", dir="desc"), SortKey(field="prayer_name")),
)


def list_salat(db: Session, user: UserContext, params: SalatQueryParams) -> dict[str, Any]:
    if params.date is not None:
        return {"data": daily_status(db, user_id=user.user_id, target_date=params.date)}

    adapter = SqlAlchemyAdapter.for_specs(db, SALAT_SOURCE)
    response = run_query(adapter, SALAT_SOURCE, params, scope={"user_id": user.user_id}).to_response()
    if params.include_stats:
        response["statistics"] = {
            "streak": salat_streak(db, user_id=user.user_id),
            "monthly": monthly_stats(db, user_id=user.user_id),
        }
    return response


def _find_log(db: Session, user: UserContext, prayer_name: str, prayer_date) -> SalatLog | None:
    return (
        db.query(SalatLog)
        .filter(
            SalatLog.user_id == user.user_id,
            SalatLog.prayer_name == prayer_name,
            SalatLog.prayer_date == prayer_date,
        )
        .first()
    )


def _apply_log(row: SalatLog, payload: SalatLogIn, now: datetime) -> None:
    row.status = payload.status
    row.is_congregation = payload.is_congregation
    row.notes = payload.notes
    row.logged_at = now


def log_prayer(db: Session, user: UserContext, payload: SalatLogIn) -> tuple[dict[str, Any], bool]:
    now = datetime.now(timezone.utc)
    prayer_date = payload.prayer_date or now.date()
    row = _find_log(db, user, payload.prayer_name, prayer_date)
    created = row is None
    if row is None:
        row = SalatLog(user_id=user.user_id, prayer_name=payload.prayer_name, prayer_date=prayer_date)
    _apply_log(row, payload, now)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request logged the same prayer first; update its row.
        db.rollback()
        row = _find_log(db, user, payload.prayer_name, prayer_date)
        if row is None:
            raise
        created = False
        _apply_log(row, payload, now)
        db.add(row)
        db.commit()
    db.refresh(row)
    return row_to_dict(row), created
