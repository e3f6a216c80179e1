from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import UserContext
from app.models.azkar_reminder import AzkarReminder
from app.models.data_export import DataExport
from app.models.faith_bookmark import FaithBookmark
from app.models.habit import Habit
from app.models.habit_log import HabitLog
from app.models.salat_log import SalatLog
from app.schemas.query import PagedResult, PageParams, SortKey
from app.schemas.settings import ExportHistoryParams, ExportRequestIn
from app.services.query_predicates import at_least, at_most, equals
from app.services.query_sources import SourceSpec, describe, run_query
from app.services.serialization import rows_to_csv, serialize_value
from app.services.universal_query import SqlAlchemyAdapter, row_to_dict

_LOG = logging.getLogger("app.exports")

STATUS_PENDING = "pending"
STATUS_PROCESSING = "processing"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"


class ExportWindow(PageParams):
    date_range_start: Optional[date] = None
    date_range_end: Optional[date] = None


def _module_source(source_id: str, model: type, date_field: str) -> SourceSpec:
    return SourceSpec(
        source_id=source_id,
        model=model,
        bindings={
            "date_range_start": at_least(date_field),
            "date_range_end": at_most(date_field),
        },
        default_sort=(SortKey(field=date_field),),
    )


EXPORT_SOURCES = {
    "habits": _module_source("habits", Habit, "created_at"),
    "habit_logs": _module_source("habit_logs", HabitLog, "log_date"),
    "salat_logs": _module_source("salat_logs", SalatLog, "prayer_date"),
    "bookmarks": _module_source("bookmarks", FaithBookmark, "created_at"),
    "azkar_reminders": _module_source("azkar_reminders", AzkarReminder, "created_at"),
}

EXPORTS_SOURCE = SourceSpec(
    source_id="data_exports",
    model=DataExport,
    bindings={"status": equals("status")},
    default_sort=(SortKey(field="created_at", dir="desc"),),
)

_SUMMARY_FIELDS = (
    "id",
    "status",
    "export_format",
    "modules",
    "date_range_start",
    "date_range_end",
    "record_count",
    "error",
    "attempts",
    "created_at",
    "completed_at",
)


def resolve_modules(modules: list[str]) -> list[str]:
    if not modules or "all" in modules:
        return list(EXPORT_SOURCES)
    return [name for name in EXPORT_SOURCES if name in set(modules)]


def export_summary(row: DataExport) -> dict[str, Any]:
    data = row_to_dict(row)
    return {key: data.get(key) for key in _SUMMARY_FIELDS}


def collect_rows(db: Session, *, user_id: uuid.UUID, modules: list[str], start: date | None, end: date | None) -> dict[str, list[dict[str, Any]]]:
    window = ExportWindow(date_range_start=start, date_range_end=end)
    out: dict[str, list[dict[str, Any]]] = {}
    for name in resolve_modules(modules):
        spec = EXPORT_SOURCES[name]
        adapter = SqlAlchemyAdapter.for_specs(db, spec)
        descriptor = describe(spec, window, scope={"user_id": user_id}, paginate=False)
        rows, _ = adapter.execute(descriptor, spec.source_id)
        out[name] = rows
    return out


def preview_export(db: Session, user: UserContext, payload: ExportRequestIn) -> dict[str, Any]:
    data = collect_rows(
        db,
        user_id=user.user_id,
        modules=list(payload.modules),
        start=payload.date_range_start,
        end=payload.date_range_end,
    )
    counts = {name: len(rows) for name, rows in data.items()}
    return {"modules": counts, "record_count": sum(counts.values()), "export_format": payload.export_format}


def create_export(db: Session, user: UserContext, payload: ExportRequestIn) -> DataExport:
    pending = (
        db.query(DataExport)
        .filter(DataExport.user_id == user.user_id, DataExport.status.in_([STATUS_PENDING, STATUS_PROCESSING]))
        .count()
    )
    if pending >= settings.EXPORT_MAX_PENDING_PER_USER:
        raise HTTPException(status_code=429, detail="Too many exports in progress")
    row = DataExport(
        user_id=user.user_id,
        status=STATUS_PENDING,
        export_format=payload.export_format,
        modules=resolve_modules(list(payload.modules)),
        date_range_start=payload.date_range_start,
        date_range_end=payload.date_range_end,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    _LOG.info("export %s requested modules=%s format=%s", row.id, ",".join(row.modules), row.export_format)
    return row


def export_history(db: Session, user: UserContext, params: ExportHistoryParams) -> PagedResult:
    adapter = SqlAlchemyAdapter.for_specs(db, EXPORTS_SOURCE)
    result = run_query(adapter, EXPORTS_SOURCE, params, scope={"user_id": user.user_id})
    return result.model_copy(update={"rows": [{key: row.get(key) for key in _SUMMARY_FIELDS} for row in result.rows]})


def owned_export_or_404(db: Session, user: UserContext, export_id: uuid.UUID) -> DataExport:
    row = db.query(DataExport).filter(DataExport.id == export_id, DataExport.user_id == user.user_id).first()
    if row is None:
        raise HTTPException(status_code=404, detail="Export not found")
    return row


def delete_export(db: Session, user: UserContext, export_id: uuid.UUID) -> None:
    row = owned_export_or_404(db, user, export_id)
    if row.status == STATUS_PROCESSING:
        raise HTTPException(status_code=409, detail="Export is being processed")
    db.delete(row)
    db.commit()


def _render(export_format: str, data: dict[str, list[dict[str, Any]]]) -> dict[str, Any]:
    if export_format == "csv":
        return {name: rows_to_csv(rows) for name, rows in data.items()}
    return {name: serialize_value(rows) for name, rows in data.items()}


def process_export(db: Session, export_id: uuid.UUID) -> dict[str, Any]:
    """Build the export payload for one request.

    Safe to run more than once for the same id: completed exports are left
    untouched and a redelivered task simply rebuilds the payload.
    """
    row = db.get(DataExport, export_id)
    if row is None:
        _LOG.warning("export %s not found", export_id)
        return {"export_id": str(export_id), "status": "missing"}
    if row.status == STATUS_COMPLETED:
        return {"export_id": str(export_id), "status": row.status, "record_count": int(row.record_count)}

    row.status = STATUS_PROCESSING
    row.attempts = int(row.attempts or 0) + 1
    row.error = None
    db.add(row)
    db.commit()

    try:
        data = collect_rows(
            db,
            user_id=row.user_id,
            modules=list(row.modules or []),
            start=row.date_range_start,
            end=row.date_range_end,
        )
        row.payload = _render(row.export_format, data)
        row.record_count = sum(len(rows) for rows in data.values())
        row.status = STATUS_COMPLETED
        row.completed_at = datetime.now(timezone.utc)
        db.add(row)
        db.commit()
    except Exception as exc:
        db.rollback()
        row = db.get(DataExport, export_id)
        if row is not None:
            row.status = STATUS_FAILED
            row.error = exc.__class__.__name__
            db.add(row)
            db.commit()
        _LOG.error("export %s failed: %s", export_id, exc)
        raise
    _LOG.info("export %s completed records=%s", export_id, row.record_count)
    return {"export_id": str(export_id), "status": row.status, "record_count": int(row.record_count)}


def stale_pending_exports(db: Session, *, older_than_minutes: int) -> list[uuid.UUID]:
    cutoff = datetime.now(timezone.utc) - timedelta(minutes=older_than_minutes)
    rows = (
        db.query(DataExport.id)
        .filter(DataExport.status == STATUS_PENDING, DataExport.created_at <= cutoff)
        .order_by(DataExport.created_at.asc())
        .all()
    )
    return [row[0] for row in rows]
