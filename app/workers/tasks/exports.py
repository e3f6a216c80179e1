from __future__ import annotations

import uuid

from sqlalchemy.exc import OperationalError

from app.core.config import settings
from app.db.session import SessionLocal
from app.services.data_export import process_export, stale_pending_exports
from app.workers.celery_app import celery_app


@celery_app.task(
    name="app.workers.tasks.exports.process_data_export",
    autoretry_for=(OperationalError,),
    retry_backoff=True,
    max_retries=3,
)
def process_data_export(export_id: str):
    db = SessionLocal()
    try:
        return process_export(db, uuid.UUID(str(export_id)))
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@celery_app.task(name="app.workers.tasks.exports.requeue_pending_exports")
def requeue_pending_exports():
    db = SessionLocal()
    try:
        export_ids = stale_pending_exports(db, older_than_minutes=settings.EXPORT_REQUEUE_AFTER_MINUTES)
    finally:
        db.close()
    for export_id in export_ids:
        process_data_export.delay(str(export_id))
    return {"requeued": len(export_ids)}
