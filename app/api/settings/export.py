from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from kombu.exceptions import OperationalError as BrokerError
from sqlalchemy.orm import Session

from app.core.deps import UserContext, get_current_user
from app.db.session import get_db
from app.schemas.settings import ExportHistoryParams, ExportRequestIn, ExportStatusParams
from app.services.actions import Action, ActionContext, dispatch
from app.services.data_export import (
    create_export,
    delete_export,
    export_history,
    export_summary,
    owned_export_or_404,
    preview_export,
)
from app.services.query_validation import raw_params, validate_params
from app.workers.tasks.exports import process_data_export

router = APIRouter()
_LOG = logging.getLogger("app.exports")


def _history(ctx: ActionContext):
    params = validate_params(ExportHistoryParams, ctx.params)
    return export_history(ctx.db, ctx.require_user(), params).to_response()


def _status(ctx: ActionContext):
    params = validate_params(ExportStatusParams, ctx.params)
    row = owned_export_or_404(ctx.db, ctx.require_user(), params.id)
    return {"data": export_summary(row)}


def _download(ctx: ActionContext):
    params = validate_params(ExportStatusParams, ctx.params)
    row = owned_export_or_404(ctx.db, ctx.require_user(), params.id)
    if row.status != "completed":
        raise HTTPException(status_code=409, detail="Export is not ready")
    return {"data": {**export_summary(row), "payload": row.payload}}


def _request(ctx: ActionContext):
    payload = validate_params(ExportRequestIn, ctx.body)
    row = create_export(ctx.db, ctx.require_user(), payload)
    try:
        process_data_export.delay(str(row.id))
    except BrokerError as exc:
        # Row stays pending; requeue_pending_exports picks it up later.
        _LOG.error("export %s enqueue failed: %s", row.id, exc)
    return {"data": export_summary(row)}


def _preview(ctx: ActionContext):
    payload = validate_params(ExportRequestIn, ctx.body)
    return {"data": preview_export(ctx.db, ctx.require_user(), payload)}


EXPORT_READ_ACTIONS = {
    "history": Action(_history),
    "status": Action(_status),
    "download": Action(_download),
}

EXPORT_WRITE_ACTIONS = {
    "request": Action(_request),
    "preview": Action(_preview),
}


@router.get("")
def read_exports(
    request: Request,
    action: str | None = None,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    params = raw_params(request.query_params)
    params.pop("action", None)
    return dispatch(EXPORT_READ_ACTIONS, action, ActionContext(db=db, params=params, user=user), default="history")


@router.post("")
def write_exports(
    action: str | None = None,
    body: dict | None = Body(default=None),
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    return dispatch(EXPORT_WRITE_ACTIONS, action, ActionContext(db=db, user=user, body=body or {}))


@router.delete("/{export_id}")
def remove_export(
    export_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    delete_export(db, user, export_id)
    return {"status": "ok"}
