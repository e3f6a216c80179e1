from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.deps import UserContext, get_current_user
from app.db.session import get_db
from app.schemas.faith import BookmarkCreate, BookmarkQueryParams
from app.services.bookmarks import delete_bookmark, list_bookmarks, upsert_bookmark
from app.services.query_validation import raw_params, validate_params

router = APIRouter()


@router.get("")
def get_bookmarks(
    request: Request,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    params = validate_params(BookmarkQueryParams, raw_params(request.query_params))
    return list_bookmarks(db, user, params).to_response()


@router.post("", status_code=201)
def create_bookmark(
    payload: BookmarkCreate,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    row, created = upsert_bookmark(db, user, payload)
    return JSONResponse(jsonable_encoder({"data": row}), status_code=201 if created else 200)


@router.delete("/{bookmark_id}")
def remove_bookmark(
    bookmark_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    delete_bookmark(db, user, bookmark_id)
    return {"status": "ok"}
