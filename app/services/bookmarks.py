from __future__ import annotations

import uuid

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.deps import UserContext
from app.models.faith_bookmark import FaithBookmark
from app.schemas.faith import BookmarkCreate, BookmarkQueryParams
from app.schemas.query import PagedResult, SortKey
from app.services.faith_library import content_exists
from app.services.query_predicates import one_of
from app.services.query_sources import SourceSpec, run_query
from app.services.universal_query import SqlAlchemyAdapter, row_to_dict

BOOKMARKS_SOURCE = SourceSpec(
    source_id="faith_bookmarks",
    model=FaithBookmark,
    bindings={"bookmark_type": one_of("bookmark_type")},
    default_sort=(SortKey(field="created_at", dir="desc"),),
)


def list_bookmarks(db: Session, user: UserContext, params: BookmarkQueryParams) -> PagedResult:
    adapter = SqlAlchemyAdapter.for_specs(db, BOOKMARKS_SOURCE)
    return run_query(adapter, BOOKMARKS_SOURCE, params, scope={"user_id": user.user_id})


def _find_bookmark(db: Session, user: UserContext, payload: BookmarkCreate) -> FaithBookmark | None:
    return (
        db.query(FaithBookmark)
        .filter(
            FaithBookmark.user_id == user.user_id,
            FaithBookmark.bookmark_type == payload.bookmark_type,
            FaithBookmark.reference_id == payload.reference_id,
        )
        .first()
    )


def _apply_bookmark(row: FaithBookmark, payload: BookmarkCreate) -> None:
    row.notes = payload.notes
    row.tags = list(payload.tags)


def upsert_bookmark(db: Session, user: UserContext, payload: BookmarkCreate) -> tuple[dict, bool]:
    if not content_exists(db, payload.bookmark_type, payload.reference_id):
        raise HTTPException(status_code=404, detail="Content not found")
    row = _find_bookmark(db, user, payload)
    created = row is None
    if row is None:
        row = FaithBookmark(user_id=user.user_id, bookmark_type=payload.bookmark_type, reference_id=payload.reference_id)
    _apply_bookmark(row, payload)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        row = _find_bookmark(db, user, payload)
        if row is None:
            raise
        created = False
        _apply_bookmark(row, payload)
        db.add(row)
        db.commit()
    db.refresh(row)
    return row_to_dict(row), created


def delete_bookmark(db: Session, user: UserContext, bookmark_id: uuid.UUID) -> None:
    row = db.query(FaithBookmark).filter(FaithBookmark.id == bookmark_id, FaithBookmark.user_id == user.user_id).first()
    if row is None:
        raise HTTPException(status_code=404, detail="Bookmark not found")
    db.delete(row)
    db.commit()
