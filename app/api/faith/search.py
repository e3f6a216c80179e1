from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.faith import FaithSearchParams
from app.services.faith_library import search_library
from app.services.query_validation import raw_params, validate_params

router = APIRouter()


@router.get("")
def search_faith_content(request: Request, db: Session = Depends(get_db)):
    params = validate_params(FaithSearchParams, raw_params(request.query_params))
    return search_library(db, params).to_response()
