from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.deps import UserContext, get_current_user
from app.db.session import get_db
from app.schemas.faith import SalatLogIn, SalatQueryParams
from app.services.query_validation import raw_params, validate_params
from app.services.salat_logs import list_salat, log_prayer

router = APIRouter()


@router.get("")
def get_salat(
    request: Request,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    params = validate_params(SalatQueryParams, raw_params(request.query_params))
    return list_salat(db, user, params)


@router.post("")
def post_salat(
    payload: SalatLogIn,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    row, created = log_prayer(db, user, payload)
    body = {
        "data": row,
        "message": "Prayer logged successfully" if created else "Prayer log updated successfully",
    }
    return JSONResponse(jsonable_encoder(body), status_code=201 if created else 200)
