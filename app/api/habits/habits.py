from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.deps import UserContext, get_current_user
from app.db.session import get_db
from app.schemas.habits import HabitCheckin, HabitCreate, HabitQueryParams, HabitUpdate
from app.services.habits import archive_habit, check_in, create_habit, get_habit, list_habits, update_habit
from app.services.query_validation import raw_params, validate_params

router = APIRouter()


@router.get("")
def get_habits(
    request: Request,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    params = validate_params(HabitQueryParams, raw_params(request.query_params))
    return list_habits(db, user, params)


@router.post("", status_code=201)
def post_habit(
    payload: HabitCreate,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    return {"data": create_habit(db, user, payload)}


@router.get("/{habit_id}")
def get_single_habit(
    habit_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    return {"data": get_habit(db, user, habit_id)}


@router.patch("/{habit_id}")
def patch_habit(
    habit_id: uuid.UUID,
    payload: HabitUpdate,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    return {"data": update_habit(db, user, habit_id, payload)}


@router.delete("/{habit_id}")
def delete_habit(
    habit_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    archive_habit(db, user, habit_id)
    return {"status": "ok"}


@router.post("/{habit_id}/checkin")
def post_checkin(
    habit_id: uuid.UUID,
    payload: HabitCheckin,
    db: Session = Depends(get_db),
    user: UserContext = Depends(get_current_user),
):
    row, created = check_in(db, user, habit_id, payload)
    return JSONResponse(jsonable_encoder({"data": row}), status_code=201 if created else 200)
