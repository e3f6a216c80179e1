from __future__ import annotations

from datetime import date
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.query import PageParams

Cadence = Literal["daily", "weekly", "monthly", "custom"]

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class HabitQueryParams(PageParams):
    is_active: Optional[bool] = None
    cadence: Optional[Cadence] = None
    search: Optional[str] = None
    include_stats: bool = False


class HabitCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    cadence: Cadence = "daily"
    cadence_config: dict[str, Any] = Field(default_factory=dict)
    target_value: int = Field(default=1, ge=1)
    target_unit: str = "times"
    color: str = Field(default="#10B981", pattern=COLOR_PATTERN)
    icon: str = "✓"
    reminders: list[Any] = Field(default_factory=list)


class HabitUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    cadence: Optional[Cadence] = None
    cadence_config: Optional[dict[str, Any]] = None
    target_value: Optional[int] = Field(default=None, ge=1)
    target_unit: Optional[str] = None
    color: Optional[str] = Field(default=None, pattern=COLOR_PATTERN)
    icon: Optional[str] = None
    is_active: Optional[bool] = None
    reminders: Optional[list[Any]] = None


class HabitCheckin(BaseModel):
    value: int = Field(default=1, ge=1)
    log_date: Optional[date] = None
    notes: Optional[str] = None
    mood_rating: Optional[int] = Field(default=None, ge=1, le=5)
