from __future__ import annotations

import uuid
from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from app.schemas.faith import HHMM_PATTERN
from app.schemas.query import PageParams

ExportFormat = Literal["json", "csv"]
ExportModule = Literal["all", "habits", "habit_logs", "salat_logs", "bookmarks", "azkar_reminders"]
ExportStatus = Literal["pending", "processing", "completed", "failed"]


class NotificationPreferencesUpdate(BaseModel):
    email_enabled: Optional[bool] = None
    push_enabled: Optional[bool] = None
    prayer_reminders: Optional[bool] = None
    azkar_reminders: Optional[bool] = None
    habit_reminders: Optional[bool] = None
    weekly_digest: Optional[bool] = None
    quiet_hours_start: Optional[str] = Field(default=None, pattern=HHMM_PATTERN)
    quiet_hours_end: Optional[str] = Field(default=None, pattern=HHMM_PATTERN)
    timezone: Optional[str] = Field(default=None, min_length=1, max_length=64)


class ExportRequestIn(BaseModel):
    export_format: ExportFormat = "json"
    modules: list[ExportModule] = Field(default_factory=lambda: ["all"])
    date_range_start: Optional[date] = None
    date_range_end: Optional[date] = None

    @model_validator(mode="after")
    def _check_range(self) -> "ExportRequestIn":
        if self.date_range_start and self.date_range_end and self.date_range_start > self.date_range_end:
            raise ValueError("date_range_start must not be after date_range_end")
        return self


class ExportHistoryParams(PageParams):
    status: Optional[ExportStatus] = None


class ExportStatusParams(BaseModel):
    id: uuid.UUID
