from __future__ import annotations

import uuid
import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.schemas.query import PageParams
from app.services.query_validation import split_csv

ContentType = Literal["quran", "hadith", "duas", "all"]
HadithGrade = Literal["sahih", "hasan", "daif"]
AzkarType = Literal["morning", "evening", "after_prayer", "before_sleep", "general"]
BookmarkType = Literal["quran", "hadith", "dua", "azkar"]
PrayerName = Literal["fajr", "dhuhr", "asr", "maghrib", "isha"]
PrayerStatus = Literal["completed", "missed", "qada"]

HHMM_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"


class FaithSearchParams(PageParams):
    content_type: ContentType = "all"
    search: Optional[str] = None
    surah_number: Optional[int] = Field(default=None, ge=1, le=114)
    juz_number: Optional[int] = Field(default=None, ge=1, le=30)
    collection: Optional[str] = None
    category: Optional[str] = None
    grade: Optional[HadithGrade] = None


class AzkarQueryParams(PageParams):
    type: Optional[AzkarType] = None
    search: Optional[str] = None


class AzkarReminderCreate(BaseModel):
    azkar_id: uuid.UUID
    reminder_time: str = Field(pattern=HHMM_PATTERN)
    days_of_week: list[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5, 6, 7])
    is_enabled: bool = True

    @field_validator("reminder_time")
    @classmethod
    def _zero_pad(cls, value: str) -> str:
        hours, minutes = value.split(":")
        return f"{int(hours):02d}:{minutes}"

    @field_validator("days_of_week")
    @classmethod
    def _days_in_week(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("at least one day is required")
        if any(day < 1 or day > 7 for day in value):
            raise ValueError("days must be between 1 and 7")
        return sorted(set(value))


class BookmarkCreate(BaseModel):
    bookmark_type: BookmarkType
    reference_id: uuid.UUID
    notes: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class BookmarkQueryParams(PageParams):
    bookmark_type: Optional[list[BookmarkType]] = None

    @field_validator("bookmark_type", mode="before")
    @classmethod
    def _split(cls, value):
        return split_csv(value)


class SalatQueryParams(PageParams):
    limit: int = 50
    date: Optional[dt.date] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    prayer_name: Optional[PrayerName] = None
    include_stats: bool = False

    @model_validator(mode="after")
    def _check_range(self) -> "SalatQueryParams":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class SalatLogIn(BaseModel):
    prayer_name: PrayerName
    prayer_date: Optional[dt.date] = None
    status: PrayerStatus = "completed"
    is_congregation: bool = False
    notes: Optional[str] = None
