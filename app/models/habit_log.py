import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Integer, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base
from app.models.common import CreatedAtMixin, UUIDMixin, UserOwnedMixin, utcnow


class HabitLog(Base, UUIDMixin, UserOwnedMixin, CreatedAtMixin):
    __tablename__ = "habit_logs"
    __table_args__ = (UniqueConstraint("habit_id", "log_date", name="uq_habit_logs_habit_day"),)

    habit_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), index=True, nullable=False)
    log_date: Mapped[date] = mapped_column(Date, index=True, nullable=False)
    logged_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    value: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    mood_rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
