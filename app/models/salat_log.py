from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base
from app.models.common import TimestampMixin, UUIDMixin, UserOwnedMixin, utcnow


class SalatLog(Base, UUIDMixin, UserOwnedMixin, TimestampMixin):
    __tablename__ = "salat_logs"
    __table_args__ = (UniqueConstraint("user_id", "prayer_name", "prayer_date", name="uq_salat_logs_day_prayer"),)

    prayer_name: Mapped[str] = mapped_column(String(10), index=True, nullable=False)  # fajr|dhuhr|asr|maghrib|isha
    prayer_date: Mapped[date] = mapped_column(Date, index=True, nullable=False)
    status: Mapped[str] = mapped_column(String(10), default="completed", index=True, nullable=False)  # completed|missed|qada
    is_congregation: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    logged_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
