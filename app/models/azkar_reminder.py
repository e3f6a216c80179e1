import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base
from app.models.common import TimestampMixin, UUIDMixin, UserOwnedMixin


class AzkarReminder(Base, UUIDMixin, UserOwnedMixin, TimestampMixin):
    __tablename__ = "azkar_reminders"
    __table_args__ = (UniqueConstraint("user_id", "azkar_id", "reminder_time", name="uq_azkar_reminders_slot"),)

    azkar_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), index=True, nullable=False)
    reminder_time: Mapped[str] = mapped_column(String(5), nullable=False)  # HH:MM
    days_of_week: Mapped[list] = mapped_column(JSON, default=lambda: [1, 2, 3, 4, 5, 6, 7], nullable=False)
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
