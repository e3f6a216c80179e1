from sqlalchemy import JSON, Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base
from app.models.common import TimestampMixin, UUIDMixin, UserOwnedMixin


class Habit(Base, UUIDMixin, UserOwnedMixin, TimestampMixin):
    __tablename__ = "habits"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cadence: Mapped[str] = mapped_column(String(10), default="daily", index=True, nullable=False)  # daily|weekly|monthly|custom
    cadence_config: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    target_value: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    target_unit: Mapped[str] = mapped_column(String(40), default="times", nullable=False)
    color: Mapped[str] = mapped_column(String(7), default="#10B981", nullable=False)
    icon: Mapped[str] = mapped_column(String(16), default="✓", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True, nullable=False)
    reminders: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
