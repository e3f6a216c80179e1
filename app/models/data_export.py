from datetime import date, datetime

from sqlalchemy import JSON, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base
from app.models.common import TimestampMixin, UUIDMixin, UserOwnedMixin


class DataExport(Base, UUIDMixin, UserOwnedMixin, TimestampMixin):
    __tablename__ = "data_exports"

    status: Mapped[str] = mapped_column(String(20), default="pending", index=True, nullable=False)  # pending|processing|completed|failed
    export_format: Mapped[str] = mapped_column(String(10), default="json", nullable=False)
    modules: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    date_range_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    date_range_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    record_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    payload: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
