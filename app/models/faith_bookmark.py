import uuid

from sqlalchemy import JSON, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base
from app.models.common import TimestampMixin, UUIDMixin, UserOwnedMixin


class FaithBookmark(Base, UUIDMixin, UserOwnedMixin, TimestampMixin):
    __tablename__ = "faith_bookmarks"
    __table_args__ = (UniqueConstraint("user_id", "bookmark_type", "reference_id", name="uq_faith_bookmarks_ref"),)

    bookmark_type: Mapped[str] = mapped_column(String(20), index=True, nullable=False)  # quran|hadith|dua|azkar
    reference_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
