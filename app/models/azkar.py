from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from app.db.session import Base
from app.models.common import UUIDMixin, CreatedAtMixin

class Azkar(Base, UUIDMixin, CreatedAtMixin):
    __tablename__ = "azkar"

    type: Mapped[str] = mapped_column(String(30), index=True, nullable=False)  # morning|evening|after_prayer|before_sleep|general
    title_english: Mapped[str] = mapped_column(String(255), nullable=False)
    title_arabic: Mapped[str | None] = mapped_column(String(255), nullable=True)
    text_arabic: Mapped[str] = mapped_column(Text, nullable=False)
    text_english: Mapped[str | None] = mapped_column(Text, nullable=True)
    repetition_count: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    reference: Mapped[str | None] = mapped_column(String(255), nullable=True)
