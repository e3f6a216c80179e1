from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from app.db.session import Base
from app.models.common import UUIDMixin, CreatedAtMixin

class Hadith(Base, UUIDMixin, CreatedAtMixin):
    __tablename__ = "hadith"

    collection: Mapped[str] = mapped_column(String(120), index=True, nullable=False)
    book_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    hadith_number: Mapped[int] = mapped_column(Integer, nullable=False)
    hadith_text_arabic: Mapped[str] = mapped_column(Text, nullable=False)
    hadith_text_english: Mapped[str | None] = mapped_column(Text, nullable=True)
    narrator: Mapped[str | None] = mapped_column(String(255), nullable=True)
    grade: Mapped[str | None] = mapped_column(String(20), index=True, nullable=True)  # sahih|hasan|daif
    reference: Mapped[str | None] = mapped_column(String(255), nullable=True)
