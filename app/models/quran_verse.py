from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from app.db.session import Base
from app.models.common import UUIDMixin, CreatedAtMixin

class QuranVerse(Base, UUIDMixin, CreatedAtMixin):
    __tablename__ = "quran_verses"
    __table_args__ = (UniqueConstraint("surah_number", "ayah_number", name="uq_quran_verses_surah_ayah"),)

    surah_number: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    ayah_number: Mapped[int] = mapped_column(Integer, nullable=False)
    juz_number: Mapped[int | None] = mapped_column(Integer, index=True, nullable=True)
    surah_name_english: Mapped[str] = mapped_column(String(120), nullable=False)
    surah_name_arabic: Mapped[str | None] = mapped_column(String(120), nullable=True)
    ayah_text_arabic: Mapped[str] = mapped_column(Text, nullable=False)
    ayah_text_english: Mapped[str | None] = mapped_column(Text, nullable=True)
    transliteration: Mapped[str | None] = mapped_column(Text, nullable=True)
