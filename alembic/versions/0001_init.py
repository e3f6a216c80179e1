"""init
Revision ID: 0001_init
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def _id():
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True)


def _user_id():
    return sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False)


def _created_at():
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=True)


def _updated_at():
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True)


def upgrade():
    op.create_table(
        "quran_verses",
        _id(),
        _created_at(),
        sa.Column("surah_number", sa.Integer(), nullable=False),
        sa.Column("ayah_number", sa.Integer(), nullable=False),
        sa.Column("juz_number", sa.Integer(), nullable=True),
        sa.Column("surah_name_english", sa.String(length=120), nullable=False),
        sa.Column("surah_name_arabic", sa.String(length=120), nullable=True),
        sa.Column("ayah_text_arabic", sa.Text(), nullable=False),
        sa.Column("ayah_text_english", sa.Text(), nullable=True),
        sa.Column("transliteration", sa.Text(), nullable=True),
        sa.UniqueConstraint("surah_number", "ayah_number", name="uq_quran_verses_surah_ayah"),
    )
    op.create_index("ix_quran_verses_surah_number", "quran_verses", ["surah_number"])
    op.create_index("ix_quran_verses_juz_number", "quran_verses", ["juz_number"])

    op.create_table(
        "hadith",
        _id(),
        _created_at(),
        sa.Column("collection", sa.String(length=120), nullable=False),
        sa.Column("book_number", sa.Integer(), nullable=True),
        sa.Column("hadith_number", sa.Integer(), nullable=False),
        sa.Column("hadith_text_arabic", sa.Text(), nullable=False),
        sa.Column("hadith_text_english", sa.Text(), nullable=True),
        sa.Column("narrator", sa.String(length=255), nullable=True),
        sa.Column("grade", sa.String(length=20), nullable=True),
        sa.Column("reference", sa.String(length=255), nullable=True),
    )
    op.create_index("ix_hadith_collection", "hadith", ["collection"])
    op.create_index("ix_hadith_grade", "hadith", ["grade"])

    op.create_table(
        "duas",
        _id(),
        _created_at(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=120), nullable=False),
        sa.Column("dua_arabic", sa.Text(), nullable=False),
        sa.Column("dua_english", sa.Text(), nullable=True),
        sa.Column("transliteration", sa.Text(), nullable=True),
        sa.Column("occasion", sa.String(length=255), nullable=True),
        sa.Column("reference", sa.String(length=255), nullable=True),
    )
    op.create_index("ix_duas_category", "duas", ["category"])

    op.create_table(
        "azkar",
        _id(),
        _created_at(),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("title_english", sa.String(length=255), nullable=False),
        sa.Column("title_arabic", sa.String(length=255), nullable=True),
        sa.Column("text_arabic", sa.Text(), nullable=False),
        sa.Column("text_english", sa.Text(), nullable=True),
        sa.Column("repetition_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("reference", sa.String(length=255), nullable=True),
    )
    op.create_index("ix_azkar_type", "azkar", ["type"])

    op.create_table(
        "azkar_reminders",
        _id(),
        _user_id(),
        _created_at(),
        _updated_at(),
        sa.Column("azkar_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("reminder_time", sa.String(length=5), nullable=False),
        sa.Column("days_of_week", sa.JSON(), nullable=False),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("last_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("user_id", "azkar_id", "reminder_time", name="uq_azkar_reminders_slot"),
    )
    op.create_index("ix_azkar_reminders_user_id", "azkar_reminders", ["user_id"])
    op.create_index("ix_azkar_reminders_azkar_id", "azkar_reminders", ["azkar_id"])

    op.create_table(
        "faith_bookmarks",
        _id(),
        _user_id(),
        _created_at(),
        _updated_at(),
        sa.Column("bookmark_type", sa.String(length=20), nullable=False),
        sa.Column("reference_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.UniqueConstraint("user_id", "bookmark_type", "reference_id", name="uq_faith_bookmarks_ref"),
    )
    op.create_index("ix_faith_bookmarks_user_id", "faith_bookmarks", ["user_id"])
    op.create_index("ix_faith_bookmarks_bookmark_type", "faith_bookmarks", ["bookmark_type"])

    op.create_table(
        "salat_logs",
        _id(),
        _user_id(),
        _created_at(),
        _updated_at(),
        sa.Column("prayer_name", sa.String(length=10), nullable=False),
        sa.Column("prayer_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=10), nullable=False, server_default="completed"),
        sa.Column("is_congregation", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("logged_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "prayer_name", "prayer_date", name="uq_salat_logs_day_prayer"),
    )
    op.create_index("ix_salat_logs_user_id", "salat_logs", ["user_id"])
    op.create_index("ix_salat_logs_prayer_name", "salat_logs", ["prayer_name"])
    op.create_index("ix_salat_logs_prayer_date", "salat_logs", ["prayer_date"])
    op.create_index("ix_salat_logs_status", "salat_logs", ["status"])

    op.create_table(
        "habits",
        _id(),
        _user_id(),
        _created_at(),
        _updated_at(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("cadence", sa.String(length=10), nullable=False, server_default="daily"),
        sa.Column("cadence_config", sa.JSON(), nullable=False),
        sa.Column("target_value", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("target_unit", sa.String(length=40), nullable=False, server_default="times"),
        sa.Column("color", sa.String(length=7), nullable=False, server_default="#10B981"),
        sa.Column("icon", sa.String(length=16), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("reminders", sa.JSON(), nullable=False),
    )
    op.create_index("ix_habits_user_id", "habits", ["user_id"])
    op.create_index("ix_habits_cadence", "habits", ["cadence"])
    op.create_index("ix_habits_is_active", "habits", ["is_active"])

    op.create_table(
        "habit_logs",
        _id(),
        _user_id(),
        _created_at(),
        sa.Column("habit_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("log_date", sa.Date(), nullable=False),
        sa.Column("logged_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("value", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("mood_rating", sa.Integer(), nullable=True),
        sa.UniqueConstraint("habit_id", "log_date", name="uq_habit_logs_habit_day"),
    )
    op.create_index("ix_habit_logs_user_id", "habit_logs", ["user_id"])
    op.create_index("ix_habit_logs_habit_id", "habit_logs", ["habit_id"])
    op.create_index("ix_habit_logs_log_date", "habit_logs", ["log_date"])

    op.create_table(
        "notification_preferences",
        _id(),
        _user_id(),
        _created_at(),
        _updated_at(),
        sa.Column("email_enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("push_enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("prayer_reminders", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("azkar_reminders", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("habit_reminders", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("weekly_digest", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("quiet_hours_start", sa.String(length=5), nullable=True),
        sa.Column("quiet_hours_end", sa.String(length=5), nullable=True),
        sa.Column("timezone", sa.String(length=64), nullable=False, server_default="UTC"),
        sa.UniqueConstraint("user_id", name="uq_notification_preferences_user"),
    )
    op.create_index("ix_notification_preferences_user_id", "notification_preferences", ["user_id"])

    op.create_table(
        "data_exports",
        _id(),
        _user_id(),
        _created_at(),
        _updated_at(),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("export_format", sa.String(length=10), nullable=False, server_default="json"),
        sa.Column("modules", sa.JSON(), nullable=False),
        sa.Column("date_range_start", sa.Date(), nullable=True),
        sa.Column("date_range_end", sa.Date(), nullable=True),
        sa.Column("record_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("payload", sa.JSON(), nullable=True),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_data_exports_user_id", "data_exports", ["user_id"])
    op.create_index("ix_data_exports_status", "data_exports", ["status"])


def downgrade():
    for table in (
        "data_exports",
        "notification_preferences",
        "habit_logs",
        "habits",
        "salat_logs",
        "faith_bookmarks",
        "azkar_reminders",
        "azkar",
        "duas",
        "hadith",
        "quran_verses",
    ):
        op.drop_table(table)
