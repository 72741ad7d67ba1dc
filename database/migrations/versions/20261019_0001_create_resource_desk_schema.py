"""create resource desk schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


ACTIVE_ENTRY_INDEXES = (
    ("uq_timetable_entries_active_faculty", "faculty_id"),
    ("uq_timetable_entries_active_classroom", "classroom_id"),
    ("uq_timetable_entries_active_section", "section_id"),
)


def upgrade() -> None:
    op.create_table(
        "departments",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_departments_code", "departments", ["code"], unique=True)

    op.create_table(
        "faculty",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("designation", sa.String(length=200), nullable=True),
        sa.Column("specialization", sa.String(length=200), nullable=True),
        sa.Column("department_id", sa.String(length=36), nullable=True),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_faculty_email", "faculty", ["email"], unique=True)
    op.create_index("ix_faculty_department_id", "faculty", ["department_id"], unique=False)

    op.create_table(
        "classrooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("building", sa.String(length=200), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("has_projector", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_ac", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_classrooms_name", "classrooms", ["name"], unique=True)

    op.create_table(
        "courses",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("credits", sa.Integer(), nullable=True),
        sa.Column("semester", sa.Integer(), nullable=True),
        sa.Column("department_id", sa.String(length=36), nullable=True),
        sa.Column("duration_hours", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_lab", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("duration_hours >= 1", name="ck_courses_duration_hours"),
    )
    op.create_index("ix_courses_code", "courses", ["code"], unique=True)
    op.create_index("ix_courses_department_id", "courses", ["department_id"], unique=False)

    op.create_table(
        "sections",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("section_letter", sa.String(length=5), nullable=False),
        sa.Column("department_id", sa.String(length=36), nullable=False),
        sa.Column("faculty_id", sa.String(length=36), nullable=True),
        sa.Column("max_students", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_sections_department_id", "sections", ["department_id"], unique=False)

    op.create_table(
        "time_slots",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("slot_number", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.CheckConstraint("slot_number >= 1", name="ck_time_slots_slot_number"),
    )
    op.create_index("ix_time_slots_slot_number", "time_slots", ["slot_number"], unique=True)

    op.create_table(
        "timetable_entries",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("section_id", sa.String(length=36), nullable=False),
        sa.Column("classroom_id", sa.String(length=36), nullable=True),
        sa.Column("faculty_id", sa.String(length=36), nullable=True),
        sa.Column("course_id", sa.String(length=36), nullable=True),
        sa.Column("time_slot_id", sa.String(length=36), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_timetable_entries_day"),
    )
    op.create_index("ix_timetable_entries_section_id", "timetable_entries", ["section_id"], unique=False)
    op.create_index("ix_timetable_entries_faculty_id", "timetable_entries", ["faculty_id"], unique=False)
    for name, column in ACTIVE_ENTRY_INDEXES:
        op.create_index(
            name,
            "timetable_entries",
            ["day_of_week", "time_slot_id", column],
            unique=True,
            postgresql_where=sa.text("is_active"),
            sqlite_where=sa.text("is_active = 1"),
        )

    op.create_table(
        "faculty_absences",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("faculty_id", sa.String(length=36), nullable=False),
        sa.Column("absence_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("substitute_faculty_id", sa.String(length=36), nullable=True),
        sa.Column("is_processed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("faculty_id", "absence_date", name="uq_faculty_absences_faculty_date"),
    )
    op.create_index("ix_faculty_absences_faculty_id", "faculty_absences", ["faculty_id"], unique=False)

    op.create_table(
        "reallocation_logs",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("original_entry_id", sa.String(length=36), nullable=True),
        sa.Column("original_faculty_id", sa.String(length=36), nullable=True),
        sa.Column("substitute_faculty_id", sa.String(length=36), nullable=True),
        sa.Column("original_classroom_id", sa.String(length=36), nullable=True),
        sa.Column("new_classroom_id", sa.String(length=36), nullable=True),
        sa.Column("reallocation_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_reallocation_logs_original_entry_id", "reallocation_logs", ["original_entry_id"], unique=False)
    op.create_index(
        "ix_reallocation_logs_substitute_faculty_id", "reallocation_logs", ["substitute_faculty_id"], unique=False
    )
    op.create_index("ix_reallocation_logs_reallocation_date", "reallocation_logs", ["reallocation_date"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_reallocation_logs_reallocation_date", table_name="reallocation_logs")
    op.drop_index("ix_reallocation_logs_substitute_faculty_id", table_name="reallocation_logs")
    op.drop_index("ix_reallocation_logs_original_entry_id", table_name="reallocation_logs")
    op.drop_table("reallocation_logs")
    op.drop_index("ix_faculty_absences_faculty_id", table_name="faculty_absences")
    op.drop_table("faculty_absences")
    for name, _ in reversed(ACTIVE_ENTRY_INDEXES):
        op.drop_index(name, table_name="timetable_entries")
    op.drop_index("ix_timetable_entries_faculty_id", table_name="timetable_entries")
    op.drop_index("ix_timetable_entries_section_id", table_name="timetable_entries")
    op.drop_table("timetable_entries")
    op.drop_index("ix_time_slots_slot_number", table_name="time_slots")
    op.drop_table("time_slots")
    op.drop_index("ix_sections_department_id", table_name="sections")
    op.drop_table("sections")
    op.drop_index("ix_courses_department_id", table_name="courses")
    op.drop_index("ix_courses_code", table_name="courses")
    op.drop_table("courses")
    op.drop_index("ix_classrooms_name", table_name="classrooms")
    op.drop_table("classrooms")
    op.drop_index("ix_faculty_department_id", table_name="faculty")
    op.drop_index("ix_faculty_email", table_name="faculty")
    op.drop_table("faculty")
    op.drop_index("ix_departments_code", table_name="departments")
    op.drop_table("departments")
