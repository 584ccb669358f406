"""create routine tables

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


def upgrade() -> None:
    slot_type = sa.Enum("Theory", "Lab", name="slot_type")
    program_type = sa.Enum(
        "Undergraduate", "Postgraduate", "Doctoral", "Diploma", "Certificate", "Other", name="program_type"
    )
    semester_system = sa.Enum("Tri-Semester", "Bi-Semester", name="semester_system")
    course_type = sa.Enum(
        "Theory", "Lab", "Thesis", "Project", "Internship", "Viva", "Others", "N/A", name="course_type"
    )

    op.create_table(
        "default_time_slots",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("type", slot_type, nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "programs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("p_id", sa.String(length=50), nullable=False),
        sa.Column("short_name", sa.String(length=50), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("faculty", sa.String(length=200), nullable=False),
        sa.Column("type", program_type, nullable=False),
        sa.Column("semester_system", semester_system, nullable=False),
        sa.Column("active_days", sa.JSON(), nullable=False),
        sa.Column("program_specific_slots", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_programs_p_id", "programs", ["p_id"], unique=True)

    op.create_table(
        "room_types",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("type_name", sa.String(length=100), nullable=False, unique=True),
    )

    op.create_table(
        "rooms",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("room_number", sa.String(length=50), nullable=False),
        sa.Column("building_id", sa.String(length=36), nullable=False),
        sa.Column("floor_id", sa.String(length=36), nullable=False),
        sa.Column("category_id", sa.String(length=36), nullable=False),
        sa.Column("type_id", sa.String(length=36), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("semester_id", sa.String(length=100), nullable=True),
        sa.Column("assigned_to_pid", sa.String(length=50), nullable=True),
        sa.Column("shared_with_pids", sa.JSON(), nullable=False),
        sa.Column("room_specific_slots", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("semester_id", "room_number", name="uq_rooms_semester_room_number"),
    )
    op.create_index("ix_rooms_room_number", "rooms", ["room_number"])
    op.create_index("ix_rooms_semester_id", "rooms", ["semester_id"])

    op.create_table(
        "course_sections",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("section_id", sa.String(length=100), nullable=False),
        sa.Column("semester", sa.String(length=100), nullable=False),
        sa.Column("p_id", sa.String(length=50), nullable=False),
        sa.Column("course_code", sa.String(length=50), nullable=False),
        sa.Column("course_title", sa.String(length=200), nullable=False),
        sa.Column("section", sa.String(length=50), nullable=False),
        sa.Column("credit", sa.Float(), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("level_term", sa.String(length=20), nullable=False),
        sa.Column("course_type", course_type, nullable=False),
        sa.Column("weekly_class", sa.Integer(), nullable=True),
        sa.Column("student_count", sa.Integer(), nullable=False),
        sa.Column("class_taken", sa.Integer(), nullable=False),
        sa.Column("teacher_id", sa.String(length=100), nullable=False),
        sa.Column("teacher_name", sa.String(length=200), nullable=False),
        sa.Column("designation", sa.String(length=100), nullable=False),
        sa.Column("teacher_mobile", sa.String(length=50), nullable=False),
        sa.Column("teacher_email", sa.String(length=255), nullable=False),
        sa.Column("merged_with_section_id", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_course_sections_section_id", "course_sections", ["section_id"], unique=True)
    op.create_index("ix_course_sections_semester", "course_sections", ["semester"])
    op.create_index("ix_course_sections_p_id", "course_sections", ["p_id"])
    op.create_index("ix_course_sections_teacher_id", "course_sections", ["teacher_id"])

    op.create_table(
        "semester_configurations",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("target_semester", sa.String(length=100), nullable=False),
        sa.Column("source_semester", sa.String(length=100), nullable=False),
        sa.Column("type_configs", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_semester_configurations_target_semester", "semester_configurations", ["target_semester"], unique=True
    )

    op.create_table(
        "routine_versions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("semester_id", sa.String(length=100), nullable=False),
        sa.Column("label", sa.String(length=100), nullable=False),
        sa.Column("routine", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_routine_versions_semester_id", "routine_versions", ["semester_id"])

    op.create_table(
        "schedule_overrides",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("semester_id", sa.String(length=100), nullable=False),
        sa.Column("room_number", sa.String(length=50), nullable=False),
        sa.Column("slot_string", sa.String(length=50), nullable=False),
        sa.Column("date", sa.String(length=10), nullable=False),
        sa.Column("class_detail", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint(
            "semester_id", "room_number", "slot_string", "date", name="uq_schedule_override_cell"
        ),
    )
    op.create_index("ix_schedule_overrides_semester_id", "schedule_overrides", ["semester_id"])

    op.create_table(
        "schedule_logs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("semester_id", sa.String(length=100), nullable=False),
        sa.Column("day", sa.String(length=20), nullable=False),
        sa.Column("room_number", sa.String(length=50), nullable=False),
        sa.Column("slot_string", sa.String(length=50), nullable=False),
        sa.Column("is_override", sa.Boolean(), nullable=False),
        sa.Column("date", sa.String(length=10), nullable=True),
        sa.Column("actor_name", sa.String(length=200), nullable=True),
        sa.Column("from_class", sa.JSON(), nullable=True),
        sa.Column("to_class", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_schedule_logs_semester_id", "schedule_logs", ["semester_id"])


def downgrade() -> None:
    op.drop_index("ix_schedule_logs_semester_id", table_name="schedule_logs")
    op.drop_table("schedule_logs")
    op.drop_index("ix_schedule_overrides_semester_id", table_name="schedule_overrides")
    op.drop_table("schedule_overrides")
    op.drop_index("ix_routine_versions_semester_id", table_name="routine_versions")
    op.drop_table("routine_versions")
    op.drop_index("ix_semester_configurations_target_semester", table_name="semester_configurations")
    op.drop_table("semester_configurations")
    op.drop_index("ix_course_sections_teacher_id", table_name="course_sections")
    op.drop_index("ix_course_sections_p_id", table_name="course_sections")
    op.drop_index("ix_course_sections_semester", table_name="course_sections")
    op.drop_index("ix_course_sections_section_id", table_name="course_sections")
    op.drop_table("course_sections")
    op.drop_index("ix_rooms_semester_id", table_name="rooms")
    op.drop_index("ix_rooms_room_number", table_name="rooms")
    op.drop_table("rooms")
    op.drop_table("room_types")
    op.drop_index("ix_programs_p_id", table_name="programs")
    op.drop_table("programs")
    op.drop_table("default_time_slots")

    bind = op.get_bind()
    for enum_name in ("course_type", "semester_system", "program_type", "slot_type"):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
