"""create attendance logs

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    attendance_status = sa.Enum(
        "Class is going",
        "Student and Teacher both are absent",
        "Students present but teacher absent",
        "Teacher present but students are absent",
        name="attendance_status",
    )

    op.create_table(
        "attendance_logs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("semester_id", sa.String(length=100), nullable=False),
        sa.Column("date", sa.String(length=10), nullable=False),
        sa.Column("time_slot", sa.String(length=50), nullable=False),
        sa.Column("room_number", sa.String(length=50), nullable=False),
        sa.Column("building_name", sa.String(length=200), nullable=False),
        sa.Column("course_code", sa.String(length=50), nullable=False),
        sa.Column("course_title", sa.String(length=200), nullable=False),
        sa.Column("section", sa.String(length=50), nullable=False),
        sa.Column("p_id", sa.String(length=50), nullable=False),
        sa.Column("status", attendance_status, nullable=False),
        sa.Column("teacher_id", sa.String(length=100), nullable=False),
        sa.Column("teacher_name", sa.String(length=200), nullable=False),
        sa.Column("teacher_designation", sa.String(length=100), nullable=False),
        sa.Column("teacher_mobile", sa.String(length=50), nullable=False),
        sa.Column("teacher_email", sa.String(length=255), nullable=False),
        sa.Column("remark", sa.Text(), nullable=True),
        sa.Column("makeup_date", sa.String(length=10), nullable=True),
        sa.Column("makeup_time_slot", sa.String(length=50), nullable=True),
        sa.Column("makeup_room_number", sa.String(length=50), nullable=True),
        sa.Column("makeup_completed", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint(
            "semester_id", "date", "time_slot", "room_number", "course_code", name="uq_attendance_log_class"
        ),
    )
    op.create_index("ix_attendance_logs_semester_id", "attendance_logs", ["semester_id"])


def downgrade() -> None:
    op.drop_index("ix_attendance_logs_semester_id", table_name="attendance_logs")
    op.drop_table("attendance_logs")
    sa.Enum(name="attendance_status").drop(op.get_bind(), checkfirst=True)
