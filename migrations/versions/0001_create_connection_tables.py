"""create users, profiles and connections

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

user_role_enum = sa.Enum("student", "teacher", name="user_role_enum")
connection_status_enum = sa.Enum("pending", "accepted", "rejected", name="connection_status_enum")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("external_id", sa.String(32), nullable=False, unique=True),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("email", sa.String(64), nullable=False, unique=True),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_table(
        "teacher_profiles",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.String(32),
            sa.ForeignKey("users.external_id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("code", sa.String(16), nullable=True, unique=True),
        sa.Column("connected_students", sa.JSON(), nullable=False),
    )
    op.create_table(
        "student_profiles",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.String(32),
            sa.ForeignKey("users.external_id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("connected_teachers", sa.JSON(), nullable=False),
    )
    op.create_table(
        "connections",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column(
            "teacher_id", sa.String(32), sa.ForeignKey("users.external_id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column(
            "student_id", sa.String(32), sa.ForeignKey("users.external_id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("status", connection_status_enum, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("teacher_id", "student_id", name="uq_connections_teacher_student"),
    )
    op.create_index("ix_connections_teacher_id", "connections", ["teacher_id"])
    op.create_index("ix_connections_student_id", "connections", ["student_id"])


def downgrade() -> None:
    op.drop_index("ix_connections_student_id", table_name="connections")
    op.drop_index("ix_connections_teacher_id", table_name="connections")
    op.drop_table("connections")
    op.drop_table("student_profiles")
    op.drop_table("teacher_profiles")
    op.drop_table("users")
    connection_status_enum.drop(op.get_bind(), checkfirst=True)
    user_role_enum.drop(op.get_bind(), checkfirst=True)
