"""initial schema

Revision ID: 20250301_0001
Revises:
Create Date: 2025-03-01
"""

from alembic import op
import sqlalchemy as sa


revision = "20250301_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="Employee"),
        sa.Column("department", sa.String(length=100)),
        sa.Column("phone", sa.String(length=20)),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    # reported_by_id / assigned_to_id are weak user references: no foreign key
    op.create_table(
        "issues",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=20), nullable=False),
        sa.Column("priority", sa.String(length=20), nullable=False, server_default="Medium"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Pending"),
        sa.Column("reported_by_id", sa.String(length=32), nullable=False),
        sa.Column("assigned_to_id", sa.String(length=32)),
        sa.Column("location", sa.String(length=200), nullable=False),
        sa.Column("resolution_notes", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_issues_category", "issues", ["category"])
    op.create_index("ix_issues_priority", "issues", ["priority"])
    op.create_index("ix_issues_status", "issues", ["status"])
    op.create_index("ix_issues_reported_by_id", "issues", ["reported_by_id"])
    op.create_index("ix_issues_assigned_to_id", "issues", ["assigned_to_id"])
    op.create_index("ix_issues_created_at", "issues", ["created_at"])

    op.create_table(
        "issue_comments",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column(
            "issue_id",
            sa.String(length=32),
            sa.ForeignKey("issues.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(length=32), nullable=False),
        sa.Column("text", sa.String(length=1000), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_issue_comments_issue_id", "issue_comments", ["issue_id"])
    op.create_index("ix_issue_comments_user_id", "issue_comments", ["user_id"])


def downgrade() -> None:
    op.drop_table("issue_comments")
    op.drop_table("issues")
    op.drop_table("users")
