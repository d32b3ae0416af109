"""Create projects and project_team_members tables.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create projects and the team membership association table."""

    # Status and priority are stored as strings, matching the models' non-native enums
    op.create_table(
        "projects",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("priority", sa.String(20), nullable=False, server_default="MEDIUM"),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("budget", sa.Float, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_projects"),
        sa.CheckConstraint("budget > 0", name="ck_projects_budget_positive"),
    )
    op.create_index("idx_projects_status", "projects", ["status"])
    op.create_index("idx_projects_priority", "projects", ["priority"])
    op.create_index("idx_projects_dates", "projects", ["start_date", "end_date"])

    op.create_table(
        "project_team_members",
        sa.Column("project_id", sa.String(36), nullable=False),
        sa.Column("employee_id", sa.String(36), nullable=False),
        sa.PrimaryKeyConstraint("project_id", "employee_id", name="pk_project_team_members"),
        sa.ForeignKeyConstraint(
            ["project_id"],
            ["projects.id"],
            name="fk_project_team_members_project_id_projects",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["employee_id"],
            ["employees.id"],
            name="fk_project_team_members_employee_id_employees",
            ondelete="CASCADE",
        ),
    )


def downgrade() -> None:
    """Drop project_team_members and projects tables."""

    op.drop_table("project_team_members")

    op.drop_index("idx_projects_dates", table_name="projects")
    op.drop_index("idx_projects_priority", table_name="projects")
    op.drop_index("idx_projects_status", table_name="projects")
    op.drop_table("projects")
