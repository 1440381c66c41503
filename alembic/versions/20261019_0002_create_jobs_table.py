"""create jobs table

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 09:20:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from jobly.models import ExactDecimal


# revision identifiers, used by Alembic.
revision: str = "20261019_0002"
down_revision: Union[str, Sequence[str], None] = "20261019_0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "jobs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("salary", sa.Integer(), nullable=True),
        sa.Column("equity", ExactDecimal(), nullable=True),
        sa.Column(
            "company_handle",
            sa.String(length=25),
            sa.ForeignKey("companies.handle", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.CheckConstraint("salary >= 0", name="ck_jobs_salary"),
        sa.CheckConstraint(
            "CAST(equity AS NUMERIC) >= 0 AND CAST(equity AS NUMERIC) <= 1",
            name="ck_jobs_equity",
        ),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_jobs_title_id", "jobs", ["title", "id"])
    op.create_index("ix_jobs_company_handle", "jobs", ["company_handle"])
    op.create_index(
        "uq_jobs_posting",
        "jobs",
        [
            "title",
            sa.text("COALESCE(salary, -1)"),
            sa.text("COALESCE(equity, -1)"),
            "company_handle",
        ],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index("uq_jobs_posting", table_name="jobs")
    op.drop_index("ix_jobs_company_handle", table_name="jobs")
    op.drop_index("ix_jobs_title_id", table_name="jobs")
    op.drop_table("jobs")
