"""Create roles, users, taxis and trajectories tables

Revision ID: 001
Revises: None
Create Date: 2024-03-01 00:00:00.000000+00:00

What:  Initial schema plus the two seeded roles (ADMIN, USER).

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    roles = op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "role_name",
            sa.Enum("ADMIN", "USER", name="role_name", native_enum=False, length=20),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("role_name"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False, comment="argon2 hash"),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("account_non_expired", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("account_non_locked", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("credentials_non_expired", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "taxis",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("plate", sa.String(20), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_taxis_plate", "taxis", ["plate"])

    op.create_table(
        "trajectories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("taxi_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(["taxi_id"], ["taxis.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    # Serves both the per-day query and the latest-per-taxi aggregate
    op.create_index("idx_trajectories_taxi_date", "trajectories", ["taxi_id", "date"])

    op.bulk_insert(roles, [{"role_name": "ADMIN"}, {"role_name": "USER"}])


def downgrade() -> None:
    op.drop_index("idx_trajectories_taxi_date", table_name="trajectories")
    op.drop_table("trajectories")
    op.drop_index("ix_taxis_plate", table_name="taxis")
    op.drop_table("taxis")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_table("roles")
