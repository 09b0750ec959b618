"""Initial schema — prices, base prices, profiles, index snapshots, markers.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ------------------------------------------------------------------ #
    # 1. MARKET DATA                                                       #
    # ------------------------------------------------------------------ #

    op.create_table(
        "prices",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("symbol", sa.Text, nullable=False),
        sa.Column("price", sa.Double, nullable=False),
        sa.Column("change", sa.Double, nullable=True),
        sa.Column("change_pct", sa.Double, nullable=True),
        sa.Column("market_cap", sa.Double, nullable=True),
        sa.Column("observed_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_prices_symbol_observed_at", "prices", ["symbol", "observed_at"])

    op.create_table(
        "base_prices",
        sa.Column("symbol", sa.Text, primary_key=True),
        sa.Column("price", sa.Double, nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "stock_profiles",
        sa.Column("symbol", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=True),
        sa.Column("exchange", sa.Text, nullable=True),
        sa.Column("industry", sa.Text, nullable=True),
        sa.Column("weburl", sa.Text, nullable=True),
        sa.Column("logo", sa.Text, nullable=True),
        sa.Column("country", sa.Text, nullable=True),
        sa.Column("market_cap", sa.Double, nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    # ------------------------------------------------------------------ #
    # 2. INDEX                                                             #
    # ------------------------------------------------------------------ #

    op.create_table(
        "index_snapshots",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("value", sa.Double, nullable=False),
        sa.Column("daily_change", sa.Double, nullable=True),
        sa.Column("daily_change_pct", sa.Double, nullable=True),
        sa.Column("taken_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_index_snapshots_taken_at", "index_snapshots", ["taken_at"], unique=True
    )

    op.create_table(
        "maintenance_markers",
        sa.Column("name", sa.Text, primary_key=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("maintenance_markers")
    op.drop_index("ix_index_snapshots_taken_at", table_name="index_snapshots")
    op.drop_table("index_snapshots")
    op.drop_table("stock_profiles")
    op.drop_table("base_prices")
    op.drop_index("ix_prices_symbol_observed_at", table_name="prices")
    op.drop_table("prices")
