"""Create the transactions table.

Revision ID: 0001
Revises:
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("signature", sa.String(128), nullable=False),
        sa.Column("wallet_address", sa.String(64), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("token_changes", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
        sa.Column("explorer_url", sa.Text(), nullable=False),
        sa.Column("from_address", sa.String(64), nullable=True),
        sa.Column("to_address", sa.String(64), nullable=True),
        sa.Column("value", sa.Float(), nullable=True),
        sa.Column("fee", sa.Float(), nullable=True),
        sa.Column("price_impact", sa.String(32), nullable=True),
        sa.Column("input_mint", sa.String(64), nullable=True),
        sa.Column("output_mint", sa.String(64), nullable=True),
        sa.Column("is_real_transaction", sa.Boolean(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.UniqueConstraint("signature"),
    )
    op.create_index(
        "ix_transactions_wallet_timestamp", "transactions", ["wallet_address", "timestamp"]
    )


def downgrade() -> None:
    op.drop_index("ix_transactions_wallet_timestamp", table_name="transactions")
    op.drop_table("transactions")
