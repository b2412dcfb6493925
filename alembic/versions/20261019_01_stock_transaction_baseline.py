"""Stock transaction ledger baseline

Revision ID: 20261019_01
Revises: None
Create Date: 2026-10-19
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261019_01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "stock_transaction",
        sa.Column("stock_transaction_id", sa.BigInteger(), sa.Identity(always=False), primary_key=True),
        sa.Column("ticker", sa.Text(), nullable=False),
        sa.Column("kind", sa.Text(), nullable=False),
        sa.Column("quantity", sa.BigInteger(), nullable=False),
        sa.Column("price", sa.Numeric(38, 10), nullable=False),
        sa.Column("transaction_at_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("quantity > 0", name="ck_stock_transaction_quantity_positive"),
        sa.CheckConstraint("kind IN ('Buy', 'Sell')", name="ck_stock_transaction_kind"),
    )
    op.create_index(
        "ix_stock_transaction_ticker_replay_order",
        "stock_transaction",
        ["ticker", "transaction_at_utc", "stock_transaction_id"],
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_stock_transaction_ticker_replay_order", table_name="stock_transaction")
    op.drop_table("stock_transaction")
