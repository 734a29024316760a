# ruff: noqa: I001
"""Ledger core tables: categories, transactions, and the asset side.

Revision ID: 0001_ledger_core
Revises: None
Create Date: 2026-10-19
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_ledger_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # categories (two levels: parent_id IS NULL for top-level rows)
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("parent_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=True),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("icon", sa.String(), nullable=True),
        sa.Column("color", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.CheckConstraint("type in ('income','expense')", name="ck_categories_type"),
    )
    op.create_index(
        "uq_categories_name_type_parent",
        "categories",
        ["name", "type", sa.text("coalesce(parent_id, 0)")],
        unique=True,
    )

    # transactions
    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("payment_method", sa.String(), nullable=True),
        sa.Column("user_name", sa.String(), nullable=True),
        sa.Column("source", sa.String(), nullable=False, server_default=sa.text("'import'")),
        sa.Column("fingerprint_sha256", sa.CHAR(64), nullable=False, unique=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.CheckConstraint("type in ('income','expense')", name="ck_transactions_type"),
        sa.CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        sa.CheckConstraint("source in ('import','manual')", name="ck_transactions_source"),
    )

    # institutions / family_members
    op.create_table(
        "institutions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False, unique=True),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.CheckConstraint("type in ('은행','증권')", name="ck_institutions_type"),
    )
    op.create_table(
        "family_members",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False, unique=True),
        sa.Column("color", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    # asset_masters (id derived from name + currency for sheet imports)
    op.create_table(
        "asset_masters",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("symbol", sa.String(), nullable=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("asset_class", sa.String(), nullable=False),
        sa.Column("sub_class", sa.String(), nullable=True),
        sa.Column("risk_level", sa.String(), nullable=False),
        sa.Column("currency", sa.CHAR(3), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint("symbol", "currency", name="uq_asset_masters_symbol_currency"),
        sa.CheckConstraint("currency in ('KRW','USD')", name="ck_asset_masters_currency"),
    )

    # accounts (id derived from member, institution and name)
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("member_id", sa.Integer(), sa.ForeignKey("family_members.id"), nullable=False),
        sa.Column(
            "institution_id", sa.Integer(), sa.ForeignKey("institutions.id"), nullable=False
        ),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("account_type", sa.String(), nullable=False),
        sa.Column("currency", sa.CHAR(3), nullable=False),
        sa.Column("cash_balance", sa.Numeric(18, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    # holdings
    op.create_table(
        "holdings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("account_id", sa.String(32), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column(
            "asset_master_id", sa.String(32), sa.ForeignKey("asset_masters.id"), nullable=False
        ),
        sa.Column("quantity", sa.Numeric(24, 8), nullable=False),
        sa.Column("average_cost_original", sa.Numeric(24, 8), nullable=True),
        sa.Column("average_cost_krw", sa.Numeric(24, 8), nullable=False),
        sa.Column(
            "data_source", sa.String(), nullable=False, server_default=sa.text("'snapshot'")
        ),
        sa.UniqueConstraint("account_id", "asset_master_id", name="uq_holdings_account_asset"),
        sa.CheckConstraint(
            "data_source in ('snapshot','transaction')", name="ck_holdings_source"
        ),
    )

    # holding_value_snapshots
    op.create_table(
        "holding_value_snapshots",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("holding_id", sa.Integer(), sa.ForeignKey("holdings.id"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("quantity", sa.Numeric(24, 8), nullable=False),
        sa.Column("price_original", sa.Numeric(24, 8), nullable=False),
        sa.Column("exchange_rate", sa.Numeric(18, 4), nullable=True),
        sa.Column("price_krw", sa.Numeric(24, 8), nullable=False),
        sa.Column("total_value_krw", sa.Numeric(18, 2), nullable=False),
        sa.Column("source", sa.String(), nullable=False, server_default=sa.text("'import'")),
        sa.UniqueConstraint("holding_id", "date", name="uq_holding_snapshots_holding_date"),
        sa.CheckConstraint(
            "source in ('manual','import','api')", name="ck_holding_snapshots_source"
        ),
    )


def downgrade() -> None:
    op.drop_table("holding_value_snapshots")
    op.drop_table("holdings")
    op.drop_table("accounts")
    op.drop_table("asset_masters")
    op.drop_table("family_members")
    op.drop_table("institutions")
    op.drop_table("transactions")
    op.drop_index("uq_categories_name_type_parent", table_name="categories")
    op.drop_table("categories")
