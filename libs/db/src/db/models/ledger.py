from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    CHAR,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import expression as sa_expr


class Base(DeclarativeBase):
    pass


# ---------------------------
# Reference: categories
# ---------------------------


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    # Two levels only: a parent has parent_id IS NULL, a child points at a
    # top-level row. Depth is enforced by the ingest resolver, not the DB.
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id"), nullable=True
    )
    is_default: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=sa_expr.false()
    )
    icon: Mapped[str | None] = mapped_column(String, nullable=True)
    color: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("type in ('income','expense')", name="ck_categories_type"),
        # NULL never equals NULL in a plain unique constraint, so top-level rows
        # are folded onto a sentinel parent id for uniqueness purposes.
        Index(
            "uq_categories_name_type_parent",
            "name",
            "type",
            text("coalesce(parent_id, 0)"),
            unique=True,
        ),
    )


# ---------------------------
# Core: transactions
# ---------------------------


class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(String, nullable=False)
    # Always positive; the sign lives in ``type``.
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.id"), nullable=False
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    payment_method: Mapped[str | None] = mapped_column(String, nullable=True)
    # ``user`` is reserved in Postgres.
    user_name: Mapped[str | None] = mapped_column(String, nullable=True)
    source: Mapped[str] = mapped_column(String, nullable=False, server_default=text("'import'"))
    # Stable digest of the canonical fields; re-imports of the same sheet
    # collide here instead of duplicating rows.
    fingerprint_sha256: Mapped[str] = mapped_column(CHAR(64), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("type in ('income','expense')", name="ck_transactions_type"),
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        CheckConstraint("source in ('import','manual')", name="ck_transactions_source"),
    )


# ---------------------------
# Assets: institutions, members, instruments
# ---------------------------


class Institution(Base):
    __tablename__ = "institutions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    type: Mapped[str] = mapped_column(String, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=sa_expr.true()
    )

    __table_args__ = (CheckConstraint("type in ('은행','증권')", name="ck_institutions_type"),)


class FamilyMember(Base):
    __tablename__ = "family_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    color: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=sa_expr.true()
    )


class AssetMaster(Base):
    __tablename__ = "asset_masters"

    # Derived from (name, currency) for sheet imports; see
    # ``household_ledger.persistence.asset_master_id``.
    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    symbol: Mapped[str | None] = mapped_column(String, nullable=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    asset_class: Mapped[str] = mapped_column(String, nullable=False)
    sub_class: Mapped[str | None] = mapped_column(String, nullable=True)
    risk_level: Mapped[str] = mapped_column(String, nullable=False)
    currency: Mapped[str] = mapped_column(CHAR(3), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=sa_expr.true()
    )

    __table_args__ = (
        UniqueConstraint("symbol", "currency", name="uq_asset_masters_symbol_currency"),
        CheckConstraint("currency in ('KRW','USD')", name="ck_asset_masters_currency"),
    )


# ---------------------------
# Assets: accounts, holdings, value snapshots
# ---------------------------


class Account(Base):
    __tablename__ = "accounts"

    # Derived from (member_id, institution_id, name).
    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    member_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("family_members.id"), nullable=False
    )
    institution_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("institutions.id"), nullable=False
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    account_type: Mapped[str] = mapped_column(String, nullable=False)
    currency: Mapped[str] = mapped_column(CHAR(3), nullable=False)
    cash_balance: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, server_default=text("0")
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=sa_expr.true()
    )


class Holding(Base):
    __tablename__ = "holdings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("accounts.id"), nullable=False
    )
    asset_master_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("asset_masters.id"), nullable=False
    )
    quantity: Mapped[Decimal] = mapped_column(Numeric(24, 8), nullable=False)
    average_cost_original: Mapped[Decimal | None] = mapped_column(Numeric(24, 8), nullable=True)
    average_cost_krw: Mapped[Decimal] = mapped_column(Numeric(24, 8), nullable=False)
    data_source: Mapped[str] = mapped_column(
        String, nullable=False, server_default=text("'snapshot'")
    )

    __table_args__ = (
        UniqueConstraint("account_id", "asset_master_id", name="uq_holdings_account_asset"),
        CheckConstraint("data_source in ('snapshot','transaction')", name="ck_holdings_source"),
    )


class HoldingValueSnapshot(Base):
    __tablename__ = "holding_value_snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    holding_id: Mapped[int] = mapped_column(Integer, ForeignKey("holdings.id"), nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(24, 8), nullable=False)
    price_original: Mapped[Decimal] = mapped_column(Numeric(24, 8), nullable=False)
    exchange_rate: Mapped[Decimal | None] = mapped_column(Numeric(18, 4), nullable=True)
    price_krw: Mapped[Decimal] = mapped_column(Numeric(24, 8), nullable=False)
    total_value_krw: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    source: Mapped[str] = mapped_column(String, nullable=False, server_default=text("'import'"))

    __table_args__ = (
        UniqueConstraint("holding_id", "date", name="uq_holding_snapshots_holding_date"),
        CheckConstraint("source in ('manual','import','api')", name="ck_holding_snapshots_source"),
    )


__all__ = [
    "Base",
    "Category",
    "Transaction",
    "Institution",
    "FamilyMember",
    "AssetMaster",
    "Account",
    "Holding",
    "HoldingValueSnapshot",
]
