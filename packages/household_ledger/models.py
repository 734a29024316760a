"""Data models for the workbook ingestion pipeline.

Row builders produce the frozen records defined here; nothing in this module
touches the database. Closed vocabularies are ``StrEnum`` members whose values
are the labels stored in the ledger tables (and shown on the dashboard).
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

type TransactionType = Literal["income", "expense"]

SeedType = Literal["expense", "income", "asset", "all"]


class AccountType(StrEnum):
    DEPOSIT = "예금"
    INSTALLMENT_SAVINGS = "적금"
    HOUSING_SUBSCRIPTION = "청약"
    BROKERAGE = "종합"
    CMA = "CMA"
    PENSION_SAVINGS = "연금저축"
    IRP = "IRP"
    ISA = "ISA"
    CRYPTO = "코인"
    GOLD_SPOT = "금현물"


class RiskLevel(StrEnum):
    AGGRESSIVE = "위험자산"
    CONSERVATIVE = "안전자산"


class AssetClass(StrEnum):
    EQUITY = "주식"
    BOND = "채권"
    DEPOSIT = "예금"
    GOLD = "금"
    CRYPTO = "코인"


class SubClass(StrEnum):
    GROWTH = "성장"
    DIVIDEND = "배당"
    GOVERNMENT_BOND = "국채"
    CORPORATE_BOND = "회사채"


class Currency(StrEnum):
    KRW = "KRW"
    USD = "USD"


class InstitutionType(StrEnum):
    BANK = "은행"
    BROKERAGE = "증권"


# ---------------------------------------------------------------------------
# Built records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TransactionRecord:
    """One income/expense row. ``amount`` is always positive."""

    type: TransactionType
    amount: Decimal
    category_name: str
    date: date
    description: str | None = None
    payment_method: str | None = None
    user: str | None = None

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError("TransactionRecord.amount must be positive; sign belongs in type")


@dataclass(frozen=True, slots=True)
class AssetSnapshotRecord:
    """One holding valuation row from the asset-snapshot sheet.

    ``currency`` is derived from ``exchange_rate`` by the row builder and is
    never read from the sheet.
    """

    member_name: str
    institution_name: str
    account_type: AccountType
    account_name: str
    asset_name: str
    asset_class: AssetClass
    risk_level: RiskLevel
    date: date
    quantity: Decimal
    price_original: Decimal
    total_value_krw: Decimal
    currency: Currency
    sub_class: SubClass | None = None
    exchange_rate: Decimal | None = None

    @property
    def price_krw(self) -> Decimal:
        if self.exchange_rate is not None:
            return self.price_original * self.exchange_rate
        return self.price_original


@dataclass(frozen=True, slots=True)
class RowWarning:
    """A skipped row: why, plus the JSON-serialized raw cells."""

    message: str
    raw_row: str

    def __str__(self) -> str:
        return f"{self.message} | raw: {self.raw_row}"


@dataclass(frozen=True, slots=True)
class PredefinedCategory:
    """A ``child -> parent`` assignment read from the mapping region of a sheet."""

    child_name: str
    parent_name: str | None
    type: TransactionType


# ---------------------------------------------------------------------------
# Builder results
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class BuildResult:
    """Output of a transaction row builder (expense or income sheet)."""

    sheet_name: str
    records: list[TransactionRecord] = field(default_factory=list)
    warnings: list[RowWarning] = field(default_factory=list)
    sample_record: dict[str, Any] | None = None


@dataclass(slots=True)
class AssetBuildResult:
    """Output of the asset-snapshot row builder."""

    sheet_name: str
    records: list[AssetSnapshotRecord] = field(default_factory=list)
    warnings: list[RowWarning] = field(default_factory=list)
    sample_record: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Run statistics
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class SeedStats:
    """Per-entity tallies of rows created vs. found already present."""

    created: Counter[str] = field(default_factory=Counter)
    existing: Counter[str] = field(default_factory=Counter)

    def record(self, kind: str, created: bool) -> None:
        (self.created if created else self.existing)[kind] += 1

    def merge(self, other: SeedStats) -> None:
        self.created.update(other.created)
        self.existing.update(other.existing)

    def kinds(self) -> list[str]:
        return sorted(set(self.created) | set(self.existing))

    @property
    def total_created(self) -> int:
        return sum(self.created.values())


# ---------------------------------------------------------------------------
# Run configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SheetConfig:
    """Where a row builder reads from: file, 1-based sheet, leading rows to drop."""

    file_path: str
    sheet_number: int
    skip_rows: int = 3


class SeedOptions(BaseModel):
    """Validated options for one seed invocation (CLI flags merged with env)."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    file_path: str
    skip_rows: int = Field(default=3, ge=0)
    auto_approve: bool = False
    verbose: bool = False
    seed_type: SeedType = "all"

    @field_validator("file_path")
    @classmethod
    def _file_path_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("file_path must be provided (--file or SEED_XLSX_PATH)")
        return v

    def sheet(self, sheet_number: int) -> SheetConfig:
        return SheetConfig(
            file_path=self.file_path, sheet_number=sheet_number, skip_rows=self.skip_rows
        )


__all__ = [
    "TransactionType",
    "SeedType",
    "AccountType",
    "RiskLevel",
    "AssetClass",
    "SubClass",
    "Currency",
    "InstitutionType",
    "TransactionRecord",
    "AssetSnapshotRecord",
    "RowWarning",
    "PredefinedCategory",
    "BuildResult",
    "AssetBuildResult",
    "SeedStats",
    "SheetConfig",
    "SeedOptions",
]
