"""Free-text → closed-vocabulary normalizers for workbook cells.

Each normalizer is an ordered decision table of ``(markers, result)`` rules
plus a default. Input is trimmed and lower-cased, rules are tried top to
bottom, and the first rule with any marker contained in the input wins. The
order is part of the contract: ``"현금"`` contains ``"금"`` and therefore maps
to gold unless an earlier rule claims it, and ``"적금"`` is caught by the
deposit rule before the gold rule sees it.

All functions are total. The only ones that can answer ``None`` are
:func:`normalize_sub_class` (no sub-class) and :func:`normalize_type`
(polarity unknown; the row builder then falls back to the amount sign).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from ..models import (
    AccountType,
    AssetClass,
    Currency,
    InstitutionType,
    RiskLevel,
    SubClass,
    TransactionType,
)


@dataclass(frozen=True, slots=True)
class Rule[T]:
    markers: tuple[str, ...]
    result: T

    def matches(self, text: str) -> bool:
        return any(m in text for m in self.markers)


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()


def first_match[T](text: str, rules: Sequence[Rule[T]], default: T) -> T:
    """Return the result of the first rule matching ``text``, else ``default``."""

    for rule in rules:
        if rule.matches(text):
            return rule.result
    return default


# ---------------------------------------------------------------------------
# Decision tables
# ---------------------------------------------------------------------------

# Markers are compared against lower-cased input, so Latin markers are lower case.

# Account-name hints outrank the account-type column: an "IRP" account filed
# under 투자 is still an IRP.
ACCOUNT_NAME_RULES: tuple[Rule[AccountType], ...] = (
    Rule(("irp",), AccountType.IRP),
    Rule(("isa",), AccountType.ISA),
    Rule(("cma",), AccountType.CMA),
    Rule(("업비트",), AccountType.CRYPTO),
    Rule(("연금저축", "연금"), AccountType.PENSION_SAVINGS),
    Rule(("금현물",), AccountType.GOLD_SPOT),
    Rule(("환전",), AccountType.DEPOSIT),
)

ACCOUNT_TYPE_RULES: tuple[Rule[AccountType], ...] = (
    Rule(("연금",), AccountType.PENSION_SAVINGS),
    Rule(("투자",), AccountType.BROKERAGE),
)

RISK_LEVEL_RULES: tuple[Rule[RiskLevel], ...] = (
    Rule(("위험", "공격"), RiskLevel.AGGRESSIVE),
    Rule(("안전", "보수"), RiskLevel.CONSERVATIVE),
)

ASSET_CLASS_RULES: tuple[Rule[AssetClass], ...] = (
    Rule(("주식",), AssetClass.EQUITY),
    Rule(("예금", "정기", "적금"), AssetClass.DEPOSIT),
    Rule(("금",), AssetClass.GOLD),
    Rule(("채권",), AssetClass.BOND),
    Rule(("코인", "암호화폐", "가상화폐"), AssetClass.CRYPTO),
)

SUB_CLASS_RULES: tuple[Rule[SubClass | None], ...] = (
    Rule(("성장",), SubClass.GROWTH),
    Rule(("배당",), SubClass.DIVIDEND),
    Rule(("국채", "국고"), SubClass.GOVERNMENT_BOND),
    Rule(("회사", "기업"), SubClass.CORPORATE_BOND),
)

TRANSACTION_TYPE_RULES: tuple[Rule[TransactionType | None], ...] = (
    Rule(("수입", "income"), "income"),
    Rule(("지출", "expense"), "expense"),
)

INSTITUTION_TYPE_RULES: tuple[Rule[InstitutionType], ...] = (
    Rule(
        ("증권", "나무", "키움", "미래에셋", "nh투자", "삼성증권", "kb증권"),
        InstitutionType.BROKERAGE,
    ),
)

# Asset names that denote a cash balance rather than units at a price.
CASH_LIKE_MARKERS: tuple[str, ...] = (
    "예금",
    "청약",
    "포인트",
    "현금",
    "캐시",
    "자동운용",
    "RP",
    "MMF",
)


# ---------------------------------------------------------------------------
# Normalizers
# ---------------------------------------------------------------------------


def normalize_account_type(account_type_raw: Any, account_name: Any) -> AccountType:
    name_hint = first_match(_clean(account_name), ACCOUNT_NAME_RULES, None)
    if name_hint is not None:
        return name_hint
    return first_match(_clean(account_type_raw), ACCOUNT_TYPE_RULES, AccountType.BROKERAGE)


def normalize_risk_level(value: Any) -> RiskLevel:
    return first_match(_clean(value), RISK_LEVEL_RULES, RiskLevel.CONSERVATIVE)


def normalize_asset_class(value: Any) -> AssetClass:
    return first_match(_clean(value), ASSET_CLASS_RULES, AssetClass.EQUITY)


def normalize_sub_class(value: Any) -> SubClass | None:
    return first_match(_clean(value), SUB_CLASS_RULES, None)


def normalize_type(value: Any) -> TransactionType | None:
    """Map an explicit 수입/지출 (income/expense) marker; ``None`` when absent."""

    if not isinstance(value, str):
        return None
    return first_match(_clean(value), TRANSACTION_TYPE_RULES, None)


def infer_institution_type(name: Any) -> InstitutionType:
    return first_match(_clean(name), INSTITUTION_TYPE_RULES, InstitutionType.BANK)


def infer_currency(exchange_rate: Decimal | None) -> Currency:
    """USD when a conversion rate above 1 is present, else KRW."""

    if exchange_rate is not None and exchange_rate > 1:
        return Currency.USD
    return Currency.KRW


def is_cash_like_asset(asset_name: str) -> bool:
    # Case-sensitive on purpose: "RP" and "MMF" are tickers-in-names, and
    # lower-casing would let words like "corp" match.
    return any(marker in asset_name for marker in CASH_LIKE_MARKERS)


__all__ = [
    "Rule",
    "first_match",
    "ACCOUNT_NAME_RULES",
    "ACCOUNT_TYPE_RULES",
    "RISK_LEVEL_RULES",
    "ASSET_CLASS_RULES",
    "SUB_CLASS_RULES",
    "TRANSACTION_TYPE_RULES",
    "INSTITUTION_TYPE_RULES",
    "CASH_LIKE_MARKERS",
    "normalize_account_type",
    "normalize_risk_level",
    "normalize_asset_class",
    "normalize_sub_class",
    "normalize_type",
    "infer_institution_type",
    "infer_currency",
    "is_cash_like_asset",
]
