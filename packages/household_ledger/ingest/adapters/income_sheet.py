"""Row builder for the income sheet.

Columns: ``A`` type, ``B`` category, ``C`` date, ``D`` description,
``E`` amount, ``F`` user. There is no payment-method column.

An unmarked positive amount is income.
"""

from __future__ import annotations

from datetime import tzinfo
from decimal import Decimal

from ...models import BuildResult, SheetConfig, TransactionType
from ..cells import KST
from ..utils import TransactionColumns, build_transaction_sheet
from ..workbook import MappingRegion, SheetReader, read_sheet

INCOME_SHEET_NUMBER = 5

INCOME_CATEGORY_MAPPING = MappingRegion(
    sheet_number=5,
    start_row=4,
    end_row=14,
    child_column="J",
    parent_column="K",
    type="income",
)

INCOME_COLUMNS = TransactionColumns(
    type=0,
    category=1,
    date=2,
    description=3,
    amount=4,
    user=5,
)


def income_sign_fallback(amount: Decimal) -> TransactionType | None:
    return "income" if amount > 0 else None


def build_income_records(
    config: SheetConfig,
    *,
    reader: SheetReader = read_sheet,
    tz: tzinfo = KST,
) -> BuildResult:
    return build_transaction_sheet(
        config,
        columns=INCOME_COLUMNS,
        sign_fallback=income_sign_fallback,
        reader=reader,
        tz=tz,
    )


__all__ = [
    "INCOME_SHEET_NUMBER",
    "INCOME_COLUMNS",
    "INCOME_CATEGORY_MAPPING",
    "income_sign_fallback",
    "build_income_records",
]
