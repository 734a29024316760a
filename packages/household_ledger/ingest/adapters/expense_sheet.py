"""Row builder for the expense sheet.

Columns (after the leading header rows)
---------------------------------------
``A`` type (수입/지출), ``B`` category, ``C`` date, ``D`` description,
``E`` amount, ``F`` payment method, ``G`` user.

Rows without a recognizable type marker are accepted as expenses only when
the amount is negative; the stored amount is its absolute value. A positive
unmarked amount is ambiguous on this sheet and becomes a warning.
"""

from __future__ import annotations

from datetime import tzinfo
from decimal import Decimal

from ...models import BuildResult, SheetConfig, TransactionType
from ..cells import KST
from ..utils import TransactionColumns, build_transaction_sheet
from ..workbook import MappingRegion, SheetReader, read_sheet

EXPENSE_SHEET_NUMBER = 4

# Parent assignments for expense categories live beside the data, L4:M31.
EXPENSE_CATEGORY_MAPPING = MappingRegion(
    sheet_number=4,
    start_row=4,
    end_row=31,
    child_column="L",
    parent_column="M",
    type="expense",
)

EXPENSE_COLUMNS = TransactionColumns(
    type=0,
    category=1,
    date=2,
    description=3,
    amount=4,
    payment_method=5,
    user=6,
)


def expense_sign_fallback(amount: Decimal) -> TransactionType | None:
    return "expense" if amount < 0 else None


def build_expense_records(
    config: SheetConfig,
    *,
    reader: SheetReader = read_sheet,
    tz: tzinfo = KST,
) -> BuildResult:
    return build_transaction_sheet(
        config,
        columns=EXPENSE_COLUMNS,
        sign_fallback=expense_sign_fallback,
        reader=reader,
        tz=tz,
    )


__all__ = [
    "EXPENSE_SHEET_NUMBER",
    "EXPENSE_COLUMNS",
    "EXPENSE_CATEGORY_MAPPING",
    "expense_sign_fallback",
    "build_expense_records",
]
