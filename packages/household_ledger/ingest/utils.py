"""Row-building helpers shared by the expense and income sheet adapters.

Both transaction sheets share one row pipeline and differ only in their
column layout and in how a missing polarity marker is resolved from the
amount sign. The adapters under :mod:`household_ledger.ingest.adapters`
supply those two pieces.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict, dataclass
from datetime import tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from ..models import BuildResult, RowWarning, SheetConfig, TransactionRecord, TransactionType
from .cells import (
    KST,
    format_raw_row,
    is_row_empty,
    parse_amount,
    parse_date,
    pick_cell,
    pick_text,
)
from .normalizers import normalize_type
from .workbook import RawRow, SheetReader, data_rows, read_sheet

type SignFallback = Callable[[Decimal], TransactionType | None]

_CENT = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class TransactionColumns:
    """0-based column positions of a transaction sheet."""

    type: int
    category: int
    date: int
    description: int
    amount: int
    user: int
    payment_method: int | None = None


class _RowSkipped(Exception):
    """Internal signal: the current row becomes a warning."""


def sample_of(row: RawRow, record: Any) -> dict[str, Any]:
    """Diagnostic sample: the raw cells plus the record's field view."""

    return {"raw": list(row), "mapped": asdict(record)}


def _optional_text(row: RawRow, index: int | None) -> str | None:
    if index is None:
        return None
    return pick_text(row, index) or None


def _build_record(
    row: RawRow,
    cols: TransactionColumns,
    sign_fallback: SignFallback,
    tz: tzinfo,
) -> TransactionRecord:
    raw_date = pick_cell(row, cols.date)
    when = parse_date(raw_date, tz=tz)
    if when is None:
        raise _RowSkipped(f"date parse failed: {raw_date}")

    raw_amount = pick_cell(row, cols.amount)
    amount = parse_amount(raw_amount)
    if amount is None:
        raise _RowSkipped(f"amount parse failed: {raw_amount}")
    # Stored at cent precision, so sub-cent values count as zero.
    amount = amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    if amount == 0:
        raise _RowSkipped("amount is zero")

    raw_type = pick_cell(row, cols.type)
    tx_type = normalize_type(raw_type) or sign_fallback(amount)
    if tx_type is None:
        raise _RowSkipped(f"type unresolved: {raw_type!r} with amount {amount}")

    category = pick_text(row, cols.category)
    if not category:
        raise _RowSkipped("category missing")

    return TransactionRecord(
        type=tx_type,
        amount=abs(amount),
        category_name=category,
        date=when.date(),
        description=_optional_text(row, cols.description),
        payment_method=_optional_text(row, cols.payment_method),
        user=_optional_text(row, cols.user),
    )


def build_transaction_sheet(
    config: SheetConfig,
    *,
    columns: TransactionColumns,
    sign_fallback: SignFallback,
    reader: SheetReader = read_sheet,
    tz: tzinfo = KST,
) -> BuildResult:
    """Read one transaction sheet into records and per-row warnings.

    Raises ``FileNotFoundError``/:class:`~.workbook.WorkbookError` before any
    row is looked at; every later problem is a warning on that row only.
    """

    sheet = reader(config.file_path, config.sheet_number)
    rows = data_rows(sheet, config.skip_rows)

    result = BuildResult(sheet_name=sheet.name)
    for row in rows:
        if is_row_empty(row):
            continue
        try:
            record = _build_record(row, columns, sign_fallback, tz)
        except _RowSkipped as exc:
            result.warnings.append(RowWarning(str(exc), format_raw_row(row)))
            continue
        result.records.append(record)
        if result.sample_record is None:
            result.sample_record = sample_of(row, record)
    return result


__all__ = [
    "SignFallback",
    "TransactionColumns",
    "sample_of",
    "build_transaction_sheet",
]
