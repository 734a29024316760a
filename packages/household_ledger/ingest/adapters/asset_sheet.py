"""Row builder for the asset-snapshot sheet.

Columns
-------
``A`` index (ignored), ``B`` account type (투자/연금), ``C`` member,
``D`` risk level, ``E`` asset class, ``F`` sub-class, ``G`` institution,
``H`` account name, ``I`` asset name, ``J`` as-of date, ``K`` quantity,
``L`` unit price, ``M`` foreign value (ignored), ``N`` exchange rate,
``O`` total value in KRW.

Cash-like rows (deposits, points, sweep accounts...) usually leave quantity
and price blank; they are recorded as one unit priced at the total value.
"""

from __future__ import annotations

from datetime import tzinfo
from decimal import Decimal

from ...models import AssetBuildResult, AssetSnapshotRecord, RowWarning, SheetConfig
from ..cells import (
    KST,
    format_raw_row,
    is_row_empty,
    parse_amount,
    parse_date,
    pick_cell,
    pick_text,
)
from ..normalizers import (
    infer_currency,
    is_cash_like_asset,
    normalize_account_type,
    normalize_asset_class,
    normalize_risk_level,
    normalize_sub_class,
)
from ..utils import sample_of
from ..workbook import RawRow, SheetReader, data_rows, read_sheet

ASSET_SHEET_NUMBER = 7

COL_ACCOUNT_TYPE = 1
COL_MEMBER = 2
COL_RISK_LEVEL = 3
COL_ASSET_CLASS = 4
COL_SUB_CLASS = 5
COL_INSTITUTION = 6
COL_ACCOUNT_NAME = 7
COL_ASSET_NAME = 8
COL_DATE = 9
COL_QUANTITY = 10
COL_PRICE = 11
COL_EXCHANGE_RATE = 13
COL_TOTAL_KRW = 14

# (column, warning) for text cells a snapshot cannot do without
_REQUIRED_TEXT = (
    (COL_MEMBER, "member name missing"),
    (COL_INSTITUTION, "institution name missing"),
    (COL_ACCOUNT_NAME, "account name missing"),
    (COL_ASSET_NAME, "asset name missing"),
)


def _build_snapshot(row: RawRow, tz: tzinfo) -> AssetSnapshotRecord | str:
    """Return the record, or the warning message explaining the skip."""

    for col, message in _REQUIRED_TEXT:
        if not pick_text(row, col):
            return message
    asset_name = pick_text(row, COL_ASSET_NAME)
    account_name = pick_text(row, COL_ACCOUNT_NAME)

    raw_date = pick_cell(row, COL_DATE)
    when = parse_date(raw_date, tz=tz)
    if when is None:
        return f"date parse failed: {raw_date}"

    raw_total = pick_cell(row, COL_TOTAL_KRW)
    total = parse_amount(raw_total)
    if total is None:
        return f"total value parse failed: {raw_total}"

    # A zero rate carries no conversion; treat it as absent.
    rate = parse_amount(pick_cell(row, COL_EXCHANGE_RATE)) or None

    raw_quantity = pick_cell(row, COL_QUANTITY)
    raw_price = pick_cell(row, COL_PRICE)
    quantity = parse_amount(raw_quantity)
    price = parse_amount(raw_price)
    if is_cash_like_asset(asset_name) and (quantity is None or price is None):
        quantity = Decimal(1)
        price = total
    if quantity is None:
        return f"quantity parse failed: {raw_quantity}"
    if price is None:
        return f"price parse failed: {raw_price}"

    if total < 0 or quantity < 0 or price < 0:
        return "negative value in quantity/price/total"

    return AssetSnapshotRecord(
        member_name=pick_text(row, COL_MEMBER),
        institution_name=pick_text(row, COL_INSTITUTION),
        account_type=normalize_account_type(pick_text(row, COL_ACCOUNT_TYPE), account_name),
        account_name=account_name,
        asset_name=asset_name,
        asset_class=normalize_asset_class(pick_text(row, COL_ASSET_CLASS)),
        sub_class=normalize_sub_class(pick_text(row, COL_SUB_CLASS)),
        risk_level=normalize_risk_level(pick_text(row, COL_RISK_LEVEL)),
        date=when.date(),
        quantity=quantity,
        price_original=price,
        exchange_rate=rate,
        total_value_krw=total,
        currency=infer_currency(rate),
    )


def build_asset_snapshots(
    config: SheetConfig,
    *,
    reader: SheetReader = read_sheet,
    tz: tzinfo = KST,
) -> AssetBuildResult:
    """Read the asset-snapshot sheet into records and per-row warnings."""

    sheet = reader(config.file_path, config.sheet_number)
    rows = data_rows(sheet, config.skip_rows)

    result = AssetBuildResult(sheet_name=sheet.name)
    for row in rows:
        if is_row_empty(row):
            continue
        built = _build_snapshot(row, tz)
        if isinstance(built, str):
            result.warnings.append(RowWarning(built, format_raw_row(row)))
            continue
        result.records.append(built)
        if result.sample_record is None:
            result.sample_record = sample_of(row, built)
    return result


__all__ = ["ASSET_SHEET_NUMBER", "build_asset_snapshots"]
