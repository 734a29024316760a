"""Workbook ingestion: cell parsers, normalizers, sheet readers and row builders."""

from .adapters.asset_sheet import ASSET_SHEET_NUMBER, build_asset_snapshots
from .adapters.expense_sheet import EXPENSE_SHEET_NUMBER, build_expense_records
from .adapters.income_sheet import INCOME_SHEET_NUMBER, build_income_records
from .cells import KST, parse_amount, parse_date
from .workbook import WorkbookError, load_category_mapping, read_sheet

__all__ = [
    "ASSET_SHEET_NUMBER",
    "EXPENSE_SHEET_NUMBER",
    "INCOME_SHEET_NUMBER",
    "KST",
    "WorkbookError",
    "build_asset_snapshots",
    "build_expense_records",
    "build_income_records",
    "load_category_mapping",
    "parse_amount",
    "parse_date",
    "read_sheet",
]
