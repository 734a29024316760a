"""Workbook access: raw sheet matrices and the predefined category mapping.

The row builders never touch openpyxl directly; they take a ``reader``
callable with the signature of :func:`read_sheet`, which tests replace with
an in-memory matrix.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path
from typing import Any, NamedTuple, Protocol
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils import column_index_from_string
from openpyxl.utils.exceptions import InvalidFileException

from ..models import PredefinedCategory, TransactionType
from .cells import pick_text

type RawRow = tuple[Any, ...]


class WorkbookError(ValueError):
    """The workbook is readable but not in the expected shape."""


class Sheet(NamedTuple):
    name: str
    rows: list[RawRow]


class SheetReader(Protocol):
    def __call__(self, path: str | PathLike[str], sheet_number: int) -> Sheet: ...


class MappingRegion(NamedTuple):
    """Fixed cell block holding ``child -> parent`` category pairs."""

    sheet_number: int
    start_row: int
    end_row: int
    child_column: str
    parent_column: str
    type: TransactionType


def read_sheet(path: str | PathLike[str], sheet_number: int) -> Sheet:
    """Return every row of the 1-based ``sheet_number`` as tuples of cell values.

    Raises ``FileNotFoundError`` when ``path`` does not exist and
    :class:`WorkbookError` when the file is not an .xlsx workbook or the sheet
    index is out of range.
    """

    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Workbook not found: {p}")

    try:
        wb = load_workbook(p, read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile) as e:
        raise WorkbookError(f"Not a readable .xlsx workbook: {p}") from e
    try:
        count = len(wb.worksheets)
        if sheet_number < 1 or sheet_number > count:
            raise WorkbookError(
                f"Sheet index {sheet_number} out of range; {p.name} has {count} sheet(s)"
            )
        ws = wb.worksheets[sheet_number - 1]
        rows = [tuple(r) for r in ws.iter_rows(values_only=True)]
        return Sheet(name=ws.title, rows=rows)
    finally:
        wb.close()


def data_rows(sheet: Sheet, skip_rows: int) -> list[RawRow]:
    """Rows after the first ``skip_rows``; raises when none remain."""

    remaining = sheet.rows[skip_rows:]
    if not remaining:
        raise WorkbookError(
            f"Sheet '{sheet.name}' has no data rows after skipping {skip_rows} row(s)"
        )
    return remaining


def _column_index(letter: str) -> int:
    return column_index_from_string(letter.upper()) - 1


def load_category_mapping(
    path: str | PathLike[str],
    *,
    sheet_number: int,
    start_row: int,
    end_row: int,
    child_column: str,
    parent_column: str,
    type: TransactionType,
    reader: SheetReader = read_sheet,
) -> list[PredefinedCategory]:
    """Read ``child -> parent`` pairs from a fixed block of a sheet.

    ``start_row``/``end_row`` are 1-based and inclusive, as shown in the
    spreadsheet UI. Rows with a blank child are skipped; a blank parent
    yields a child that lives at the top level.
    """

    sheet = reader(path, sheet_number)
    child_idx = _column_index(child_column)
    parent_idx = _column_index(parent_column)

    out: list[PredefinedCategory] = []
    for row in sheet.rows[start_row - 1 : end_row]:
        child = pick_text(row, child_idx)
        if not child:
            continue
        parent = pick_text(row, parent_idx)
        out.append(PredefinedCategory(child_name=child, parent_name=parent or None, type=type))
    return out


__all__ = [
    "RawRow",
    "WorkbookError",
    "Sheet",
    "SheetReader",
    "MappingRegion",
    "read_sheet",
    "data_rows",
    "load_category_mapping",
]
