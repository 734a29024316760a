"""Cell-level parsers for hand-maintained workbook exports.

Every parser here is total: unparseable input yields ``None`` and the calling
row builder turns that into a :class:`~household_ledger.models.RowWarning`.
Nothing in this module raises on bad cell content.

Dates are canonicalized to midnight of the source calendar day in an explicit
timezone (``KST``, UTC+09:00, unless the caller passes another), so a value
that reads as "2024-03-01" in the sheet is stored as 2024-03-01 no matter how
the process clock is configured.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Sequence
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from decimal import Decimal, InvalidOperation
from typing import Any

from openpyxl.utils.datetime import from_excel

KST = timezone(timedelta(hours=9), "KST")

# Cells that openpyxl hands back as datetimes can sit a hair before midnight
# (23:59:59.99x) because of float serial rounding; anything within this window
# of the next day is counted as the next day.
_MIDNIGHT_BUFFER = timedelta(hours=3)

_COMPACT_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
_YMD_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_KOREAN_YMD_RE = re.compile(r"^(\d{4})\s*년\s*(\d{1,2})\s*월\s*(\d{1,2})\s*일$")

# Fallback formats tried after the structured patterns, applied to the string
# with "." and "/" already folded into "-".
_FALLBACK_FORMATS = (
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%m-%d-%Y",
    "%m-%d-%y",
    "%d %b %Y",
    "%b %d %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)

# Serials below this are not plausible ledger dates (before 1900-01-01 + 60d
# Excel leap-year bug) and serials above it overflow ``datetime``.
_MIN_SERIAL = 61
_MAX_SERIAL = 2_958_465


def _calendar_instant(year: int, month: int, day: int, tz: tzinfo) -> datetime | None:
    try:
        return datetime.combine(date(year, month, day), time(0), tzinfo=tz)
    except ValueError:
        return None


def _from_datetime(value: datetime, tz: tzinfo) -> datetime | None:
    local = value.astimezone(tz) if value.tzinfo is not None else value
    shifted = local + _MIDNIGHT_BUFFER
    return _calendar_instant(shifted.year, shifted.month, shifted.day, tz)


def _from_number(value: int | float, tz: tzinfo) -> datetime | None:
    if not math.isfinite(value):
        return None
    # Integer-typed cells such as 20240301 are compact dates, not serials.
    if float(value).is_integer():
        m = _COMPACT_RE.match(str(int(value)))
        if m:
            return _calendar_instant(int(m[1]), int(m[2]), int(m[3]), tz)
    if not (_MIN_SERIAL <= value <= _MAX_SERIAL):
        return None
    try:
        converted = from_excel(value)
    except (ValueError, OverflowError):
        return None
    if isinstance(converted, datetime):
        return _from_datetime(converted, tz)
    return None


def _from_string(value: str, tz: tzinfo) -> datetime | None:
    s = value.strip()
    if not s:
        return None

    m = _COMPACT_RE.match(s)
    if m:
        return _calendar_instant(int(m[1]), int(m[2]), int(m[3]), tz)

    m = _KOREAN_YMD_RE.match(s)
    if m:
        return _calendar_instant(int(m[1]), int(m[2]), int(m[3]), tz)

    normalized = s.replace(".", "-").replace("/", "-")
    m = _YMD_RE.match(normalized)
    if m:
        return _calendar_instant(int(m[1]), int(m[2]), int(m[3]), tz)

    try:
        parsed = datetime.fromisoformat(s)
    except ValueError:
        pass
    else:
        # Written timestamps carry no serial drift; take their calendar day as is.
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(tz)
        return _calendar_instant(parsed.year, parsed.month, parsed.day, tz)
    for fmt in _FALLBACK_FORMATS:
        try:
            parsed = datetime.strptime(normalized, fmt)
        except ValueError:
            continue
        return _calendar_instant(parsed.year, parsed.month, parsed.day, tz)
    return None


def parse_date(value: Any, *, tz: tzinfo = KST) -> datetime | None:
    """Parse a date-like cell into midnight of its calendar day in ``tz``.

    Accepted inputs
    ---------------
    - ``datetime`` (naive values are read as already local to ``tz``) and
      ``date``
    - spreadsheet serial numbers (e.g. ``45352`` for 2024-03-01)
    - ``YYYYMMDD`` strings or integers
    - ``YYYY-MM-DD`` / ``YYYY.MM.DD`` / ``YYYY/MM/DD`` and ``YYYY년 M월 D일``
    - ISO-8601 timestamps and a handful of common month/day layouts

    Returns ``None`` for anything else.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _from_datetime(value, tz)
    if isinstance(value, date):
        return _calendar_instant(value.year, value.month, value.day, tz)
    if isinstance(value, int | float):
        return _from_number(value, tz)
    if isinstance(value, str):
        return _from_string(value, tz)
    return None


def parse_amount(value: Any) -> Decimal | None:
    """Parse a numeric cell, tolerating ``1,234,567`` style strings.

    Returns ``None`` for blanks, booleans, and anything that is not a finite
    number after stripping thousands separators and whitespace.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # str() keeps the shortest round-tripping repr (0.1 -> "0.1")
        return Decimal(str(value)) if math.isfinite(value) else None
    if isinstance(value, str):
        cleaned = re.sub(r"[,\s]", "", value)
        if not cleaned:
            return None
        try:
            parsed = Decimal(cleaned)
        except InvalidOperation:
            return None
        return parsed if parsed.is_finite() else None
    return None


def pick_cell(row: Sequence[Any], index: int) -> Any:
    """Return ``row[index]``, stripped when textual; ``None`` when out of range."""

    if index < 0 or index >= len(row):
        return None
    value = row[index]
    if isinstance(value, str):
        return value.strip()
    return value


def pick_text(row: Sequence[Any], index: int) -> str:
    """Return the cell at ``index`` as trimmed text (``""`` for blanks)."""

    value = pick_cell(row, index)
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        # Numeric-looking names ("2024") come back from openpyxl as floats
        return str(int(value))
    return str(value).strip()


def is_row_empty(row: Sequence[Any]) -> bool:
    """True when every cell is ``None`` or the empty string."""

    return all(cell is None or cell == "" for cell in row)


def json_default(value: Any) -> Any:
    if isinstance(value, datetime | date | time):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return str(value)


def format_raw_row(row: Sequence[Any]) -> str:
    """Serialize a raw row for diagnostics (dates as ISO strings)."""

    return json.dumps(list(row), ensure_ascii=False, default=json_default)


__all__ = [
    "KST",
    "parse_date",
    "parse_amount",
    "pick_cell",
    "pick_text",
    "is_row_empty",
    "format_raw_row",
    "json_default",
]
