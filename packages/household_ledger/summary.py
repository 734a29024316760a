"""Human-readable seed reports.

Everything here writes through an ``emit(line)`` callable (``print`` by
default) and returns nothing. The text is for the operator deciding whether
to approve a write; it is not a machine-readable contract.
"""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any

from .approval import Emit
from .ingest.cells import json_default
from .models import (
    AssetBuildResult,
    AssetSnapshotRecord,
    BuildResult,
    RowWarning,
    SeedStats,
    TransactionRecord,
)

WARNING_DISPLAY_LIMIT = 10


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def monthly_counts(records: Iterable[TransactionRecord]) -> list[tuple[str, int]]:
    """``[(YYYY-MM, count), ...]`` sorted by month."""

    counts = Counter(month_key(r.date) for r in records)
    return sorted(counts.items())


def emit_warnings(
    warnings: Sequence[RowWarning],
    label: str,
    *,
    emit: Emit = print,
    limit: int = WARNING_DISPLAY_LIMIT,
) -> None:
    if not warnings:
        return
    emit(f"Skipped rows ({label}): {len(warnings)}")
    for w in warnings[:limit]:
        emit(f"   - [{label}] {w}")
    if len(warnings) > limit:
        emit(f"   ... {len(warnings) - limit} more")
    emit("")


def emit_sample_record(sample: dict[str, Any] | None, label: str, *, emit: Emit = print) -> None:
    if sample is None:
        emit(f"   Sample record ({label}): none")
        return
    emit(f"   Sample record ({label}):")
    formatted = json.dumps(sample, ensure_ascii=False, indent=2, default=json_default)
    for line in formatted.splitlines():
        emit(f"     {line}")


def emit_first_month_records(
    records: Sequence[TransactionRecord], label: str, *, emit: Emit = print
) -> None:
    """List every record sharing the first record's month."""

    if not records:
        emit(f"   First month ({label}): none")
        return
    first = month_key(records[0].date)
    in_month = [r for r in records if month_key(r.date) == first]
    emit(f"   First month ({label}, {first}): {len(in_month)}")
    for r in in_month:
        extras = "".join(f", {v}" for v in (r.description, r.payment_method, r.user) if v)
        emit(f"     - {r.date.isoformat()} | {r.type} | {r.category_name} | {r.amount}{extras}")


def emit_transaction_summary(
    result: BuildResult,
    label: str,
    *,
    file_path: str,
    skip_rows: int,
    verbose: bool = False,
    conflicts: Sequence[str] = (),
    emit: Emit = print,
) -> None:
    emit_warnings(result.warnings, label, emit=emit)

    if conflicts:
        emit("Category type conflicts:")
        for name in conflicts:
            emit(f"   - {name}")
        emit("")

    emit(f"Summary ({label})")
    emit(f"   File: {file_path}")
    emit(f"   Sheet: {result.sheet_name}")
    emit(f"   Skipped leading rows: {skip_rows}")
    emit(f"   Records: {len(result.records)}")
    if verbose:
        emit_sample_record(result.sample_record, label, emit=emit)
        emit_first_month_records(result.records, label, emit=emit)
    emit("   By month:")
    for month, count in monthly_counts(result.records):
        emit(f"     - {month}: {count}")


def _emit_tally(title: str, values: Iterable[str], emit: Emit) -> None:
    emit(f"   {title}:")
    for name, count in sorted(Counter(values).items()):
        emit(f"     - {name}: {count}")


def emit_first_snapshot_records(
    records: Sequence[AssetSnapshotRecord], *, emit: Emit = print
) -> None:
    """List every record sharing the first record's as-of date."""

    if not records:
        emit("   First snapshot date: none")
        return
    first = records[0].date
    on_date = [r for r in records if r.date == first]
    emit(f"   First snapshot date ({first.isoformat()}): {len(on_date)}")
    for r in on_date:
        emit(
            f"     - {r.member_name} | {r.institution_name} | {r.account_name} | "
            f"{r.asset_name} | {r.quantity} x {r.price_original} {r.currency} | "
            f"{r.total_value_krw} KRW"
        )


def emit_asset_summary(
    result: AssetBuildResult,
    *,
    file_path: str,
    skip_rows: int,
    verbose: bool = False,
    emit: Emit = print,
) -> None:
    label = "asset"
    emit_warnings(result.warnings, label, emit=emit)

    emit(f"Summary ({label})")
    emit(f"   File: {file_path}")
    emit(f"   Sheet: {result.sheet_name}")
    emit(f"   Skipped leading rows: {skip_rows}")
    emit(f"   Records: {len(result.records)}")
    if verbose:
        emit_sample_record(result.sample_record, label, emit=emit)
        emit_first_snapshot_records(result.records, emit=emit)
    _emit_tally("By member", (r.member_name for r in result.records), emit)
    _emit_tally("By institution", (r.institution_name for r in result.records), emit)


def emit_stats(stats: SeedStats, label: str, *, emit: Emit = print) -> None:
    emit(f"Write results ({label}):")
    kinds = stats.kinds()
    if not kinds:
        emit("   nothing to write")
        return
    for kind in kinds:
        emit(f"   - {kind}: {stats.created[kind]} created, {stats.existing[kind]} already present")


__all__ = [
    "WARNING_DISPLAY_LIMIT",
    "month_key",
    "monthly_counts",
    "emit_warnings",
    "emit_sample_record",
    "emit_first_month_records",
    "emit_transaction_summary",
    "emit_first_snapshot_records",
    "emit_asset_summary",
    "emit_stats",
]
