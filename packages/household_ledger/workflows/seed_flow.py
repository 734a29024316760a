"""Workflow orchestrators for workbook seeding.

Each orchestrator runs one sheet kind end to end:

    build rows -> report -> approval gate -> resolve/upsert -> per-run stats

Denied approval returns a ``skipped`` outcome without touching the database.
Once writing starts, every row is committed on its own, so a store error
aborts the remainder of the run but keeps the rows already written.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Literal

from db.client import session_scope

from ..approval import Confirm, Emit, confirm_approval
from ..categories import category_type_conflicts, observed_categories, resolve_categories
from ..ingest.adapters.asset_sheet import ASSET_SHEET_NUMBER, build_asset_snapshots
from ..ingest.adapters.expense_sheet import (
    EXPENSE_CATEGORY_MAPPING,
    EXPENSE_SHEET_NUMBER,
    build_expense_records,
)
from ..ingest.adapters.income_sheet import (
    INCOME_CATEGORY_MAPPING,
    INCOME_SHEET_NUMBER,
    build_income_records,
)
from ..ingest.cells import KST
from ..ingest.workbook import MappingRegion, SheetReader, load_category_mapping, read_sheet
from ..logging_setup import get_logger
from ..models import BuildResult, SeedOptions, SeedStats, SheetConfig
from ..persistence import AssetUpsertContext, compute_transaction_fingerprint, insert_transaction
from ..summary import emit_asset_summary, emit_stats, emit_transaction_summary

logger = get_logger("household_ledger.workflows.seed_flow")

type SeedKind = Literal["expense", "income", "asset"]
type SeedStatus = Literal["committed", "skipped"]

SEED_ORDER: tuple[SeedKind, ...] = ("expense", "income", "asset")


@dataclass(slots=True)
class SeedOutcome:
    kind: SeedKind
    status: SeedStatus
    records: int = 0
    warnings: int = 0
    stats: SeedStats = field(default_factory=SeedStats)


@dataclass(frozen=True, slots=True)
class _TransactionSheet:
    kind: SeedKind
    sheet_number: int
    mapping: MappingRegion
    build: Callable[..., BuildResult]


_TRANSACTION_SHEETS: dict[SeedKind, _TransactionSheet] = {
    "expense": _TransactionSheet(
        "expense", EXPENSE_SHEET_NUMBER, EXPENSE_CATEGORY_MAPPING, build_expense_records
    ),
    "income": _TransactionSheet(
        "income", INCOME_SHEET_NUMBER, INCOME_CATEGORY_MAPPING, build_income_records
    ),
}


def _seed_transactions(
    sheet: _TransactionSheet,
    options: SeedOptions,
    *,
    database_url: str | None,
    confirm: Confirm | None,
    is_interactive: Callable[[], bool] | None,
    emit: Emit,
    reader: SheetReader,
    tz: tzinfo,
) -> SeedOutcome:
    kind = sheet.kind
    config: SheetConfig = options.sheet(sheet.sheet_number)
    emit(f"Loading {kind} data (sheet {sheet.sheet_number})...")
    result = sheet.build(config, reader=reader, tz=tz)
    emit(f"   Loaded {len(result.records)} record(s) from '{result.sheet_name}'")

    emit_transaction_summary(
        result,
        kind,
        file_path=options.file_path,
        skip_rows=options.skip_rows,
        verbose=options.verbose,
        conflicts=category_type_conflicts(result.records),
        emit=emit,
    )

    approved = confirm_approval(
        f"Write {kind} data to the database?",
        auto_approve=options.auto_approve,
        confirm=confirm,
        is_interactive=is_interactive,
        emit=emit,
    )
    if not approved:
        emit(f"{kind.capitalize()} seed not approved; skipping.")
        return SeedOutcome(kind, "skipped", len(result.records), len(result.warnings))

    mapping = load_category_mapping(options.file_path, reader=reader, **sheet.mapping._asdict())
    emit(f"Category mapping ({kind}): {len(mapping)} entr{'y' if len(mapping) == 1 else 'ies'}")

    stats = SeedStats()
    with session_scope(database_url=database_url) as session:
        category_ids = resolve_categories(
            session, observed_categories(result.records), mapping, stats=stats
        )
        session.commit()

        # Identical rows within one batch are distinct purchases; number them
        # so each keeps its own fingerprint.
        occurrences: Counter[str] = Counter()
        for record in result.records:
            base = compute_transaction_fingerprint(record)
            res = insert_transaction(
                session,
                record,
                category_id=category_ids[(record.category_name, record.type)],
                occurrence=occurrences[base],
            )
            occurrences[base] += 1
            stats.record("transaction", res.created)
            session.commit()

    emit_stats(stats, kind, emit=emit)
    logger.info("%s seed committed: %d new row(s)", kind, stats.total_created)
    return SeedOutcome(kind, "committed", len(result.records), len(result.warnings), stats)


def seed_expense(
    options: SeedOptions,
    *,
    database_url: str | None = None,
    confirm: Confirm | None = None,
    is_interactive: Callable[[], bool] | None = None,
    emit: Emit = print,
    reader: SheetReader = read_sheet,
    tz: tzinfo = KST,
) -> SeedOutcome:
    """Seed the expense sheet: categories (with mapped parents) and transactions."""

    return _seed_transactions(
        _TRANSACTION_SHEETS["expense"],
        options,
        database_url=database_url,
        confirm=confirm,
        is_interactive=is_interactive,
        emit=emit,
        reader=reader,
        tz=tz,
    )


def seed_income(
    options: SeedOptions,
    *,
    database_url: str | None = None,
    confirm: Confirm | None = None,
    is_interactive: Callable[[], bool] | None = None,
    emit: Emit = print,
    reader: SheetReader = read_sheet,
    tz: tzinfo = KST,
) -> SeedOutcome:
    """Seed the income sheet: categories (with mapped parents) and transactions."""

    return _seed_transactions(
        _TRANSACTION_SHEETS["income"],
        options,
        database_url=database_url,
        confirm=confirm,
        is_interactive=is_interactive,
        emit=emit,
        reader=reader,
        tz=tz,
    )


def seed_asset(
    options: SeedOptions,
    *,
    database_url: str | None = None,
    confirm: Confirm | None = None,
    is_interactive: Callable[[], bool] | None = None,
    emit: Emit = print,
    reader: SheetReader = read_sheet,
    tz: tzinfo = KST,
) -> SeedOutcome:
    """Seed the asset-snapshot sheet.

    Writes, per row and in order: family member, institution, asset master,
    account, holding, and the dated holding value snapshot. Every entity is
    find-or-create, so a repeat run against the same sheet writes nothing.
    """

    config = options.sheet(ASSET_SHEET_NUMBER)
    emit(f"Loading asset snapshots (sheet {ASSET_SHEET_NUMBER})...")
    result = build_asset_snapshots(config, reader=reader, tz=tz)
    emit(f"   Loaded {len(result.records)} record(s) from '{result.sheet_name}'")

    emit_asset_summary(
        result,
        file_path=options.file_path,
        skip_rows=options.skip_rows,
        verbose=options.verbose,
        emit=emit,
    )

    approved = confirm_approval(
        "Write asset data to the database?",
        auto_approve=options.auto_approve,
        confirm=confirm,
        is_interactive=is_interactive,
        emit=emit,
    )
    if not approved:
        emit("Asset seed not approved; skipping.")
        return SeedOutcome("asset", "skipped", len(result.records), len(result.warnings))

    stats = SeedStats()
    with session_scope(database_url=database_url) as session:
        ctx = AssetUpsertContext(session, stats)
        for record in result.records:
            ctx.apply(record)
            session.commit()

    emit_stats(stats, "asset", emit=emit)
    logger.info("asset seed committed: %d new row(s)", stats.total_created)
    return SeedOutcome("asset", "committed", len(result.records), len(result.warnings), stats)


_SEEDERS: dict[SeedKind, Callable[..., SeedOutcome]] = {
    "expense": seed_expense,
    "income": seed_income,
    "asset": seed_asset,
}


def run_seed(
    options: SeedOptions,
    *,
    database_url: str | None = None,
    confirm: Confirm | None = None,
    is_interactive: Callable[[], bool] | None = None,
    emit: Emit = print,
    reader: SheetReader = read_sheet,
    tz: tzinfo = KST,
) -> list[SeedOutcome]:
    """Run the seeders selected by ``options.seed_type`` (``all`` runs each in turn).

    Each kind passes through its own approval gate; declining one does not
    stop the next. A fatal error in one kind propagates and stops the run.
    """

    kinds = SEED_ORDER if options.seed_type == "all" else (options.seed_type,)
    outcomes: list[SeedOutcome] = []
    for kind in kinds:
        outcome = _SEEDERS[kind](
            options,
            database_url=database_url,
            confirm=confirm,
            is_interactive=is_interactive,
            emit=emit,
            reader=reader,
            tz=tz,
        )
        outcomes.append(outcome)
        emit("")
    return outcomes


__all__ = [
    "SEED_ORDER",
    "SeedKind",
    "SeedOutcome",
    "seed_expense",
    "seed_income",
    "seed_asset",
    "run_seed",
]
