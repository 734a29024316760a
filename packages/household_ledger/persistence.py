"""Persistence integration for household_ledger.

Functions here write imported rows to the ledger tables owned by ``libs/db``.
They rely on SQLAlchemy ORM models defined in ``db.models.ledger`` and a
session provided by ``db.client``; callers own commit boundaries.

Every writer is find-or-create on the entity's natural key:

==========================  ==================================================
Entity                      Key
==========================  ==================================================
Institution                 ``name``
FamilyMember                ``name``
AssetMaster                 ``(symbol, currency)`` when a symbol is known,
                            else the id derived from ``(name, currency)``
Account                     id derived from ``(member_id, institution_id, name)``
Holding                     ``(account_id, asset_master_id)``
HoldingValueSnapshot        ``(holding_id, date)``
Transaction                 ``fingerprint_sha256``
==========================  ==================================================

An existing row is never updated, even when the incoming row disagrees.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, NamedTuple

from db.models.ledger import (
    Account,
    AssetMaster,
    FamilyMember,
    Holding,
    HoldingValueSnapshot,
    Institution,
    Transaction,
)
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .ingest.normalizers import infer_institution_type
from .logging_setup import get_logger
from .models import AssetSnapshotRecord, SeedStats, TransactionRecord

logger = get_logger("household_ledger.persistence")

MEMBER_COLORS = ("#3b82f6", "#ef4444", "#10b981", "#f59e0b", "#8b5cf6", "#ec4899")


class Upserted(NamedTuple):
    row: Any
    created: bool


def _to_decimal_2(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _digest(payload: Any) -> str:
    s = json.dumps(payload, ensure_ascii=False, separators=(",", ":"), sort_keys=True)
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def _create(session: Session, row: Any) -> None:
    session.add(row)
    session.flush()


# ---------------------------
# Deterministic ids
# ---------------------------


def asset_master_id(name: str, currency: str) -> str:
    return _digest({"kind": "asset_master", "name": name, "currency": currency})[:32]


def account_id(member_id: int, institution_id: int, name: str) -> str:
    return _digest(
        {"kind": "account", "member": member_id, "institution": institution_id, "name": name}
    )[:32]


# ---------------------------
# Asset-side entities
# ---------------------------


def upsert_institution(session: Session, name: str) -> Upserted:
    existing = (
        session.execute(select(Institution).where(Institution.name == name)).scalars().first()
    )
    if existing is not None:
        logger.debug("Institution exists: %s", name)
        return Upserted(existing, False)
    row = Institution(name=name, type=str(infer_institution_type(name)), is_active=True)
    _create(session, row)
    logger.info("Created institution: %s (%s)", name, row.type)
    return Upserted(row, True)


def upsert_family_member(session: Session, name: str) -> Upserted:
    """Find or create a member; new members take the next palette color.

    The color index is the number of members already stored, so it is stable
    across processes and does not depend on import order within a run.
    """

    existing = (
        session.execute(select(FamilyMember).where(FamilyMember.name == name)).scalars().first()
    )
    if existing is not None:
        logger.debug("Family member exists: %s", name)
        return Upserted(existing, False)
    count = session.execute(select(func.count()).select_from(FamilyMember)).scalar_one()
    row = FamilyMember(name=name, color=MEMBER_COLORS[count % len(MEMBER_COLORS)], is_active=True)
    _create(session, row)
    logger.info("Created family member: %s (%s)", name, row.color)
    return Upserted(row, True)


def upsert_asset_master(
    session: Session, record: AssetSnapshotRecord, *, symbol: str | None = None
) -> Upserted:
    currency = str(record.currency)
    existing: AssetMaster | None
    if symbol:
        existing = (
            session.execute(
                select(AssetMaster).where(
                    AssetMaster.symbol == symbol, AssetMaster.currency == currency
                )
            )
            .scalars()
            .first()
        )
    else:
        existing = None
    master_id = asset_master_id(record.asset_name, currency)
    if existing is None:
        existing = session.get(AssetMaster, master_id)
    if existing is not None:
        logger.debug("Asset master exists: %s (%s)", existing.name, existing.currency)
        return Upserted(existing, False)

    row = AssetMaster(
        id=master_id,
        symbol=symbol or None,
        name=record.asset_name,
        asset_class=str(record.asset_class),
        sub_class=str(record.sub_class) if record.sub_class is not None else None,
        risk_level=str(record.risk_level),
        currency=currency,
        is_active=True,
    )
    _create(session, row)
    logger.info("Created asset master: %s (%s)", record.asset_name, currency)
    return Upserted(row, True)


def upsert_account(
    session: Session, record: AssetSnapshotRecord, *, member_id: int, institution_id: int
) -> Upserted:
    acct_id = account_id(member_id, institution_id, record.account_name)
    existing = session.get(Account, acct_id)
    if existing is not None:
        logger.debug("Account exists: %s", acct_id)
        return Upserted(existing, False)
    row = Account(
        id=acct_id,
        member_id=member_id,
        institution_id=institution_id,
        name=record.account_name,
        account_type=str(record.account_type),
        currency=str(record.currency),
        cash_balance=Decimal(0),
        is_active=True,
    )
    _create(session, row)
    logger.info("Created account: %s (%s) for member %s", row.name, row.account_type, member_id)
    return Upserted(row, True)


def upsert_holding(
    session: Session, record: AssetSnapshotRecord, *, account_id: str, asset_master_id: str
) -> Upserted:
    existing = (
        session.execute(
            select(Holding).where(
                Holding.account_id == account_id, Holding.asset_master_id == asset_master_id
            )
        )
        .scalars()
        .first()
    )
    if existing is not None:
        logger.debug("Holding exists: %s", existing.id)
        return Upserted(existing, False)
    row = Holding(
        account_id=account_id,
        asset_master_id=asset_master_id,
        quantity=record.quantity,
        average_cost_original=record.price_original,
        average_cost_krw=record.price_krw,
        data_source="snapshot",
    )
    _create(session, row)
    logger.info("Created holding: %s in account %s", record.asset_name, account_id)
    return Upserted(row, True)


def upsert_holding_snapshot(
    session: Session, record: AssetSnapshotRecord, *, holding_id: int
) -> Upserted:
    existing = (
        session.execute(
            select(HoldingValueSnapshot).where(
                HoldingValueSnapshot.holding_id == holding_id,
                HoldingValueSnapshot.date == record.date,
            )
        )
        .scalars()
        .first()
    )
    if existing is not None:
        logger.debug("Snapshot exists: holding=%s date=%s", holding_id, record.date)
        return Upserted(existing, False)
    row = HoldingValueSnapshot(
        holding_id=holding_id,
        date=record.date,
        quantity=record.quantity,
        price_original=record.price_original,
        exchange_rate=record.exchange_rate,
        price_krw=record.price_krw,
        total_value_krw=_to_decimal_2(record.total_value_krw),
        source="import",
    )
    _create(session, row)
    logger.info("Created snapshot: %s on %s", record.asset_name, record.date)
    return Upserted(row, True)


class AssetUpsertContext:
    """Per-run caches and tallies for the asset-snapshot write phase.

    One instance serves exactly one orchestrator run; the caches only save
    repeat lookups and are never shared between runs.
    """

    def __init__(self, session: Session, stats: SeedStats | None = None) -> None:
        self.session = session
        self.stats = stats if stats is not None else SeedStats()
        self._members: dict[str, int] = {}
        self._institutions: dict[str, int] = {}
        self._masters: dict[tuple[str, str], str] = {}
        self._accounts: dict[tuple[int, int, str], str] = {}
        self._holdings: dict[tuple[str, str], int] = {}

    def _member_id(self, name: str) -> int:
        if name not in self._members:
            res = upsert_family_member(self.session, name)
            self.stats.record("family_member", res.created)
            self._members[name] = res.row.id
        return self._members[name]

    def _institution_id(self, name: str) -> int:
        if name not in self._institutions:
            res = upsert_institution(self.session, name)
            self.stats.record("institution", res.created)
            self._institutions[name] = res.row.id
        return self._institutions[name]

    def _master_id(self, record: AssetSnapshotRecord) -> str:
        key = (record.asset_name, str(record.currency))
        if key not in self._masters:
            res = upsert_asset_master(self.session, record)
            self.stats.record("asset_master", res.created)
            self._masters[key] = res.row.id
        return self._masters[key]

    def _account_id(self, record: AssetSnapshotRecord, member_id: int, institution_id: int) -> str:
        key = (member_id, institution_id, record.account_name)
        if key not in self._accounts:
            res = upsert_account(
                self.session, record, member_id=member_id, institution_id=institution_id
            )
            self.stats.record("account", res.created)
            self._accounts[key] = res.row.id
        return self._accounts[key]

    def _holding_id(self, record: AssetSnapshotRecord, acct_id: str, master_id: str) -> int:
        key = (acct_id, master_id)
        if key not in self._holdings:
            res = upsert_holding(
                self.session, record, account_id=acct_id, asset_master_id=master_id
            )
            self.stats.record("holding", res.created)
            self._holdings[key] = res.row.id
        return self._holdings[key]

    def apply(self, record: AssetSnapshotRecord) -> bool:
        """Write one snapshot row and its parents; True when the snapshot is new."""

        member_id = self._member_id(record.member_name)
        institution_id = self._institution_id(record.institution_name)
        master_id = self._master_id(record)
        acct_id = self._account_id(record, member_id, institution_id)
        holding_id = self._holding_id(record, acct_id, master_id)
        res = upsert_holding_snapshot(self.session, record, holding_id=holding_id)
        self.stats.record("holding_snapshot", res.created)
        return res.created


# ---------------------------
# Transactions
# ---------------------------


def compute_transaction_fingerprint(record: TransactionRecord, *, occurrence: int = 0) -> str:
    """Compute a stable SHA-256 fingerprint over canonical fields.

    Fields used: type, amount (2dp string), date (YYYY-MM-DD), category name,
    description, payment method, user, and ``occurrence``, the 0-based index
    of this row among identical rows of the same batch. The ordinal keeps
    genuinely repeated purchases apart while a re-import of the same sheet
    reproduces the same fingerprints.
    """

    payload: Mapping[str, Any] = {
        "type": record.type,
        "amount": str(_to_decimal_2(record.amount)),
        "date": record.date.isoformat(),
        "category": record.category_name,
        "description": record.description,
        "payment_method": record.payment_method,
        "user": record.user,
        "occurrence": occurrence,
    }
    return _digest(payload)


def insert_transaction(
    session: Session,
    record: TransactionRecord,
    *,
    category_id: int,
    occurrence: int = 0,
) -> Upserted:
    fp = compute_transaction_fingerprint(record, occurrence=occurrence)
    existing = (
        session.execute(select(Transaction).where(Transaction.fingerprint_sha256 == fp))
        .scalars()
        .first()
    )
    if existing is not None:
        logger.debug("Transaction exists: %s", fp[:12])
        return Upserted(existing, False)
    row = Transaction(
        type=record.type,
        amount=_to_decimal_2(record.amount),
        date=record.date,
        category_id=category_id,
        description=record.description,
        payment_method=record.payment_method,
        user_name=record.user,
        source="import",
        fingerprint_sha256=fp,
    )
    _create(session, row)
    logger.info("Created transaction: %s %s %s", record.date, record.type, row.amount)
    return Upserted(row, True)


__all__ = [
    "MEMBER_COLORS",
    "Upserted",
    "asset_master_id",
    "account_id",
    "upsert_institution",
    "upsert_family_member",
    "upsert_asset_master",
    "upsert_account",
    "upsert_holding",
    "upsert_holding_snapshot",
    "AssetUpsertContext",
    "compute_transaction_fingerprint",
    "insert_transaction",
]
