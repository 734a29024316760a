"""Shared SQLAlchemy models registry for the household ledger database.

Covers the transaction ledger (categories, transactions) and the asset side
(institutions, family members, instruments, accounts, holdings, snapshots).
"""

from .ledger import (
    Account,
    AssetMaster,
    Base,
    Category,
    FamilyMember,
    Holding,
    HoldingValueSnapshot,
    Institution,
    Transaction,
)

__all__ = [
    "Base",
    "Category",
    "Transaction",
    "Institution",
    "FamilyMember",
    "AssetMaster",
    "Account",
    "Holding",
    "HoldingValueSnapshot",
]
