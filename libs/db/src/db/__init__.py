"""db: shared database library (SQLAlchemy) for the household ledger.

Public exports
--------------
- ``Base`` and ``metadata`` for schema creation
- ORM models in ``db.models.ledger`` (re-exported for convenience)
- Engine/session helpers in ``db.client``
"""

from __future__ import annotations

from .models.ledger import (
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

metadata = Base.metadata

__all__ = [
    "Base",
    "metadata",
    "Category",
    "Transaction",
    "Institution",
    "FamilyMember",
    "AssetMaster",
    "Account",
    "Holding",
    "HoldingValueSnapshot",
]
