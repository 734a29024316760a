"""Public interface for the ``household_ledger`` package.

This module exposes the seed orchestrators and the public models/types as the
stable import surface. There is no runtime logic here, only symbol re-exports.
"""

from .models import (
    AccountType,
    AssetBuildResult,
    AssetClass,
    AssetSnapshotRecord,
    BuildResult,
    Currency,
    InstitutionType,
    PredefinedCategory,
    RiskLevel,
    RowWarning,
    SeedOptions,
    SeedStats,
    SeedType,
    SheetConfig,
    SubClass,
    TransactionRecord,
    TransactionType,
)
from .workflows.seed_flow import SeedOutcome, run_seed, seed_asset, seed_expense, seed_income

__all__ = [
    # Orchestrators
    "run_seed",
    "seed_expense",
    "seed_income",
    "seed_asset",
    "SeedOutcome",
    # Models / types
    "TransactionType",
    "SeedType",
    "AccountType",
    "RiskLevel",
    "AssetClass",
    "SubClass",
    "Currency",
    "InstitutionType",
    "TransactionRecord",
    "AssetSnapshotRecord",
    "RowWarning",
    "PredefinedCategory",
    "BuildResult",
    "AssetBuildResult",
    "SeedStats",
    "SheetConfig",
    "SeedOptions",
]
