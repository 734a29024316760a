"""High-level seed workflows composed from ingest, approval and persistence."""

from .seed_flow import SeedOutcome, run_seed, seed_asset, seed_expense, seed_income

__all__ = ["SeedOutcome", "run_seed", "seed_asset", "seed_expense", "seed_income"]
