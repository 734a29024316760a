"""DB helpers for tests: bootstrap a temporary SQLite ledger and count rows."""

from __future__ import annotations

import os
from pathlib import Path

from db import (
    Account,
    AssetMaster,
    Category,
    FamilyMember,
    Holding,
    HoldingValueSnapshot,
    Institution,
    Transaction,
)
from db.client import create_schema, dispose_engine, session_scope
from sqlalchemy import func, select

LEDGER_MODELS = (
    Category,
    Transaction,
    Institution,
    FamilyMember,
    AssetMaster,
    Account,
    Holding,
    HoldingValueSnapshot,
)


def bootstrap_sqlite_db(db_file: Path, *, set_default_env: bool = False) -> str:
    """Create a SQLite database file, initialize schema, and return the URL.

    Using a file-backed SQLite DB ensures multiple SQLAlchemy connections share
    the same state (in-memory DBs are per-connection by default). Any engine
    left over from a previous test is disposed first.
    """

    url = f"sqlite+pysqlite:///{db_file}"
    db_file.parent.mkdir(parents=True, exist_ok=True)
    dispose_engine()
    create_schema(database_url=url)

    if set_default_env:
        os.environ.setdefault("DATABASE_URL", url)
    return url


def count_rows(database_url: str) -> dict[str, int]:
    """Return ``{table_name: row_count}`` for every ledger table."""

    out: dict[str, int] = {}
    with session_scope(database_url=database_url) as session:
        for model in LEDGER_MODELS:
            n = session.execute(select(func.count()).select_from(model)).scalar_one()
            out[model.__tablename__] = int(n)
    return out
