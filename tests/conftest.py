"""Pytest configuration for test isolation.

Seeding reads its defaults from ``SEED_XLSX_*`` and ``DATABASE_URL`` and keeps
one shared SQLAlchemy engine per process. To keep tests hermetic we clear
those variables, dispose the engine after every test, and drop whatever
handler a CLI invocation attached to the package logger.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from db.client import dispose_engine

from household_ledger import logging_setup
from tests.helpers.db import bootstrap_sqlite_db

_ENV_VARS = (
    "DATABASE_URL",
    "SEED_XLSX_PATH",
    "SEED_XLSX_SKIP",
    "SEED_XLSX_YES",
    "SEED_XLSX_VERBOSE",
    "HOUSEHOLD_LEDGER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    # load_dotenv writes os.environ directly, bypassing monkeypatch.
    for name in _ENV_VARS:
        os.environ.pop(name, None)
    dispose_engine()
    pkg_logger = logging.getLogger("household_ledger")
    for h in list(pkg_logger.handlers):
        pkg_logger.removeHandler(h)
    monkeypatch.setattr(logging_setup, "_handler", None)


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    """A fresh file-backed SQLite ledger for one test."""

    return bootstrap_sqlite_db(tmp_path / "ledger.db")
