"""CLI for the ``household_ledger`` package.

This module exposes callable command handlers (``cmd_seed``, ``cmd_init_db``)
and a Typer-based console interface. Environment variables (``DATABASE_URL``
and the ``SEED_XLSX_*`` defaults) are loaded from a local ``.env`` using
``python-dotenv`` before any command options are resolved. Business logic
lives in :mod:`household_ledger.workflows.seed_flow`.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from typer.models import OptionInfo

from .approval import Confirm, Emit
from .ingest.workbook import WorkbookError
from .logging_setup import configure_logging
from .models import SeedOptions, SeedStats


def cmd_seed(
    file_path: str | None,
    *,
    seed_type: str = "all",
    skip_rows: int = 3,
    auto_approve: bool = False,
    verbose: bool = False,
    database_url: str | None = None,
    confirm: Confirm | None = None,
    is_interactive: Callable[[], bool] | None = None,
    emit: Emit = print,
) -> int:
    """Validate options and run the selected seeders.

    Returns ``0`` when every selected seeder committed or was deliberately
    skipped, and ``1`` on any fatal error (message on stderr).
    """

    from .workflows.seed_flow import run_seed

    try:
        options = SeedOptions(
            file_path=file_path or "",
            skip_rows=skip_rows,
            auto_approve=auto_approve,
            verbose=verbose,
            seed_type=seed_type,
        )
    except ValidationError as e:
        print(f"Error: invalid seed options:\n{e}", file=sys.stderr)
        return 1

    if options.verbose:
        configure_logging(verbose=True)

    try:
        outcomes = run_seed(
            options,
            database_url=database_url,
            confirm=confirm,
            is_interactive=is_interactive,
            emit=emit,
        )
    except FileNotFoundError as e:
        print(f"Error: File not found: {e}", file=sys.stderr)
        return 1
    except WorkbookError as e:
        print(f"Error: Failed to read workbook: {e}", file=sys.stderr)
        return 1
    except SQLAlchemyError as e:
        print(f"Error: database write failed: {e}", file=sys.stderr)
        return 1
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    total = SeedStats()
    for outcome in outcomes:
        emit(f"{outcome.kind}: {outcome.status} ({outcome.records} record(s))")
        total.merge(outcome.stats)
    emit(f"Total new rows: {total.total_created}")
    return 0


def cmd_init_db(*, database_url: str | None = None) -> int:
    """Create any missing ledger tables."""

    from db.client import create_schema

    try:
        create_schema(database_url=database_url)
    except (RuntimeError, SQLAlchemyError) as e:
        print(f"Error: schema creation failed: {e}", file=sys.stderr)
        return 1
    print("Ledger tables are up to date.")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Seed the household ledger from a workbook export. "
        "Loads DATABASE_URL and SEED_XLSX_* defaults from a local .env."
    ),
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect these when used as default values below.
FILE_OPTION: OptionInfo = typer.Option(
    None,
    "--file",
    "-f",
    envvar="SEED_XLSX_PATH",
    help="Path to the .xlsx workbook (env SEED_XLSX_PATH).",
)
DATABASE_URL_OPTION: OptionInfo = typer.Option(
    None, "--database-url", help="Override DATABASE_URL (falls back to env var)."
)


@app.command("seed")
def seed_cmd(
    *,
    seed_type: str = typer.Option(
        "all", "--type", "-t", help="What to seed: expense, income, asset, or all."
    ),
    file_path: str | None = FILE_OPTION,
    skip_rows: int = typer.Option(
        3, "--skip", envvar="SEED_XLSX_SKIP", help="Leading rows to ignore on each sheet."
    ),
    auto_approve: bool = typer.Option(
        False, "--yes", "-y", envvar="SEED_XLSX_YES", help="Write without asking."
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        envvar="SEED_XLSX_VERBOSE",
        help="Show sample rows, first-period detail and debug logs.",
    ),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Read the workbook, show a summary, and write after approval."""

    code = cmd_seed(
        file_path,
        seed_type=seed_type,
        skip_rows=skip_rows,
        auto_approve=auto_approve,
        verbose=verbose,
        database_url=database_url,
    )
    raise typer.Exit(code)


@app.command("init-db")
def init_db_cmd(*, database_url: str | None = DATABASE_URL_OPTION) -> None:
    """Create the ledger tables in the target database."""

    raise typer.Exit(cmd_init_db(database_url=database_url))


@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) before subcommand options are parsed,
    so ``envvar`` fallbacks see its values.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    # Central logging setup so child loggers inherit configuration
    configure_logging()

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    app()
