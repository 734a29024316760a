from sqlalchemy import inspect
from typer.testing import CliRunner

from db.client import get_engine
from household_ledger.cli import app, cmd_seed
from tests.helpers.db import count_rows
from tests.helpers.workbook import EXPECTED_COUNTS, write_ledger_workbook

runner = CliRunner()


def test_seed_with_yes_writes_everything(tmp_path, db_url):
    book = write_ledger_workbook(tmp_path / "ledger.xlsx")

    result = runner.invoke(app, ["seed", "--file", str(book), "--yes", "--database-url", db_url])

    assert result.exit_code == 0, result.output
    assert "expense: committed (4 record(s))" in result.output
    assert "income: committed (2 record(s))" in result.output
    assert "asset: committed (4 record(s))" in result.output
    assert f"Total new rows: {sum(EXPECTED_COUNTS.values())}" in result.output
    assert count_rows(db_url) == EXPECTED_COUNTS


def test_seed_rerun_reports_nothing_new(tmp_path, db_url):
    book = write_ledger_workbook(tmp_path / "ledger.xlsx")
    args = ["seed", "-f", str(book), "-y", "--database-url", db_url]

    assert runner.invoke(app, args).exit_code == 0
    result = runner.invoke(app, args)

    assert result.exit_code == 0, result.output
    assert "created" in result.output
    assert ": 0 created" in result.output
    assert " 1 created" not in result.output
    assert "Total new rows: 0" in result.output
    assert count_rows(db_url) == EXPECTED_COUNTS


def test_seed_without_yes_is_skipped_when_not_a_tty(tmp_path, db_url):
    book = write_ledger_workbook(tmp_path / "ledger.xlsx")

    result = runner.invoke(app, ["seed", "--file", str(book), "--database-url", db_url])

    assert result.exit_code == 0, result.output
    assert "expense: skipped" in result.output
    assert "asset: skipped" in result.output
    assert all(n == 0 for n in count_rows(db_url).values())


def test_seed_type_option(tmp_path, db_url):
    book = write_ledger_workbook(tmp_path / "ledger.xlsx")

    result = runner.invoke(
        app, ["seed", "-t", "asset", "-f", str(book), "-y", "--database-url", db_url]
    )

    assert result.exit_code == 0, result.output
    assert "asset: committed" in result.output
    assert "expense:" not in result.output
    assert count_rows(db_url)["transactions"] == 0


def test_missing_file_exits_1(tmp_path, db_url):
    result = runner.invoke(
        app, ["seed", "--file", str(tmp_path / "nope.xlsx"), "--yes", "--database-url", db_url]
    )

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_missing_file_option_exits_1():
    result = runner.invoke(app, ["seed", "--yes"])

    assert result.exit_code == 1
    assert "invalid seed options" in result.output


def test_bad_options_exit_1(tmp_path):
    book = write_ledger_workbook(tmp_path / "ledger.xlsx")

    for extra in (["--skip=-1"], ["--type", "bogus"]):
        result = runner.invoke(app, ["seed", "--file", str(book), "--yes", *extra])
        assert result.exit_code == 1, extra


def test_non_workbook_exits_1(tmp_path, db_url):
    bogus = tmp_path / "ledger.xlsx"
    bogus.write_text("not a workbook", encoding="utf-8")

    result = runner.invoke(app, ["seed", "-f", str(bogus), "-y", "--database-url", db_url])

    assert result.exit_code == 1
    assert "Failed to read workbook" in result.output


def test_missing_database_url_exits_1(tmp_path):
    book = write_ledger_workbook(tmp_path / "ledger.xlsx")

    result = runner.invoke(app, ["seed", "-f", str(book), "-y"])

    assert result.exit_code == 1
    assert "DATABASE_URL is not set" in result.output


def test_env_defaults_from_dotenv(tmp_path, db_url, monkeypatch):
    book = write_ledger_workbook(tmp_path / "ledger.xlsx")
    (tmp_path / ".env").write_text(
        f"DATABASE_URL={db_url}\nSEED_XLSX_PATH={book}\nSEED_XLSX_YES=true\n"
        "SEED_XLSX_SKIP=3\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["seed", "--type", "expense"])

    assert result.exit_code == 0, result.output
    assert "expense: committed (4 record(s))" in result.output
    assert count_rows(db_url)["transactions"] == 4


def test_init_db_creates_tables(tmp_path):
    url = f"sqlite+pysqlite:///{tmp_path / 'fresh.db'}"

    result = runner.invoke(app, ["init-db", "--database-url", url])

    assert result.exit_code == 0, result.output
    assert "Ledger tables are up to date." in result.output
    tables = set(inspect(get_engine(database_url=url)).get_table_names())
    assert set(EXPECTED_COUNTS) <= tables


def test_no_args_shows_help():
    result = runner.invoke(app, [])
    assert "seed" in result.output
    assert "init-db" in result.output


def test_cmd_seed_callable_with_scripted_confirm(tmp_path, db_url):
    book = write_ledger_workbook(tmp_path / "ledger.xlsx")
    lines = []

    code = cmd_seed(
        str(book),
        seed_type="expense",
        database_url=db_url,
        confirm=lambda message: True,
        is_interactive=lambda: True,
        emit=lines.append,
    )

    assert code == 0
    assert "expense: committed (4 record(s))" in lines
