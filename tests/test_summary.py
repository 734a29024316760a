from datetime import date
from decimal import Decimal

from household_ledger.models import BuildResult, RowWarning, SeedStats, TransactionRecord
from household_ledger.summary import (
    emit_stats,
    emit_transaction_summary,
    emit_warnings,
    monthly_counts,
)


def _tx(day, category="식비"):
    return TransactionRecord(
        type="expense", amount=Decimal("1000"), category_name=category, date=day
    )


def test_monthly_counts_sorted_by_month():
    records = [_tx(date(2024, 4, 2)), _tx(date(2024, 3, 1)), _tx(date(2024, 4, 30))]
    assert monthly_counts(records) == [("2024-03", 1), ("2024-04", 2)]


def test_emit_warnings_caps_listing():
    lines = []
    warnings = [RowWarning(f"date parse failed: {i}", "[]") for i in range(12)]

    emit_warnings(warnings, "expense", emit=lines.append)

    assert lines[0] == "Skipped rows (expense): 12"
    assert lines[1] == "   - [expense] date parse failed: 0 | raw: []"
    assert len([line for line in lines if line.startswith("   - ")]) == 10
    assert lines[-2] == "   ... 2 more"


def test_emit_warnings_silent_when_clean():
    lines = []
    emit_warnings([], "expense", emit=lines.append)
    assert lines == []


def test_transaction_summary_verbose_sections():
    records = [_tx(date(2024, 3, 1)), _tx(date(2024, 3, 9), "교통"), _tx(date(2024, 4, 1))]
    result = BuildResult(
        sheet_name="지출",
        records=records,
        sample_record={"raw": ["지출", "식비", date(2024, 3, 1)], "mapped": {"amount": Decimal(1)}},
    )
    lines = []

    emit_transaction_summary(
        result,
        "expense",
        file_path="ledger.xlsx",
        skip_rows=3,
        verbose=True,
        conflicts=["환급"],
        emit=lines.append,
    )
    text = "\n".join(lines)

    assert "Category type conflicts:" in text
    assert "   - 환급" in lines
    assert "   Records: 3" in lines
    assert "   First month (expense, 2024-03): 2" in lines
    assert '"2024-03-01"' in text
    assert '"amount": "1"' in text
    assert "     - 2024-03: 2" in lines
    assert "     - 2024-04: 1" in lines


def test_transaction_summary_hides_detail_by_default():
    result = BuildResult(sheet_name="지출", records=[_tx(date(2024, 3, 1))])
    lines = []

    emit_transaction_summary(
        result, "expense", file_path="ledger.xlsx", skip_rows=3, emit=lines.append
    )

    assert not any("Sample record" in line or "First month" in line for line in lines)


def test_emit_stats():
    stats = SeedStats()
    stats.record("category", True)
    stats.record("category", False)
    stats.record("transaction", True)
    lines = []

    emit_stats(stats, "expense", emit=lines.append)

    assert lines == [
        "Write results (expense):",
        "   - category: 1 created, 1 already present",
        "   - transaction: 1 created, 0 already present",
    ]

    lines.clear()
    emit_stats(SeedStats(), "asset", emit=lines.append)
    assert lines == ["Write results (asset):", "   nothing to write"]
