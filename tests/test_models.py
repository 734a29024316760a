from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from household_ledger.models import (
    AssetClass,
    RowWarning,
    SeedOptions,
    SeedStats,
    SheetConfig,
    TransactionRecord,
)


def test_transaction_record_rejects_non_positive_amount():
    with pytest.raises(ValueError):
        TransactionRecord(
            type="expense", amount=Decimal("-1"), category_name="식비", date=date(2024, 3, 1)
        )
    with pytest.raises(ValueError):
        TransactionRecord(type="income", amount=Decimal(0), category_name="급여", date=date.today())


def test_row_warning_str():
    assert str(RowWarning("amount is zero", '["x"]')) == 'amount is zero | raw: ["x"]'


def test_enum_values_are_stored_labels():
    assert str(AssetClass.GOLD) == "금"


def test_seed_options_defaults_and_sheet():
    opts = SeedOptions(file_path="  ledger.xlsx ")

    assert opts.file_path == "ledger.xlsx"
    assert (opts.skip_rows, opts.seed_type, opts.auto_approve, opts.verbose) == (
        3,
        "all",
        False,
        False,
    )
    assert opts.sheet(7) == SheetConfig("ledger.xlsx", 7, 3)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"file_path": ""},
        {"file_path": "   "},
        {"file_path": "a.xlsx", "skip_rows": -1},
        {"file_path": "a.xlsx", "seed_type": "bogus"},
        {"file_path": "a.xlsx", "unknown": 1},
    ],
)
def test_seed_options_validation(kwargs):
    with pytest.raises(ValidationError):
        SeedOptions(**kwargs)


def test_seed_stats_merge_and_totals():
    a = SeedStats()
    a.record("category", True)
    b = SeedStats()
    b.record("category", False)
    b.record("transaction", True)

    a.merge(b)

    assert a.kinds() == ["category", "transaction"]
    assert a.total_created == 2
    assert a.existing["category"] == 1
