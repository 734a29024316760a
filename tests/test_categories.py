import random
from datetime import date
from decimal import Decimal

from db import Category
from db.client import session_scope
from sqlalchemy import select

from household_ledger.categories import (
    category_type_conflicts,
    find_or_create_category,
    observed_categories,
    resolve_categories,
)
from household_ledger.models import PredefinedCategory, SeedStats, TransactionRecord


def _tx(category, type="expense", amount="1000"):
    return TransactionRecord(
        type=type, amount=Decimal(amount), category_name=category, date=date(2024, 3, 1)
    )


def _all_categories(session):
    rows = session.execute(select(Category).order_by(Category.id)).scalars().all()
    return [(c.name, c.type, c.parent_id, c.is_default) for c in rows]


def test_find_or_create_is_keyed_by_name_type_parent(db_url):
    with session_scope(database_url=db_url) as session:
        first = find_or_create_category(session, name="식비", type="expense")
        again = find_or_create_category(session, name="식비", type="expense", is_default=True)
        income = find_or_create_category(session, name="식비", type="income")
        child = find_or_create_category(
            session, name="식비", type="expense", parent_id=first.category.id
        )

        assert first.created and not again.created
        assert again.category.id == first.category.id
        # An existing row is never updated.
        assert again.category.is_default is False
        assert income.created and income.category.id != first.category.id
        assert child.created and child.category.parent_id == first.category.id


def test_fifty_rows_one_mapped_category(db_url):
    records = [_tx("식비") for _ in range(50)]
    mapping = [PredefinedCategory("식비", "생활비", "expense")]

    with session_scope(database_url=db_url) as session:
        ids = resolve_categories(session, observed_categories(records), mapping)
        rows = _all_categories(session)

    assert len(rows) == 2
    parent, child = rows
    assert parent[0] == "생활비" and parent[2] is None and parent[3] is True
    assert child[0] == "식비" and child[3] is False
    assert set(ids) == {("식비", "expense")}


def test_resolution_is_idempotent_and_order_independent(db_url):
    records = [_tx(name) for name in ("식비", "교통", "월세", "식비", "카페")]
    mapping = [
        PredefinedCategory("식비", "생활비", "expense"),
        PredefinedCategory("교통", "생활비", "expense"),
        PredefinedCategory("월세", "주거비", "expense"),
    ]

    with session_scope(database_url=db_url) as session:
        first = resolve_categories(session, observed_categories(records), mapping)
        before = _all_categories(session)

    shuffled = list(records)
    random.Random(7).shuffle(shuffled)
    stats = SeedStats()
    with session_scope(database_url=db_url) as session:
        second = resolve_categories(session, observed_categories(shuffled), mapping, stats=stats)
        after = _all_categories(session)

    assert first == second
    assert before == after
    assert stats.total_created == 0
    assert stats.existing["parent_category"] == 2
    assert stats.existing["category"] == 4


def test_unmapped_child_is_top_level_and_unused_mapping_is_not_created(db_url):
    records = [_tx("카페")]
    mapping = [PredefinedCategory("교통", "생활비", "expense")]

    with session_scope(database_url=db_url) as session:
        resolve_categories(session, observed_categories(records), mapping)
        rows = _all_categories(session)

    assert rows == [("생활비", "expense", None, True), ("카페", "expense", None, False)]


def test_mapping_type_wins_over_observed_type(db_url):
    records = [_tx("보너스", type="expense")]
    mapping = [PredefinedCategory("보너스", "근로소득", "income")]

    with session_scope(database_url=db_url) as session:
        ids = resolve_categories(session, observed_categories(records), mapping)
        child = session.get(Category, ids[("보너스", "expense")])
        assert child.type == "income"
        assert session.get(Category, child.parent_id).name == "근로소득"


def test_parent_without_name_is_skipped(db_url):
    records = [_tx("용돈")]
    mapping = [PredefinedCategory("용돈", None, "expense")]
    stats = SeedStats()

    with session_scope(database_url=db_url) as session:
        resolve_categories(session, observed_categories(records), mapping, stats=stats)
        rows = _all_categories(session)

    assert rows == [("용돈", "expense", None, False)]
    assert stats.kinds() == ["category"]


def test_observed_categories_and_conflicts():
    records = [_tx("식비"), _tx("환급", "income"), _tx("식비"), _tx("환급", "expense")]

    assert observed_categories(records) == [
        ("식비", "expense"),
        ("환급", "income"),
        ("환급", "expense"),
    ]
    assert category_type_conflicts(records) == ["환급"]
