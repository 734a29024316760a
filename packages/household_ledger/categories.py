"""Two-level category hierarchy resolution for imported transactions.

Exports
-------
- ``find_or_create_category(...)``: idempotent lookup/creation by the natural
  key ``(name, type, parent_id)``. Returns the row and a ``created`` flag.
- ``resolve_categories(...)``: materializes the parents named by a predefined
  mapping, then the children actually referenced by built records, and
  returns the category id for every observed ``(name, type)`` pair.
- ``observed_categories(...)`` / ``category_type_conflicts(...)``: helpers
  over built :class:`~household_ledger.models.TransactionRecord` lists.

Rows are never updated or deleted here; re-running against the same input
only performs lookups.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from db.models.ledger import Category
from sqlalchemy import select
from sqlalchemy.orm import Session

from .logging_setup import get_logger
from .models import PredefinedCategory, SeedStats, TransactionRecord, TransactionType

logger = get_logger("household_ledger.categories")

type CategoryKey = tuple[str, TransactionType]


class CategoryResult(NamedTuple):
    category: Category
    created: bool


def _find(
    session: Session, name: str, type: TransactionType, parent_id: int | None
) -> Category | None:
    parent_clause = (
        Category.parent_id.is_(None) if parent_id is None else Category.parent_id == parent_id
    )
    return (
        session.execute(
            select(Category).where(Category.name == name, Category.type == type, parent_clause)
        )
        .scalars()
        .first()
    )


def find_or_create_category(
    session: Session,
    *,
    name: str,
    type: TransactionType,
    parent_id: int | None = None,
    is_default: bool = False,
) -> CategoryResult:
    """Return the category keyed by ``(name, type, parent_id)``, creating it if absent.

    Parents are created with ``is_default=True`` by the resolver, children with
    ``False``. An existing row is returned untouched even when ``is_default``
    differs. Store errors on insert propagate to the caller.
    """

    existing = _find(session, name, type, parent_id)
    if existing is not None:
        logger.debug("Category exists: %s (%s) parent=%s id=%s", name, type, parent_id, existing.id)
        return CategoryResult(existing, False)

    row = Category(name=name, type=type, parent_id=parent_id, is_default=is_default)
    session.add(row)
    session.flush()

    logger.info("Created category: %s (%s) parent=%s id=%s", name, type, parent_id, row.id)
    return CategoryResult(row, True)


def observed_categories(records: Iterable[TransactionRecord]) -> list[CategoryKey]:
    """Distinct ``(category_name, type)`` pairs in first-seen order."""

    seen: dict[CategoryKey, None] = {}
    for r in records:
        seen.setdefault((r.category_name, r.type), None)
    return list(seen)


def category_type_conflicts(records: Iterable[TransactionRecord]) -> list[str]:
    """Category names observed with both ``income`` and ``expense`` in one batch."""

    types_by_name: dict[str, set[str]] = {}
    for r in records:
        types_by_name.setdefault(r.category_name, set()).add(r.type)
    return sorted(name for name, types in types_by_name.items() if len(types) > 1)


def resolve_categories(
    session: Session,
    observed: Iterable[CategoryKey],
    mapping: Iterable[PredefinedCategory] = (),
    *,
    stats: SeedStats | None = None,
) -> dict[CategoryKey, int]:
    """Resolve every observed ``(name, type)`` to a category id.

    Pass 1 creates or finds each distinct ``(parent_name, type)`` named by
    ``mapping``. Pass 2 handles the observed children: the mapping's type wins
    over the observed one, and the mapped parent (if any) supplies
    ``parent_id``. Mapping entries that no record references are not
    materialized as children.

    The returned dict is keyed by the *observed* pair so callers can look up
    ids straight from their records.
    """

    stats = stats if stats is not None else SeedStats()

    by_child: dict[str, PredefinedCategory] = {}
    parent_keys: dict[CategoryKey, None] = {}
    for entry in mapping:
        by_child.setdefault(entry.child_name, entry)
        if entry.parent_name:
            parent_keys.setdefault((entry.parent_name, entry.type), None)

    parent_ids: dict[CategoryKey, int] = {}
    for parent_name, parent_type in parent_keys:
        res = find_or_create_category(
            session, name=parent_name, type=parent_type, parent_id=None, is_default=True
        )
        stats.record("parent_category", res.created)
        parent_ids[(parent_name, parent_type)] = res.category.id

    resolved: dict[CategoryKey, int] = {}
    for name, observed_type in dict.fromkeys(observed):
        entry = by_child.get(name)
        effective_type = entry.type if entry is not None else observed_type
        parent_id = None
        if entry is not None and entry.parent_name:
            parent_id = parent_ids[(entry.parent_name, entry.type)]
        res = find_or_create_category(
            session, name=name, type=effective_type, parent_id=parent_id, is_default=False
        )
        stats.record("category", res.created)
        resolved[(name, observed_type)] = res.category.id
    return resolved


__all__ = [
    "CategoryKey",
    "CategoryResult",
    "find_or_create_category",
    "observed_categories",
    "category_type_conflicts",
    "resolve_categories",
]
