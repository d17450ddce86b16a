"""
Row filtering for list queries.

Predicates are ANDed. Two deliberate defaults:
- a column that can't be resolved fails the predicate (row excluded);
- an operator we don't recognise passes it (row kept).
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Sequence, Tuple

from core.fields import resolve_field, resolved_value
from core.listing_store import ListingStore
from core.models import FilterPredicate
from core.utils import parse_number, value_text

logger = logging.getLogger("uvicorn.error")

Row = Mapping[str, str]

STRING_OPS = {"eq", "ne", "contains", "not_contains"}
NUMERIC_OPS = {"gt", "ge", "lt", "le"}
PRESENCE_OPS = {"exists", "not_exists"}


def _compare_strings(op: str, cell: str, value) -> bool:
    cell_l = cell.lower()
    needle = value_text(value).lower()
    if op == "eq":
        return cell_l == needle
    if op == "ne":
        return cell_l != needle
    if op == "contains":
        return needle in cell_l
    return needle not in cell_l


def _compare_numbers(op: str, cell: str, value) -> bool:
    left = parse_number(cell)
    right = parse_number(value)
    if left is None or right is None:
        return False
    if op == "gt":
        return left > right
    if op == "ge":
        return left >= right
    if op == "lt":
        return left < right
    return left <= right


def apply_filter(row: Row, predicate: FilterPredicate, columns: Sequence[str]) -> bool:
    resolved = resolve_field(predicate.column, columns)
    if resolved is None:
        return False

    cell = resolved_value(row, predicate.column, resolved)
    op = predicate.op

    if op in STRING_OPS:
        return _compare_strings(op, cell, predicate.value)
    if op in NUMERIC_OPS:
        return _compare_numbers(op, cell, predicate.value)
    if op == "exists":
        return cell.strip() != ""
    if op == "not_exists":
        return cell.strip() == ""
    return True


def filter_rows(
    store: ListingStore,
    predicates: Optional[Sequence[FilterPredicate]],
) -> List[Tuple[int, Row]]:
    """All (index, row) pairs passing every predicate, in store order."""
    predicates = list(predicates or [])
    for p in predicates:
        if p.op not in STRING_OPS | NUMERIC_OPS | PRESENCE_OPS:
            logger.info("Unrecognised filter op %r on %r; treating as pass", p.op, p.column)
    columns = store.columns
    return [
        (i, row)
        for i, row in store.iter_rows()
        if all(apply_filter(row, p, columns) for p in predicates)
    ]
