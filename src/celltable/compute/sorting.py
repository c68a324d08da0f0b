"""Sorting, ranking and deduplication of rows.

Sorting compares the raw text of the cells, so it's
lexicographic even for numeric columns (``"10" < "9"``).
When more columns are provided they are compared in order,
and the next column is only looked at when the previous ones are equal.

A row that is too short to have one of the key cells
is never considered smaller than another row for that key,
the comparison moves on to the next key instead.
Sorting is stable, rows that compare equal keep their order.

>>> from celltable import Table
>>> table = Table.from_rows(["name", "age"], [["b", "3"], ["a", "5"], ["b", "1"]])
>>> sort_values(table, ["name", "age"], [True, False])
>>> table.rows
[['a', '5'], ['b', '3'], ['b', '1']]

Ranking instead compares cells as numbers, see :func:`rank`.
"""

import functools
import logging
from typing import TYPE_CHECKING, Sequence

from ..dtypes import format_number, parse_number
from ..errors import InvalidArgumentError
from .base import cell_at, require_numeric

if TYPE_CHECKING:
    from ..table import Table

log = logging.getLogger(__name__)

__all__ = ("sort_values", "sort_index", "rank", "duplicated", "drop_duplicates")

_RANK_METHODS = ("first", "average", "min", "max", "dense")


def sort_values(
    table: "Table", by: str | Sequence[str], ascending: bool | Sequence[bool] = True
) -> None:
    """Sort the rows of the table in place by the values of one or more columns.

    :param by: The column or columns to sort by, in order of priority.
    :param ascending: The direction of the sort, one for each column
                      or a single one for all of them.
    """
    keys = [by] if isinstance(by, str) else list(by)
    if isinstance(ascending, bool):
        directions = [ascending] * len(keys)
    else:
        directions = list(ascending)
    if len(keys) != len(directions):
        raise InvalidArgumentError(
            f"Sort columns and directions must have the same size: {len(keys)} != {len(directions)}"
        )
    indices = [table.find_column(name) for name in keys]

    def compare(a: list[str], b: list[str]) -> int:
        for idx, ascending_order in zip(indices, directions):
            if idx >= len(a) or idx >= len(b) or a[idx] == b[idx]:
                continue
            result = -1 if a[idx] < b[idx] else 1
            return result if ascending_order else -result
        return 0

    table.rows.sort(key=functools.cmp_to_key(compare))
    table.refresh_caches()
    log.debug("Sorted %d rows by %s", len(table.rows), keys)


def sort_index(table: "Table", ascending: bool = True) -> None:
    """Sort the rows in place by their position.

    Rows are already in position order, so only
    a descending sort changes the table, reversing it.
    """
    if not ascending:
        table.rows.reverse()
    table.refresh_caches()


def rank(table: "Table", column: str, method: str = "first") -> "Table":
    """Rank the rows by the numeric value of a column.

    Returns a copy of the table with an additional ``<column>_rank`` column,
    rows whose cell is not a number have an empty rank.

    :param method: How equal values are ranked.
                   ``"first"`` gives them distinct ranks in order of appearance,
                   ``"average"`` gives all of them the average of their ranks,
                   ``"min"`` and ``"max"`` the lowest or highest of their ranks,
                   ``"dense"`` like ``"min"`` but ranks of the following
                   values don't skip the positions taken by the ties.
    """
    idx = table.find_column(column)
    require_numeric(table, idx, "rank")
    if method not in _RANK_METHODS:
        raise InvalidArgumentError(f"Unsupported rank method: {method}")

    values = []
    for position, row in enumerate(table.rows):
        value = parse_number(cell_at(row, idx))
        if value is not None:
            values.append((value, position))
    values.sort()

    ranks = [""] * len(table.rows)
    if method == "first":
        for order, (_, position) in enumerate(values, start=1):
            ranks[position] = str(order)
    else:
        dense = 0
        start = 0
        while start < len(values):
            end = start
            while end + 1 < len(values) and values[end + 1][0] == values[start][0]:
                end += 1
            dense += 1
            tied_rank = {
                "average": format_number((start + end + 2) / 2.0),
                "min": str(start + 1),
                "max": str(end + 1),
                "dense": str(dense),
            }[method]
            for _, position in values[start:end + 1]:
                ranks[position] = tied_rank
            start = end + 1

    result = table.copy()
    result.add_column(f"{column}_rank", ranks)
    return result


def duplicated(
    table: "Table", subset: Sequence[str] | None = None, keep_first: bool = True
) -> list[bool]:
    """Tell for every row if it repeats another row.

    Rows are compared only on the ``subset`` columns, or on all
    the columns when no subset is provided.

    :param keep_first: When true the first occurrence of a row is not
                       a duplicate and the following ones are,
                       when false the last occurrence is kept instead.
    """
    if subset:
        indices = [table.find_column(name) for name in subset]
    else:
        indices = list(range(len(table.columns)))

    positions = range(len(table.rows))
    if not keep_first:
        positions = reversed(positions)

    result = [False] * len(table.rows)
    seen = set()
    for position in positions:
        key = tuple(cell_at(table.rows[position], idx) for idx in indices)
        if key in seen:
            result[position] = True
        else:
            seen.add(key)
    return result


def drop_duplicates(
    table: "Table", subset: Sequence[str] | None = None, keep_first: bool = True
) -> "Table":
    """Return a table without the rows :func:`duplicated` reports."""
    flags = duplicated(table, subset, keep_first)
    return table.derive([row for row, duplicate in zip(table.rows, flags) if not duplicate])
