"""Combine two or more tables.

Tables can be combined by matching the values of key columns
through :func:`merge`, by position through :func:`join`
or by appending rows or columns through :func:`concat`.

Merging works like SQL joins, for every row of the left table
all the rows of the right table with the same key are looked up
and a new row is emitted for each of them. To avoid scanning
the whole right table for every left row, a hash index of
the right rows is built first::

    index = {key: [right_row_position, ...]}

Then for each row of the left table the matching right rows
are looked up in the index. This has the same result of
comparing every left row with every right row, but takes
linear time in the number of rows.

>>> from celltable import Table
>>> left = Table.from_rows(["k", "v"], [["a", "1"], ["b", "2"]])
>>> right = Table.from_rows(["k", "w"], [["a", "10"]])
>>> merge(left, right, on="k", how="left").rows
[['a', '1', '10'], ['b', '2', '']]

The key columns of the right table are not part of the
result, as they hold the same values of the left keys.
"""

import itertools
from typing import TYPE_CHECKING, Sequence

from ..dtypes import widen
from ..errors import InvalidArgumentError, SchemaMismatchError
from .base import cell_at, padded

if TYPE_CHECKING:
    from ..table import Table

__all__ = ("merge", "concat", "join")

_MERGE_MODES = ("inner", "left", "right", "outer")


def _as_list(columns: str | Sequence[str] | None) -> list[str]:
    if columns is None:
        return []
    if isinstance(columns, str):
        return [columns]
    return list(columns)


def merge(
    left: "Table",
    right: "Table",
    on: str | Sequence[str] | None = None,
    how: str = "inner",
    left_on: str | Sequence[str] | None = None,
    right_on: str | Sequence[str] | None = None,
) -> "Table":
    """Merge two tables matching the values of their key columns.

    :param on: The key columns, when they have the same name in both tables.
    :param how: ``"inner"`` only emits rows with a match in both tables,
                ``"left"`` also emits the left rows without a match,
                ``"right"`` also emits the right rows without a match,
                ``"outer"`` emits the unmatched rows of both tables.
    :param left_on: The key columns of the left table.
    :param right_on: The key columns of the right table.

    When no key is provided, the columns that the two
    tables have in common are used as keys.

    Rows are emitted in the order of the left table, and for each
    left row in the order of the matching right rows. Unmatched
    right rows follow, with their key values in the left key columns.
    """
    if how not in _MERGE_MODES:
        raise InvalidArgumentError(f"Unsupported merge mode: {how}")

    if on is not None:
        left_keys = right_keys = _as_list(on)
    elif left_on is not None or right_on is not None:
        left_keys, right_keys = _as_list(left_on), _as_list(right_on)
    else:
        left_keys = right_keys = [name for name in left.columns if name in right.columns]
        if not left_keys:
            raise InvalidArgumentError("No common columns to merge on")

    if len(left_keys) != len(right_keys):
        raise SchemaMismatchError(
            f"Merge needs the same number of keys on both sides: {left_keys} and {right_keys}"
        )

    left_indices = [left.find_column(name) for name in left_keys]
    right_indices = [right.find_column(name) for name in right_keys]
    right_kept = [idx for idx in range(len(right.columns)) if idx not in right_indices]
    left_width = len(left.columns)

    index: dict[tuple[str, ...], list[int]] = {}
    for position, row in enumerate(right.rows):
        key = tuple(cell_at(row, idx) for idx in right_indices)
        index.setdefault(key, []).append(position)

    rows = []
    matched = set()
    for row in left.rows:
        key = tuple(cell_at(row, idx) for idx in left_indices)
        matches = index.get(key, [])
        for position in matches:
            right_row = right.rows[position]
            rows.append(padded(row, left_width) + [cell_at(right_row, idx) for idx in right_kept])
            matched.add(position)
        if not matches and how in ("left", "outer"):
            rows.append(padded(row, left_width) + [""] * len(right_kept))

    column_types = list(left.column_types)
    if how in ("right", "outer"):
        for position, right_row in enumerate(right.rows):
            if position in matched:
                continue
            row = [""] * left_width
            for left_idx, right_idx in zip(left_indices, right_indices):
                row[left_idx] = cell_at(right_row, right_idx)
            rows.append(row + [cell_at(right_row, idx) for idx in right_kept])
        for left_idx, right_idx in zip(left_indices, right_indices):
            column_types[left_idx] = widen(column_types[left_idx], right.column_types[right_idx])

    return left.derive(
        rows,
        columns=left.columns + [right.columns[idx] for idx in right_kept],
        column_types=column_types + [right.column_types[idx] for idx in right_kept],
    )


def concat(tables: Sequence["Table"], axis: int = 0, ignore_index: bool = False) -> "Table":
    """Concatenate tables by rows or by columns.

    :param axis: ``0`` appends the rows of all the tables, which must
                 have the same columns in the same order. ``1`` appends
                 the columns, the tables must have the same number of rows.
    :param ignore_index: Accepted for compatibility with dataframe libraries,
                         tables have no index to renumber.
    """
    if axis not in (0, 1):
        raise InvalidArgumentError(f"Unsupported concat axis: {axis}")
    if not tables:
        from ..table import Table

        return Table()

    first = tables[0]
    if axis == 0:
        column_types = list(first.column_types)
        for table in tables[1:]:
            if table.columns != first.columns:
                raise SchemaMismatchError(
                    f"Cannot concatenate tables with different columns: "
                    f"{first.columns} and {table.columns}"
                )
            column_types = [widen(a, b) for a, b in zip(column_types, table.column_types)]
        rows = list(itertools.chain.from_iterable(table.rows for table in tables))
        return first.derive(rows, column_types=column_types)

    for table in tables[1:]:
        if len(table.rows) != len(first.rows):
            raise SchemaMismatchError(
                f"Cannot concatenate tables with {len(first.rows)} and {len(table.rows)} rows"
            )
    rows = [
        list(itertools.chain.from_iterable(
            padded(table.rows[position], len(table.columns)) for table in tables
        ))
        for position in range(len(first.rows))
    ]
    return first.derive(
        rows,
        columns=list(itertools.chain.from_iterable(table.columns for table in tables)),
        column_types=list(itertools.chain.from_iterable(table.column_types for table in tables)),
    )


def join(left: "Table", right: "Table", how: str = "left") -> "Table":
    """Join two tables by row position.

    :param how: ``"left"`` keeps all the rows of the left table,
                filling the right columns with nulls when the right
                table is shorter. ``"inner"`` keeps only the positions
                present in both tables.
    """
    if how == "left":
        count = len(left.rows)
    elif how == "inner":
        count = min(len(left.rows), len(right.rows))
    else:
        raise InvalidArgumentError(f"Unsupported join mode: {how}")

    right_width = len(right.columns)
    rows = []
    for position in range(count):
        right_row = right.rows[position] if position < len(right.rows) else []
        rows.append(padded(left.rows[position], len(left.columns)) + padded(right_row, right_width))

    return left.derive(
        rows,
        columns=left.columns + right.columns,
        column_types=left.column_types + right.column_types,
    )
