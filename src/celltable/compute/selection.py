"""Select rows, columns and cells of a table.

Selection can happen by label, using the names of the columns,
or by position, using their index. Rows have no labels,
so they are always selected by position::

    table.loc([0, 2], ["city", "n_employees"])
    table.iloc([0, 2], [0, 2])

Both return a new table with the requested rows and columns
in the requested order, duplicates are allowed, so ``loc([0, 0], ...)``
returns the first row twice.

Rows can also be selected by their content through
:func:`filter`, which accepts any predicate receiving the row,
or through :func:`query` which understands simple
``<column> <operator> <value>`` expressions:

>>> from celltable import Table
>>> table = Table.from_rows(["city", "shop"], [["Rome", "A"], ["Milan", "B"], ["Rome", "C"]])
>>> query(table, "city == Rome").get_column("shop")
['A', 'C']
"""

import logging
import operator
import random
from typing import TYPE_CHECKING, Callable, Sequence

from ..dtypes import parse_number
from ..errors import ColumnNotFoundError, IndexOutOfRangeError, InvalidArgumentError
from .base import cell_at

if TYPE_CHECKING:
    from ..table import Table

log = logging.getLogger(__name__)

_QUERY_OPERATORS: dict[str, Callable[[object, object], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def iat(table: "Table", row: int, column: int) -> str:
    """Get a single cell by row and column position.

    Ragged rows read as ``""`` for the missing cells,
    but positions outside of the table bounds are an error.
    """
    if row < 0 or row >= len(table.rows):
        raise IndexOutOfRangeError(f"Row index out of range: {row}")
    if column < 0 or column >= len(table.columns):
        raise IndexOutOfRangeError(f"Column index out of range: {column}")
    return cell_at(table.rows[row], column)


def at(table: "Table", row: int, column: str) -> str:
    """Get a single cell by row position and column name."""
    return iat(table, row, table.find_column(column))


def loc(table: "Table", rows: Sequence[int], columns: Sequence[str]) -> "Table":
    """Select rows by position and columns by name.

    Row positions outside of the table are skipped,
    unknown column names are an error.
    """
    indices = [table.find_column(name) for name in columns]
    return _select(table, rows, indices)


def iloc(table: "Table", rows: Sequence[int], columns: Sequence[int]) -> "Table":
    """Select rows and columns by position.

    Positions outside of the table are skipped.
    """
    indices = [idx for idx in columns if 0 <= idx < len(table.columns)]
    return _select(table, rows, indices)


def _select(table: "Table", rows: Sequence[int], indices: list[int]) -> "Table":
    selected = [
        [cell_at(table.rows[row], idx) for idx in indices]
        for row in rows
        if 0 <= row < len(table.rows)
    ]
    return table.derive(
        selected,
        columns=[table.columns[idx] for idx in indices],
        column_types=[table.column_types[idx] for idx in indices],
    )


def filter(table: "Table", predicate: Callable[[list[str]], bool]) -> "Table":
    """Keep only the rows for which the predicate is true.

    The predicate receives the cells of each row,
    the order of the rows is preserved.
    """
    return table.derive([row for row in table.rows if predicate(row)])


def filter_rows(table: "Table", column: str, value: str) -> "Table":
    """Keep only the rows where ``column`` is exactly ``value``."""
    idx = table.find_column(column)
    return filter(table, lambda row: idx < len(row) and row[idx] == value)


def query(table: "Table", expression: str) -> "Table":
    """Filter rows using a ``<column> <operator> <value>`` expression.

    Supported operators are ``==``, ``!=``, ``<``, ``<=``, ``>``, ``>=``.
    Equality compares the exact text of the cells, like :func:`filter_rows`,
    so ``007`` doesn't match ``7``. The ordering operators compare
    numbers when both the cell and the value are numbers, the text otherwise.

    Expressions that can't be understood don't raise,
    they return a copy of the whole table.
    """
    tokens = expression.split(" ")
    if len(tokens) != 3 or tokens[1] not in _QUERY_OPERATORS:
        log.warning("Unable to parse query %r, returning all rows", expression)
        return table.copy()

    column, op, value = tokens
    try:
        idx = table.find_column(column)
    except ColumnNotFoundError:
        log.warning("Unknown column in query %r, returning all rows", expression)
        return table.copy()

    compare = _QUERY_OPERATORS[op]
    numeric_value = None if op in ("==", "!=") else parse_number(value)

    def predicate(row: list[str]) -> bool:
        if idx >= len(row):
            return False
        cell = row[idx]
        numeric_cell = parse_number(cell)
        if numeric_cell is not None and numeric_value is not None:
            return compare(numeric_cell, numeric_value)
        return compare(cell, value)

    return filter(table, predicate)


def sample(
    table: "Table", n: int, replace: bool = False, seed: int | None = None
) -> "Table":
    """Randomly pick ``n`` rows.

    Without replacement, asking for at least as many rows
    as the table has returns a copy of the whole table.

    :param n: How many rows to pick.
    :param replace: If the same row can be picked more than once.
    :param seed: Seed of the random generator, for reproducible samples.
    """
    if n < 0:
        raise InvalidArgumentError(f"Sample size must be non negative: {n}")
    if not replace and n >= len(table.rows):
        return table.copy()

    rng = random.Random(seed)
    if replace:
        if not table.rows:
            return table.derive([])
        picked = [rng.randrange(len(table.rows)) for _ in range(n)]
    else:
        picked = rng.sample(range(len(table.rows)), n)
    return table.derive([table.rows[idx] for idx in picked])


def nlargest(table: "Table", n: int, column: str) -> "Table":
    """The ``n`` rows with the largest numeric values in ``column``."""
    return _nsorted(table, n, column, descending=True)


def nsmallest(table: "Table", n: int, column: str) -> "Table":
    """The ``n`` rows with the smallest numeric values in ``column``."""
    return _nsorted(table, n, column, descending=False)


def _nsorted(table: "Table", n: int, column: str, descending: bool) -> "Table":
    idx = table.find_column(column)
    candidates = []
    for position, row in enumerate(table.rows):
        value = parse_number(cell_at(row, idx))
        if value is not None:
            candidates.append((value, position))

    # sorted() is stable, rows with equal values keep their order.
    candidates = sorted(candidates, key=lambda item: item[0], reverse=descending)
    return table.derive([table.rows[position] for _, position in candidates[:n]])
