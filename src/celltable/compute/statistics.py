"""Descriptive statistics of table columns.

All the numeric statistics parse the non null cells of the
column as floating point numbers, cells that are not numbers
are skipped. Even though the type of the column should already
guarantee that all its cells are numbers, values are validated
again every time, as cells can be modified freely.

Statistics can't be computed on STRING columns, and most of them
fail when the column doesn't have any value to work with:

* ``mean``, ``median``, ``min``, ``max``, ``sum`` and ``quantile``
  raise :class:`celltable.errors.EmptyColumnError`.
* ``std_dev`` and ``variance`` use the sample (n-1) denominator
  and raise :class:`celltable.errors.InsufficientDataError`
  when less than two values are available.
* ``prod`` of no values is ``1.0``.

The parsed values are reduced through :mod:`pyarrow.compute`.
Quantiles interpolate linearly between the two values
closest to the requested position in the sorted values,
for example the 0.25 quantile of ``[1, 2, 3, 4]`` is at position
``0.25 * 3 = 0.75`` and thus is ``1 + 0.75 * (2 - 1) = 1.75``:

>>> from celltable import Table
>>> table = Table.from_rows(["x"], [["1"], ["2"], ["3"], ["4"]])
>>> quantile(table, "x", [0.25, 0.5])
[1.75, 2.5]
"""

import math
from typing import TYPE_CHECKING, Callable, Sequence

import pyarrow as pa
import pyarrow.compute as pc

from ..dtypes import DataType, format_number, parse_number
from ..errors import (
    EmptyColumnError,
    InsufficientDataError,
    InvalidArgumentError,
    TableError,
)
from .base import cell_at, numeric_values, require_numeric

if TYPE_CHECKING:
    from ..table import Table

__all__ = (
    "mean",
    "median",
    "mode",
    "variance",
    "std_dev",
    "min",
    "max",
    "sum",
    "prod",
    "count",
    "unique",
    "nunique",
    "value_counts",
    "value_counts_in_order",
    "quantile",
    "corr",
    "cov",
    "describe",
    "DESCRIBE_COLUMNS",
)


def _values(table: "Table", idx: int, operation: str) -> pa.Array:
    """The numbers of a column as an Arrow array, unparseable cells are skipped."""
    require_numeric(table, idx, operation)
    return pa.array(numeric_values(table, idx), type=pa.float64())


def _non_empty(values: pa.Array, operation: str, table: "Table", idx: int) -> pa.Array:
    if len(values) == 0:
        raise EmptyColumnError(
            f"No valid values to compute {operation} of column {table.columns[idx]}"
        )
    return values


def _at_least_two(values: pa.Array, operation: str, table: "Table", idx: int) -> pa.Array:
    if len(values) < 2:
        raise InsufficientDataError(
            f"Need at least 2 values to compute {operation} of column {table.columns[idx]}"
        )
    return values


def _mean(table: "Table", idx: int) -> float:
    return pc.mean(_non_empty(_values(table, idx, "mean"), "mean", table, idx)).as_py()


def _median(table: "Table", idx: int) -> float:
    values = _non_empty(_values(table, idx, "median"), "median", table, idx)
    return pc.quantile(values, q=0.5, interpolation="linear")[0].as_py()


def _variance(table: "Table", idx: int) -> float:
    values = _at_least_two(_values(table, idx, "variance"), "variance", table, idx)
    return pc.variance(values, ddof=1).as_py()


def _std_dev(table: "Table", idx: int) -> float:
    values = _values(table, idx, "standard deviation")
    values = _at_least_two(values, "standard deviation", table, idx)
    return pc.stddev(values, ddof=1).as_py()


def _min(table: "Table", idx: int) -> float:
    values = _non_empty(_values(table, idx, "min"), "min", table, idx)
    return pc.min_max(values)["min"].as_py()


def _max(table: "Table", idx: int) -> float:
    values = _non_empty(_values(table, idx, "max"), "max", table, idx)
    return pc.min_max(values)["max"].as_py()


def _quantiles(table: "Table", idx: int, qs: Sequence[float]) -> list[float]:
    for q in qs:
        if not 0.0 <= q <= 1.0:
            raise InvalidArgumentError(f"Quantile must be between 0 and 1: {q}")
    values = _non_empty(_values(table, idx, "quantiles"), "quantiles", table, idx)
    if not qs:
        return []
    return pc.quantile(values, q=list(qs), interpolation="linear").to_pylist()


def mean(table: "Table", column: str) -> float:
    """Arithmetic mean of the values of a column."""
    return _mean(table, table.find_column(column))


def median(table: "Table", column: str) -> float:
    """Middle value of a column, or the mean of the two middle values."""
    return _median(table, table.find_column(column))


def mode(table: "Table", column: str) -> str:
    """Most frequent non null value of a column.

    Works on any column type as it compares the text of the cells.
    When more values are equally frequent, the one seen first wins.
    """
    counts = value_counts_in_order(table, column)
    if not counts:
        raise EmptyColumnError(f"No valid values to compute mode of column {column}")

    best_value, best_count = None, 0
    for value, count in counts.items():
        if count > best_count:
            best_value, best_count = value, count
    return best_value


def variance(table: "Table", column: str) -> float:
    """Sample variance of the values of a column."""
    return _variance(table, table.find_column(column))


def std_dev(table: "Table", column: str) -> float:
    """Sample standard deviation of the values of a column."""
    return _std_dev(table, table.find_column(column))


def min(table: "Table", column: str) -> float:
    """Smallest value of a column."""
    return _min(table, table.find_column(column))


def max(table: "Table", column: str) -> float:
    """Largest value of a column."""
    return _max(table, table.find_column(column))


def sum(table: "Table", column: str) -> float:
    """Total of the values of a column."""
    idx = table.find_column(column)
    return pc.sum(_non_empty(_values(table, idx, "sum"), "sum", table, idx)).as_py()


def prod(table: "Table", column: str) -> float:
    """Product of the values of a column, ``1.0`` when there are none."""
    values = _values(table, table.find_column(column), "product")
    return pc.product(values, min_count=0).as_py()


def count(table: "Table", column: str) -> int:
    """Number of non null cells in a column."""
    return table.non_null_counts[table.find_column(column)]


def unique(table: "Table", column: str) -> list[str]:
    """Distinct non null values of a column, sorted."""
    return sorted(value_counts_in_order(table, column))


def nunique(table: "Table", column: str) -> int:
    """Number of distinct non null values of a column."""
    return len(value_counts_in_order(table, column))


def value_counts(table: "Table", column: str) -> dict[str, int]:
    """How many times each non null value appears, sorted by value."""
    counts = value_counts_in_order(table, column)
    return {value: counts[value] for value in sorted(counts)}


def value_counts_in_order(table: "Table", column: str) -> dict[str, int]:
    """How many times each non null value appears, in order of first appearance."""
    idx = table.find_column(column)
    counts: dict[str, int] = {}
    for row in table.rows:
        cell = cell_at(row, idx)
        if cell:
            counts[cell] = counts.get(cell, 0) + 1
    return counts


def quantile(table: "Table", column: str, qs: Sequence[float]) -> list[float]:
    """Compute the requested quantiles of a column.

    :param qs: The quantiles to compute, each of them in the ``[0, 1]`` range.
    """
    return _quantiles(table, table.find_column(column), qs)


def _numeric_columns(table: "Table") -> list[int]:
    return [
        idx for idx, dtype in enumerate(table.column_types) if dtype != DataType.STRING
    ]


def _paired_values(table: "Table", x_idx: int, y_idx: int) -> tuple[pa.Array, pa.Array]:
    """Values of two columns for the rows where both of them are numbers."""
    xs, ys = [], []
    for row in table.rows:
        x = parse_number(cell_at(row, x_idx))
        y = parse_number(cell_at(row, y_idx))
        if x is not None and y is not None:
            xs.append(x)
            ys.append(y)
    return pa.array(xs, type=pa.float64()), pa.array(ys, type=pa.float64())


def _deviations(values: pa.Array) -> pa.Array:
    return pc.subtract(values, pc.mean(values))


def _sum_of_products(xs: pa.Array, ys: pa.Array) -> float:
    return pc.sum(pc.multiply(_deviations(xs), _deviations(ys))).as_py()


def corr(table: "Table") -> dict[tuple[str, str], float]:
    """Pearson correlation of every pair of numeric columns.

    The result is keyed by the names of the two columns,
    each pair is reported once with the columns in table order,
    and includes the pairs of a column with itself that are always ``1.0``.
    Pairs without at least two rows where both columns have a value,
    or where a column is constant, have a correlation of ``0.0``.
    """
    result = {}
    numeric = _numeric_columns(table)
    for i, x_idx in enumerate(numeric):
        for y_idx in numeric[i:]:
            key = (table.columns[x_idx], table.columns[y_idx])
            if x_idx == y_idx:
                result[key] = 1.0
                continue

            xs, ys = _paired_values(table, x_idx, y_idx)
            if len(xs) < 2:
                result[key] = 0.0
                continue

            denominator = math.sqrt(_sum_of_products(xs, xs) * _sum_of_products(ys, ys))
            result[key] = _sum_of_products(xs, ys) / denominator if denominator > 0 else 0.0
    return result


def cov(table: "Table") -> dict[tuple[str, str], float]:
    """Sample covariance of every pair of numeric columns.

    Keys are the same as :func:`corr`, the covariance of a column
    with itself is its variance. Pairs without at least two rows
    where both columns have a value have a covariance of ``0.0``.
    """
    result = {}
    numeric = _numeric_columns(table)
    for i, x_idx in enumerate(numeric):
        for y_idx in numeric[i:]:
            key = (table.columns[x_idx], table.columns[y_idx])
            xs, ys = _paired_values(table, x_idx, y_idx)
            if len(xs) < 2:
                result[key] = 0.0
                continue
            result[key] = _sum_of_products(xs, ys) / (len(xs) - 1)
    return result


DESCRIBE_COLUMNS = ("column", "count", "mean", "std", "min", "25%", "50%", "75%", "max")


def describe(table: "Table") -> "Table":
    """Summary statistics of every numeric column.

    Returns a new table with one row for each numeric column,
    statistics that can't be computed are reported as ``NaN``.
    Columns are described by position, so columns
    sharing the same name get their own statistics.
    """
    rows = []
    for idx in _numeric_columns(table):
        row = [
            table.columns[idx],
            str(table.non_null_counts[idx]),
            _stat_or_nan(_mean, table, idx),
            _stat_or_nan(_std_dev, table, idx),
            _stat_or_nan(_min, table, idx),
        ]
        try:
            row.extend(format_number(q) for q in _quantiles(table, idx, [0.25, 0.5, 0.75]))
        except TableError:
            row.extend(["NaN"] * 3)
        row.append(_stat_or_nan(_max, table, idx))
        rows.append(row)

    return table.derive(
        rows,
        columns=list(DESCRIBE_COLUMNS),
        column_types=[DataType.STRING, DataType.INT] + [DataType.FLOAT] * 7,
    )


def _stat_or_nan(
    compute: Callable[["Table", int], float], table: "Table", idx: int
) -> str:
    try:
        return format_number(compute(table, idx))
    except TableError:
        return "NaN"
