"""Handling of missing data.

Null cells (empty text) can be dropped or filled.

Dropping happens by row through :func:`dropna`, which can
remove rows with any null cell or only rows made entirely of nulls.

Filling happens by column and modifies the table in place.
A column can be filled with a constant value (:func:`fillna_value`),
by carrying the previous or next value (:func:`fillna_method`),
or through an :class:`Imputer` that decides the replacement
value using one of the supported strategies:

>>> from celltable import Table
>>> table = Table.from_rows(["x"], [["1"], [""], ["3"], [""]])
>>> Imputer.mean().apply(table, "x")
>>> table.get_column("x")
['1', '2.0', '3', '2.0']
>>> table.null_positions
[[]]

Imputers are plain values identifying a strategy,
only the constant strategy carries its own fill value.
Strategies that compute a number (mean, median and linear interpolation)
can't be applied to STRING columns.
"""

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from ..dtypes import format_number, infer_type, parse_number, to_cell, widen
from ..errors import EmptyColumnError, InvalidArgumentError
from . import statistics
from .base import cell_at, require_numeric

if TYPE_CHECKING:
    from ..table import Table

log = logging.getLogger(__name__)

__all__ = (
    "ImputeStrategy",
    "Imputer",
    "dropna",
    "fillna_value",
    "fillna_method",
    "fillna_with_imputer",
    "interpolate",
)


def dropna(table: "Table", how: str = "any") -> "Table":
    """Drop rows that contain null cells.

    :param how: ``"any"`` drops rows with at least one null cell,
                ``"all"`` drops only rows where every cell is null.
    """
    if how == "any":
        keep = all
    elif how == "all":
        keep = any
    else:
        raise InvalidArgumentError(f"Unsupported dropna mode: {how}")
    return table.derive([row for row in table.rows if keep(row)])


def fillna_value(table: "Table", column: str, value: Any) -> None:
    """Replace the null cells of a column with ``value``.

    Values that are not text are converted like the bulk loader does,
    so ``0`` fills the cells with ``"0"``.
    """
    idx = table.find_column(column)
    _fill_nulls(table, idx, to_cell(value))
    table.refresh_caches()


def fillna_method(table: "Table", column: str, method: str = "ffill") -> None:
    """Fill the null cells of a column with neighbouring values.

    :param method: ``"ffill"`` (or ``"pad"``) carries forward the last value seen,
                   ``"bfill"`` (or ``"backfill"``) carries backward the next one.
                   Nulls without a value to carry remain null.
    """
    idx = table.find_column(column)
    if method in ("ffill", "pad"):
        _forward_fill(table, idx)
    elif method in ("bfill", "backfill"):
        _backward_fill(table, idx)
    else:
        raise InvalidArgumentError(f"Unsupported fill method: {method}")
    table.refresh_caches()


def fillna_with_imputer(table: "Table", column: str, imputer: "Imputer") -> None:
    """Fill the null cells of a column using an :class:`Imputer`."""
    imputer.apply(table, column)


def interpolate(table: "Table", column: str, method: str = "linear") -> "Table":
    """Return a copy of the table with the null cells of a column interpolated.

    Only internal cells are interpolated, a null cell is replaced only
    when there is a number both before and after it. The interpolated value
    is proportional to the distance in rows from the two numbers.
    """
    idx = table.find_column(column)
    require_numeric(table, idx, "interpolation")
    if method != "linear":
        raise InvalidArgumentError(f"Unsupported interpolation method: {method}")

    result = table.copy()
    _interpolate_linear(result, idx)
    result.refresh_caches()
    return result


def _fill_nulls(table: "Table", idx: int, value: str) -> int:
    """Write value in the null cells of a column, return how many were filled."""
    filled = 0
    for row in table.rows:
        if idx < len(row) and not row[idx]:
            row[idx] = value
            filled += 1
    if filled and value:
        table.column_types[idx] = widen(table.column_types[idx], infer_type(value))
    return filled


def _forward_fill(table: "Table", idx: int) -> None:
    last_valid = ""
    for row in table.rows:
        if idx >= len(row):
            continue
        if row[idx]:
            last_valid = row[idx]
        elif last_valid:
            row[idx] = last_valid


def _backward_fill(table: "Table", idx: int) -> None:
    next_valid = ""
    for row in reversed(table.rows):
        if idx >= len(row):
            continue
        if row[idx]:
            next_valid = row[idx]
        elif next_valid:
            row[idx] = next_valid


def _nearest_number(table: "Table", idx: int, positions: range) -> tuple[int, float] | None:
    for position in positions:
        value = parse_number(cell_at(table.rows[position], idx))
        if value is not None:
            return position, value
    return None


def _interpolate_linear(table: "Table", idx: int) -> None:
    rows = table.rows
    for i in range(1, len(rows) - 1):
        if idx >= len(rows[i]) or rows[i][idx]:
            continue

        previous = _nearest_number(table, idx, range(i - 1, -1, -1))
        following = _nearest_number(table, idx, range(i + 1, len(rows)))
        if previous is None or following is None:
            continue

        (prev_idx, prev_val), (next_idx, next_val) = previous, following
        ratio = (i - prev_idx) / (next_idx - prev_idx)
        interpolated = format_number(prev_val + ratio * (next_val - prev_val))
        rows[i][idx] = interpolated
        table.column_types[idx] = widen(table.column_types[idx], infer_type(interpolated))


class ImputeStrategy(enum.Enum):
    """The strategies an :class:`Imputer` can use to fill missing values."""

    MEAN = "mean"
    MEDIAN = "median"
    MODE = "mode"
    CONSTANT = "constant"
    FORWARD_FILL = "ffill"
    BACKWARD_FILL = "bfill"
    LINEAR_INTERPOLATION = "linear"


@dataclass(frozen=True)
class Imputer:
    """Fill the null cells of one column of a table.

    The imputer is identified by its strategy, the
    constant strategy also requires the value to fill::

        Imputer(ImputeStrategy.MEDIAN)
        Imputer.constant("unknown")

    Applying an imputer modifies the table in place
    and keeps the null tracking of the table up to date.
    """

    strategy: ImputeStrategy
    value: Any = ""

    @classmethod
    def mean(cls) -> "Imputer":
        return cls(ImputeStrategy.MEAN)

    @classmethod
    def median(cls) -> "Imputer":
        return cls(ImputeStrategy.MEDIAN)

    @classmethod
    def mode(cls) -> "Imputer":
        return cls(ImputeStrategy.MODE)

    @classmethod
    def constant(cls, value: Any) -> "Imputer":
        return cls(ImputeStrategy.CONSTANT, value)

    @classmethod
    def forward_fill(cls) -> "Imputer":
        return cls(ImputeStrategy.FORWARD_FILL)

    @classmethod
    def backward_fill(cls) -> "Imputer":
        return cls(ImputeStrategy.BACKWARD_FILL)

    @classmethod
    def linear_interpolation(cls) -> "Imputer":
        return cls(ImputeStrategy.LINEAR_INTERPOLATION)

    def apply(self, table: "Table", column: str) -> None:
        """Fill the null cells of ``column`` in ``table``."""
        _IMPUTERS[self.strategy](self, table, column)


def _fill_all(table: "Table", column: str, value: str, strategy: str) -> None:
    """Fill every null cell of a column and update its caches directly."""
    idx = table.find_column(column)
    _fill_nulls(table, idx, value)
    if value:
        table.null_positions[idx] = []
        table.non_null_counts[idx] = sum(1 for row in table.rows if idx < len(row))
    else:
        table.refresh_caches()
    log.info("%s imputation performed on column %r with value: %r", strategy, column, value)


def _impute_statistic(
    table: "Table", column: str, strategy: str, compute: Callable[["Table", str], float | str]
) -> None:
    try:
        value = compute(table, column)
    except EmptyColumnError:
        log.warning("No values available for %s imputation of column %r", strategy, column)
        return
    if not isinstance(value, str):
        value = format_number(value)
    _fill_all(table, column, value, strategy)


def _impute_mean(imputer: Imputer, table: "Table", column: str) -> None:
    _impute_statistic(table, column, "Mean", statistics.mean)


def _impute_median(imputer: Imputer, table: "Table", column: str) -> None:
    _impute_statistic(table, column, "Median", statistics.median)


def _impute_mode(imputer: Imputer, table: "Table", column: str) -> None:
    _impute_statistic(table, column, "Mode", statistics.mode)


def _impute_constant(imputer: Imputer, table: "Table", column: str) -> None:
    _fill_all(table, column, to_cell(imputer.value), "Constant")


def _impute_forward_fill(imputer: Imputer, table: "Table", column: str) -> None:
    _forward_fill(table, table.find_column(column))
    table.refresh_caches()
    log.info("Forward fill imputation performed on column %r", column)


def _impute_backward_fill(imputer: Imputer, table: "Table", column: str) -> None:
    _backward_fill(table, table.find_column(column))
    table.refresh_caches()
    log.info("Backward fill imputation performed on column %r", column)


def _impute_linear(imputer: Imputer, table: "Table", column: str) -> None:
    idx = table.find_column(column)
    require_numeric(table, idx, "interpolation")
    _interpolate_linear(table, idx)
    table.refresh_caches()
    log.info("Linear interpolation performed on column %r", column)


_IMPUTERS: dict[ImputeStrategy, Callable[[Imputer, "Table", str], None]] = {
    ImputeStrategy.MEAN: _impute_mean,
    ImputeStrategy.MEDIAN: _impute_median,
    ImputeStrategy.MODE: _impute_mode,
    ImputeStrategy.CONSTANT: _impute_constant,
    ImputeStrategy.FORWARD_FILL: _impute_forward_fill,
    ImputeStrategy.BACKWARD_FILL: _impute_backward_fill,
    ImputeStrategy.LINEAR_INTERPOLATION: _impute_linear,
}
