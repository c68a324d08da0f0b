"""Rolling, expanding and cumulative computations.

Window functions compute one value for every row of the table,
looking at the row itself and at the rows that precede it.
Their result is a plain list of floats as long as the table,
positions where the value can't be computed are ``NaN``.

Rolling functions look at a fixed size window of the last
``window`` rows, so the first ``window - 1`` rows don't have
enough data and are always ``NaN``:

>>> from celltable import Table
>>> table = Table.from_rows(["x"], [["1"], ["2"], ["3"], ["4"]])
>>> rolling_mean(table, "x", 2)
[nan, 1.5, 2.5, 3.5]

Expanding and cumulative functions look at all the rows
from the beginning of the table up to the current one:

>>> cumsum(table, "x")
[1.0, 3.0, 6.0, 10.0]

Null cells and cells that are not numbers are skipped
by the means, and count as zero for sums.
"""

import math
from typing import TYPE_CHECKING

import pyarrow as pa
import pyarrow.compute as pc

from ..dtypes import parse_number
from ..errors import InvalidArgumentError
from .base import cell_at, numeric_or_nan, require_numeric

if TYPE_CHECKING:
    from ..table import Table

__all__ = (
    "rolling_mean",
    "rolling_sum",
    "rolling_std",
    "expanding_mean",
    "cumsum",
    "cumprod",
    "pct_change",
)

NAN = float("nan")


def _column_values(table: "Table", column: str, operation: str) -> list[float]:
    idx = table.find_column(column)
    require_numeric(table, idx, operation)
    return numeric_or_nan(table, idx)


def _windows(values: list[float], window: int):
    """Yield the window ending at each row, or None when it's incomplete."""
    if window < 1:
        raise InvalidArgumentError(f"Window size must be at least 1: {window}")
    for i in range(len(values)):
        if i < window - 1:
            yield None
        else:
            yield [value for value in values[i - window + 1:i + 1] if not math.isnan(value)]


def rolling_mean(table: "Table", column: str, window: int) -> list[float]:
    """Mean of the last ``window`` values, ``NaN`` when none of them is a number."""
    values = _column_values(table, column, "rolling mean")
    result = []
    for current in _windows(values, window):
        if not current:
            result.append(NAN)
        else:
            result.append(math.fsum(current) / len(current))
    return result


def rolling_sum(table: "Table", column: str, window: int) -> list[float]:
    """Sum of the last ``window`` values."""
    values = _column_values(table, column, "rolling sum")
    result = []
    for current in _windows(values, window):
        if current is None:
            result.append(NAN)
        else:
            result.append(math.fsum(current))
    return result


def rolling_std(table: "Table", column: str, window: int) -> list[float]:
    """Sample standard deviation of the last ``window`` values.

    ``NaN`` when the window has less than two numbers.
    """
    values = _column_values(table, column, "rolling std")
    result = []
    for current in _windows(values, window):
        if current is None or len(current) < 2:
            result.append(NAN)
            continue
        avg = math.fsum(current) / len(current)
        variance = math.fsum((v - avg) ** 2 for v in current) / (len(current) - 1)
        result.append(math.sqrt(variance))
    return result


def expanding_mean(table: "Table", column: str) -> list[float]:
    """Mean of all the values seen so far.

    Rows without a number repeat the mean of the previous rows,
    rows before the first number are ``NaN``.
    """
    values = _column_values(table, column, "expanding mean")
    result = []
    total = 0.0
    count = 0
    for value in values:
        if not math.isnan(value):
            total += value
            count += 1
        result.append(total / count if count else NAN)
    return result


def _nullable_values(table: "Table", column: str, operation: str) -> pa.Array:
    """One value per row, null where the cell is not a number."""
    idx = table.find_column(column)
    require_numeric(table, idx, operation)
    return pa.array(
        [parse_number(cell_at(row, idx)) for row in table.rows], type=pa.float64()
    )


def cumsum(table: "Table", column: str) -> list[float]:
    """Running total of the column, cells that are not numbers add nothing."""
    values = _nullable_values(table, column, "cumulative sum")
    return pc.cumulative_sum(pc.fill_null(values, 0.0)).to_pylist()


def cumprod(table: "Table", column: str) -> list[float]:
    """Running product of the column, cells that are not numbers are skipped."""
    values = _nullable_values(table, column, "cumulative product")
    return pc.cumulative_prod(pc.fill_null(values, 1.0)).to_pylist()


def pct_change(table: "Table", column: str, periods: int = 1) -> list[float]:
    """Relative change of each value from the value ``periods`` rows before.

    ``NaN`` for the first ``periods`` rows, when either value
    is not a number or when the previous value is zero.
    """
    if periods < 1:
        raise InvalidArgumentError(f"Periods must be at least 1: {periods}")
    values = _column_values(table, column, "percent change")
    result = []
    for i, current in enumerate(values):
        if i < periods:
            result.append(NAN)
            continue
        previous = values[i - periods]
        if math.isnan(current) or math.isnan(previous) or previous == 0.0:
            result.append(NAN)
        else:
            result.append((current - previous) / previous)
    return result
