"""Cell by cell transformations of tables.

Most transformations return a new table and leave the original
untouched, the exceptions are :func:`label_encode` and
:func:`apply_function` that modify the column in place.

Categorical columns can be encoded as numbers,
either replacing each value with a label:

>>> from celltable import Table
>>> table = Table.from_rows(["color"], [["red"], ["blue"], ["red"]])
>>> one_hot_encode(table, "color").rows
[['0', '1'], ['1', '0'], ['0', '1']]
>>> label_encode(table, "color")
>>> table.get_column("color"), table.column_types
(['0', '1', '0'], [<DataType.INT: 0>])

Arithmetic between two tables of the same shape works cell by cell
on the columns that are numeric in both tables, cells of other columns
are carried over from the left table.
Comparisons return a grid of booleans with the shape of the tables.
"""

import datetime
import logging
import math
import operator
from typing import TYPE_CHECKING, Callable, Mapping, Sequence

from ..dtypes import DataType, format_number, infer_column_type, parse_number
from ..errors import ColumnTypeError, InvalidArgumentError, SchemaMismatchError
from .base import cell_at, column_cells, padded

if TYPE_CHECKING:
    from ..table import Table

log = logging.getLogger(__name__)

__all__ = (
    "label_encode",
    "one_hot_encode",
    "get_dummies",
    "apply_function",
    "map_values",
    "str_contains",
    "str_startswith",
    "str_endswith",
    "str_replace",
    "str_upper",
    "str_lower",
    "str_strip",
    "str_len",
    "add",
    "subtract",
    "multiply",
    "divide",
    "add_scalar",
    "multiply_scalar",
    "eq",
    "ne",
    "lt",
    "le",
    "gt",
    "ge",
    "where",
    "astype",
    "reset_index",
    "reindex",
    "to_datetime",
    "dt_year",
    "dt_month",
    "dt_day",
    "dt_dayofweek",
)

DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d")


def _require_string(table: "Table", idx: int, operation: str) -> None:
    if table.column_types[idx] != DataType.STRING:
        raise ColumnTypeError(
            f"{operation} applies only to string columns: {table.columns[idx]}"
        )


def label_encode(table: "Table", column: str) -> None:
    """Replace the values of a string column with integer labels in place.

    Labels are assigned from ``0`` in order of first appearance,
    null cells stay null and the column becomes an INT column.
    """
    idx = table.find_column(column)
    _require_string(table, idx, "Label encoding")

    labels: dict[str, str] = {}
    for row in table.rows:
        if idx < len(row) and row[idx]:
            row[idx] = labels.setdefault(row[idx], str(len(labels)))

    table.column_types[idx] = DataType.INT
    table.refresh_caches()
    log.info("Label encoding applied on column %r with %d categories", column, len(labels))


def one_hot_encode(table: "Table", column: str) -> "Table":
    """Replace a string column with one ``0``/``1`` column for each of its values.

    The new columns are named ``<column>_<value>`` and are added at
    the end of the table in order of value, the original column is dropped.
    """
    idx = table.find_column(column)
    _require_string(table, idx, "One-hot encoding")

    cells = column_cells(table, idx)
    result = table.copy()
    for value in sorted({cell for cell in cells if cell}):
        result.add_column(f"{column}_{value}", ["1" if cell == value else "0" for cell in cells])
    result.drop_column(column)
    return result


def get_dummies(table: "Table", columns: Sequence[str]) -> "Table":
    """One-hot encode each of the given columns."""
    result = table.copy()
    for column in columns:
        result = one_hot_encode(result, column)
    return result


def apply_function(table: "Table", column: str, func: Callable[[str], str]) -> None:
    """Replace every cell of a column with the result of ``func`` in place.

    The type of the column is inferred again from the new cells.
    """
    idx = table.find_column(column)
    for row in table.rows:
        if idx < len(row):
            row[idx] = func(row[idx])
    table.column_types[idx] = infer_column_type(column_cells(table, idx))
    table.refresh_caches()


def _transform_cells(table: "Table", column: str, func: Callable[[str], str]) -> "Table":
    result = table.copy()
    apply_function(result, column, func)
    return result


def map_values(table: "Table", column: str, mapping: Mapping[str, str]) -> "Table":
    """Replace the cells of a column found in ``mapping``, others are kept."""
    return _transform_cells(table, column, lambda cell: mapping.get(cell, cell))


def _string_test(
    table: "Table", column: str, suffix: str, test: Callable[[str], bool]
) -> "Table":
    idx = table.find_column(column)
    result = table.copy()
    result.add_column(
        f"{column}_{suffix}",
        ["True" if idx < len(row) and test(row[idx]) else "False" for row in table.rows],
    )
    return result


def str_contains(table: "Table", column: str, pattern: str) -> "Table":
    """Add a ``<column>_contains`` column telling if the cells contain ``pattern``."""
    return _string_test(table, column, "contains", lambda cell: pattern in cell)


def str_startswith(table: "Table", column: str, prefix: str) -> "Table":
    """Add a ``<column>_startswith`` column telling if the cells start with ``prefix``."""
    return _string_test(table, column, "startswith", lambda cell: cell.startswith(prefix))


def str_endswith(table: "Table", column: str, suffix: str) -> "Table":
    """Add a ``<column>_endswith`` column telling if the cells end with ``suffix``."""
    return _string_test(table, column, "endswith", lambda cell: cell.endswith(suffix))


def str_replace(table: "Table", column: str, pattern: str, replacement: str) -> "Table":
    """Replace every occurrence of ``pattern`` in the cells of a column."""
    return _transform_cells(table, column, lambda cell: cell.replace(pattern, replacement))


def str_upper(table: "Table", column: str) -> "Table":
    return _transform_cells(table, column, str.upper)


def str_lower(table: "Table", column: str) -> "Table":
    return _transform_cells(table, column, str.lower)


def str_strip(table: "Table", column: str) -> "Table":
    return _transform_cells(table, column, str.strip)


def str_len(table: "Table", column: str) -> list[int]:
    """Length of every cell of a column, ``0`` for missing cells."""
    return [len(cell) for cell in column_cells(table, table.find_column(column))]


def _require_same_shape(table: "Table", other: "Table") -> None:
    if table.shape != other.shape:
        raise SchemaMismatchError(
            f"Tables must have the same shape: {table.shape} and {other.shape}"
        )


def _numeric_pairs(table: "Table", other: "Table") -> list[bool]:
    return [
        left != DataType.STRING and right != DataType.STRING
        for left, right in zip(table.column_types, other.column_types)
    ]


def _divide(a: float, b: float) -> float:
    if b == 0:
        return math.copysign(math.inf, a) if a else math.nan
    return a / b


def _arithmetic(table: "Table", other: "Table", op: Callable[[float, float], float]) -> "Table":
    _require_same_shape(table, other)
    numeric = _numeric_pairs(table, other)
    width = len(table.columns)

    rows = []
    for row, other_row in zip(table.rows, other.rows):
        cells = padded(row, width)
        for idx in range(width):
            if not numeric[idx]:
                continue
            a = parse_number(cells[idx])
            b = parse_number(cell_at(other_row, idx))
            cells[idx] = "" if a is None or b is None else format_number(op(a, b))
        rows.append(cells)

    return table.derive(
        rows,
        column_types=[
            DataType.FLOAT if is_numeric else dtype
            for is_numeric, dtype in zip(numeric, table.column_types)
        ],
    )


def add(table: "Table", other: "Table") -> "Table":
    """Cell by cell sum of two tables."""
    return _arithmetic(table, other, operator.add)


def subtract(table: "Table", other: "Table") -> "Table":
    """Cell by cell difference of two tables."""
    return _arithmetic(table, other, operator.sub)


def multiply(table: "Table", other: "Table") -> "Table":
    """Cell by cell product of two tables."""
    return _arithmetic(table, other, operator.mul)


def divide(table: "Table", other: "Table") -> "Table":
    """Cell by cell division of two tables.

    Dividing by zero gives an infinity with the sign of the dividend,
    or ``NaN`` when the dividend is zero too.
    """
    return _arithmetic(table, other, _divide)


def _scalar(table: "Table", value: float, op: Callable[[float, float], float]) -> "Table":
    numeric = [dtype != DataType.STRING for dtype in table.column_types]
    rows = []
    for row in table.rows:
        cells = list(row)
        for idx, cell in enumerate(cells):
            number = parse_number(cell)
            if numeric[idx] and number is not None:
                cells[idx] = format_number(op(number, value))
        rows.append(cells)
    return table.derive(
        rows,
        column_types=[
            DataType.FLOAT if is_numeric else dtype
            for is_numeric, dtype in zip(numeric, table.column_types)
        ],
    )


def add_scalar(table: "Table", value: float) -> "Table":
    """Add ``value`` to every number of the numeric columns."""
    return _scalar(table, value, operator.add)


def multiply_scalar(table: "Table", value: float) -> "Table":
    """Multiply every number of the numeric columns by ``value``."""
    return _scalar(table, value, operator.mul)


def _compare(
    table: "Table", other: "Table", op: Callable[[object, object], bool]
) -> list[list[bool]]:
    _require_same_shape(table, other)
    numeric = _numeric_pairs(table, other)

    result = []
    for row, other_row in zip(table.rows, other.rows):
        flags = []
        for idx, is_numeric in enumerate(numeric):
            a, b = cell_at(row, idx), cell_at(other_row, idx)
            if is_numeric:
                a_number, b_number = parse_number(a), parse_number(b)
                if a_number is not None and b_number is not None:
                    flags.append(op(a_number, b_number))
                    continue
            flags.append(op(a, b))
        result.append(flags)
    return result


def eq(table: "Table", other: "Table") -> list[list[bool]]:
    return _compare(table, other, operator.eq)


def ne(table: "Table", other: "Table") -> list[list[bool]]:
    return _compare(table, other, operator.ne)


def lt(table: "Table", other: "Table") -> list[list[bool]]:
    return _compare(table, other, operator.lt)


def le(table: "Table", other: "Table") -> list[list[bool]]:
    return _compare(table, other, operator.le)


def gt(table: "Table", other: "Table") -> list[list[bool]]:
    return _compare(table, other, operator.gt)


def ge(table: "Table", other: "Table") -> list[list[bool]]:
    return _compare(table, other, operator.ge)


def where(table: "Table", condition: Callable[[list[str]], bool], other: str = "") -> "Table":
    """Keep the rows satisfying ``condition``, replace every cell of the others with ``other``."""
    width = len(table.columns)
    rows = [list(row) if condition(row) else [other] * width for row in table.rows]
    return table.derive(rows, columns=list(table.columns), column_types=None)


def _to_int(cell: str) -> str:
    value = parse_number(cell)
    if value is None or not math.isfinite(value):
        return ""
    return str(int(value))


def _to_float(cell: str) -> str:
    value = parse_number(cell)
    return "" if value is None else format_number(value)


_CONVERTERS: dict[DataType, Callable[[str], str]] = {
    DataType.INT: _to_int,
    DataType.FLOAT: _to_float,
    DataType.STRING: lambda cell: cell,
}


def astype(table: "Table", column: str, dtype: DataType | str) -> "Table":
    """Convert the cells of a column to another type.

    :param dtype: The target type, or its name (``"int"``, ``"float"``, ``"string"``).

    Cells that can't be converted become null,
    converting to INT truncates the decimals.
    """
    if isinstance(dtype, str):
        try:
            dtype = DataType[dtype.upper()]
        except KeyError:
            raise InvalidArgumentError(f"Unknown data type: {dtype}") from None

    idx = table.find_column(column)
    convert = _CONVERTERS[dtype]
    result = table.copy()
    for row in result.rows:
        if idx < len(row) and row[idx]:
            row[idx] = convert(row[idx])
    result.column_types[idx] = dtype
    result.refresh_caches()
    return result


def reset_index(table: "Table", drop: bool = False) -> "Table":
    """Add an ``index`` column with the row positions, unless ``drop`` is true."""
    result = table.copy()
    if not drop:
        result.insert_column(0, "index", [str(position) for position in range(len(table.rows))])
    return result


def reindex(table: "Table", indices: Sequence[int]) -> "Table":
    """Rebuild the table with the rows at the given positions.

    Positions outside of the table produce rows of null cells.
    """
    empty = [""] * len(table.columns)
    rows = [table.rows[idx] if 0 <= idx < len(table.rows) else empty for idx in indices]
    return table.derive(rows)


def _parse_date(text: str, formats: Sequence[str] = DATE_FORMATS) -> datetime.date | None:
    for date_format in formats:
        try:
            return datetime.datetime.strptime(text, date_format).date()
        except ValueError:
            continue
    return None


def to_datetime(table: "Table", column: str, format: str = "%Y-%m-%d") -> "Table":
    """Normalize the cells of a column to ISO dates (``YYYY-MM-DD``).

    :param format: The ``strptime`` format of the cells.

    Cells that don't match the format become null.
    """
    def normalize(cell: str) -> str:
        date = _parse_date(cell, (format,)) if cell else None
        return date.isoformat() if date else ""

    result = _transform_cells(table, column, normalize)
    result.column_types[result.find_column(column)] = DataType.STRING
    return result


def _date_parts(table: "Table", column: str, part: Callable[[datetime.date], int]) -> list[int | None]:
    idx = table.find_column(column)
    result = []
    for cell in column_cells(table, idx):
        date = _parse_date(cell) if cell else None
        result.append(part(date) if date else None)
    return result


def dt_year(table: "Table", column: str) -> list[int | None]:
    """Year of the dates in a column, ``None`` where the cell is not a date."""
    return _date_parts(table, column, lambda date: date.year)


def dt_month(table: "Table", column: str) -> list[int | None]:
    """Month of the dates in a column, ``None`` where the cell is not a date."""
    return _date_parts(table, column, lambda date: date.month)


def dt_day(table: "Table", column: str) -> list[int | None]:
    """Day of the month of the dates in a column, ``None`` where the cell is not a date."""
    return _date_parts(table, column, lambda date: date.day)


def dt_dayofweek(table: "Table", column: str) -> list[int | None]:
    """Day of the week of the dates in a column, Monday is ``0``."""
    return _date_parts(table, column, lambda date: date.weekday())
