"""Shared helpers for the compute functions.

The compute functions all work on the rows of a
:class:`celltable.Table` and need the same few
primitives to access them:

* Reading a cell in a way that tolerates ragged rows,
  rows shorter than the number of columns read as null
  for the missing cells.
* Extracting the numeric values of a column, skipping
  null cells and cells that are not numbers.
* Refusing numeric operations on STRING columns.
"""

from typing import TYPE_CHECKING, Sequence

from ..dtypes import DataType, parse_number
from ..errors import ColumnTypeError

if TYPE_CHECKING:
    from ..table import Table

__all__ = ("cell_at", "column_cells", "numeric_values", "numeric_or_nan", "require_numeric", "padded")


def cell_at(row: Sequence[str], index: int) -> str:
    """Get a cell of a row, or ``""`` if the row is too short to have it."""
    return row[index] if index < len(row) else ""


def padded(row: Sequence[str], width: int) -> list[str]:
    """Copy of the row extended with null cells up to ``width``."""
    cells = list(row)
    if len(cells) < width:
        cells.extend([""] * (width - len(cells)))
    return cells


def column_cells(table: "Table", index: int) -> list[str]:
    """All the cells of a column, missing cells of ragged rows are ``""``."""
    return [cell_at(row, index) for row in table.rows]


def numeric_values(table: "Table", index: int) -> list[float]:
    """Numeric values of the non null cells of a column.

    Cells that can't be parsed as numbers are silently skipped.
    """
    values = []
    for row in table.rows:
        value = parse_number(cell_at(row, index))
        if value is not None:
            values.append(value)
    return values


def numeric_or_nan(table: "Table", index: int) -> list[float]:
    """One value per row, null and unparseable cells become NaN."""
    values = []
    for row in table.rows:
        value = parse_number(cell_at(row, index))
        values.append(float("nan") if value is None else value)
    return values


def require_numeric(table: "Table", index: int, operation: str) -> None:
    """Fail with :class:`ColumnTypeError` if the column is a STRING column."""
    if table.column_types[index] == DataType.STRING:
        raise ColumnTypeError(
            f"Cannot compute {operation} for string column: {table.columns[index]}"
        )
