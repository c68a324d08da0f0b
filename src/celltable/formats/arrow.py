"""Bridge between tables and Apache Arrow.

Cells are converted to the Arrow type matching
the type of their column::

    INT     -> int64
    FLOAT   -> float64
    STRING  -> string

Null cells become Arrow nulls, and Arrow nulls
become null cells when converting back:

>>> from celltable import Table
>>> table = Table.from_rows(["n", "name"], [["1", "a"], ["", "b"]])
>>> data = table_to_arrow(table)
>>> data.column("n").to_pylist()
[1, None]
>>> arrow_to_rows(data)
(['n', 'name'], [['1', 'a'], ['', 'b']])
"""

from typing import TYPE_CHECKING, Any, Callable

import pyarrow as pa

from ..compute.base import column_cells
from ..dtypes import DataType, parse_number, to_cell

if TYPE_CHECKING:
    from ..table import Table

__all__ = ("arrow_to_rows", "table_to_arrow")

ARROW_TYPES = {
    DataType.INT: pa.int64(),
    DataType.FLOAT: pa.float64(),
    DataType.STRING: pa.string(),
}


def arrow_to_rows(data: pa.Table | pa.RecordBatch) -> tuple[list[str], list[list[str]]]:
    """Extract column names and rows of cells from Arrow data."""
    columns = [[to_cell(value) for value in column.to_pylist()] for column in data.columns]
    rows = [list(cells) for cells in zip(*columns)]
    return list(data.column_names), rows


def _to_int(cell: str) -> int | None:
    try:
        return int(cell)
    except ValueError:
        value = parse_number(cell)
        return int(value) if value is not None and value.is_integer() else None


_CONVERTERS: dict[DataType, Callable[[str], Any]] = {
    DataType.INT: _to_int,
    DataType.FLOAT: parse_number,
    DataType.STRING: lambda cell: cell,
}


def table_to_arrow(table: "Table") -> pa.Table:
    """Convert a table to a :class:`pyarrow.Table`.

    Cells that can't be represented in the Arrow type of their column become nulls.
    """
    arrays = []
    for idx, dtype in enumerate(table.column_types):
        convert = _CONVERTERS[dtype]
        arrays.append(
            pa.array(
                [convert(cell) if cell else None for cell in column_cells(table, idx)],
                type=ARROW_TYPES[dtype],
            )
        )
    return pa.Table.from_arrays(arrays, names=list(table.columns))
