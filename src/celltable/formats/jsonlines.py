"""Read and write tables as JSON.

Reading expects newline delimited JSON, one object per line,
and is done by :mod:`pyarrow.json`. Keys of the objects become
the columns of the table, in order of first appearance, and
values are converted to the text of the cells::

    {"name": "Rome", "population": 2873000}
    {"name": "Milan", "population": null}

Writing produces either a JSON array of objects or
one object per line. Cells of numeric columns are written
as numbers and null cells as ``null``:

>>> from celltable import Table
>>> table = Table.from_rows(["name", "population"], [["Rome", "2873000"], ["Milan", ""]])
>>> to_records(table)
[{'name': 'Rome', 'population': 2873000}, {'name': 'Milan', 'population': None}]
"""

import json
import logging
import math
from typing import TYPE_CHECKING, Any

import pyarrow as pa
import pyarrow.json

from ..compute.base import cell_at
from ..dtypes import DataType, parse_number
from ..errors import TableIOError
from .arrow import arrow_to_rows

if TYPE_CHECKING:
    from ..table import Table

log = logging.getLogger(__name__)

__all__ = ("read_json", "write_json", "to_records")


def read_json(filename: str) -> tuple[list[str], list[list[str]]]:
    """Read the column names and the rows of a newline delimited JSON file."""
    try:
        data = pa.json.read_json(filename)
    except (OSError, pa.ArrowInvalid) as err:
        raise TableIOError(f"Unable to read {filename}: {err}") from err
    return arrow_to_rows(data)


def _json_value(cell: str, dtype: DataType) -> Any:
    if not cell:
        return None
    if dtype == DataType.STRING:
        return cell
    value = parse_number(cell)
    if value is None:
        return cell
    if not math.isfinite(value):
        return None
    if dtype == DataType.INT and value.is_integer():
        return int(value)
    return value


def to_records(table: "Table") -> list[dict[str, Any]]:
    """Convert each row to a dictionary of column name and value.

    When column names are repeated, the last column wins.
    """
    return [
        {
            name: _json_value(cell_at(row, idx), table.column_types[idx])
            for idx, name in enumerate(table.columns)
        }
        for row in table.rows
    ]


def write_json(table: "Table", filename: str, lines: bool = False) -> None:
    """Write a table to a JSON file.

    :param lines: Write one JSON object per line instead of a JSON array.
    """
    records = to_records(table)
    try:
        with open(filename, "w", encoding="utf-8") as f:
            if lines:
                for record in records:
                    f.write(json.dumps(record) + "\n")
            else:
                json.dump(records, f, indent=2)
    except OSError as err:
        raise TableIOError(f"Unable to write {filename}: {err}") from err
    log.info("Exported %d rows to %s", len(records), filename)
