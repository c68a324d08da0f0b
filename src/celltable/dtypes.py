"""Cell representation and type inference.

Every cell of a :class:`celltable.Table` is stored as text,
the empty string ``""`` represents a missing (null) value.

Columns still have a type, which is inferred from the text
of their cells. The types form a small lattice where each
type can represent all the values of the previous ones::

    INT < FLOAT < STRING

The type of a column is the widest type among the types
inferred for each of its non null cells. So a single float
in an otherwise integer column makes the whole column a FLOAT
column, and a single value that is not a number at all makes
it a STRING column:

>>> infer_column_type(["1", "2", "", "4"])
<DataType.INT: 0>
>>> infer_column_type(["1", "2.5"])
<DataType.FLOAT: 1>
>>> infer_column_type(["1", "two"])
<DataType.STRING: 2>

As cells are text, numeric operations parse them every time
they need to access their value. Parsing is lenient, cells that
can't be parsed are reported as ``None`` and it's up to the
caller to skip them:

>>> parse_number("3.5")
3.5
>>> parse_number("n/a") is None
True
"""

import enum
import math
import re
from typing import Any, Iterable

from . import config

__all__ = (
    "DataType",
    "infer_type",
    "infer_column_type",
    "widen",
    "parse_number",
    "format_number",
    "to_cell",
)

_INT_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


class DataType(enum.IntEnum):
    """The type of a column.

    The enumeration is ordered, comparing two types
    tells which one is wider.
    """

    INT = 0
    FLOAT = 1
    STRING = 2

    def __str__(self) -> str:
        return self.name.lower()


def infer_type(text: str) -> DataType:
    """Infer the type of a single cell.

    The whole text must be consumed by the parsing of
    a type for the cell to be of that type. Empty cells
    are reported as STRING, but they never contribute
    to the type of a column.

    >>> infer_type("42"), infer_type("-1e3"), infer_type("4 2")
    (<DataType.INT: 0>, <DataType.FLOAT: 1>, <DataType.STRING: 2>)
    """
    if not text:
        return DataType.STRING
    if _INT_RE.fullmatch(text):
        return DataType.INT
    if _FLOAT_RE.fullmatch(text):
        return DataType.FLOAT
    return DataType.STRING


def widen(current: DataType, other: DataType) -> DataType:
    """Return the widest of two types."""
    return max(current, other)


def infer_column_type(cells: Iterable[str]) -> DataType:
    """Infer the type of a column from all its cells.

    Null cells are ignored, a column without any value is INT.
    """
    column_type = DataType.INT
    for cell in cells:
        if cell:
            column_type = widen(column_type, infer_type(cell))
            if column_type == DataType.STRING:
                break
    return column_type


def parse_number(text: str) -> float | None:
    """Parse a cell as a floating point number.

    Returns ``None`` for null cells and for cells that
    don't represent a number.
    """
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def format_number(value: float | int) -> str:
    """Convert a computed number back to the text of a cell.

    Integers are written as they are, floats use the shortest
    representation that round-trips unless the ``format.float_precision``
    option asks for a fixed number of decimals.

    >>> format_number(3), format_number(2.5), format_number(float("nan"))
    ('3', '2.5', 'NaN')
    """
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    precision = config.get_option("format.float_precision")
    if precision is not None:
        return f"{value:.{precision}f}"
    return repr(value)


def to_cell(value: Any) -> str:
    """Convert a Python value to the text of a cell.

    >>> to_cell(None), to_cell(7), to_cell(0.5), to_cell(True)
    ('', '7', '0.5', 'true')
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)
