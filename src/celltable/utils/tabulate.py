"""Format tables into text for print.

The `tabulate` function takes a :class:`celltable.Table` and formats it into a text table.
It will truncate long cells, format the numbers of FLOAT columns to a fixed number of decimals,
and limit the number of rows to display.
The function is used by ``str(table)``.

How much is displayed is controlled by the ``display.max_rows``,
``display.max_colwidth`` and ``display.float_precision`` options.

Example:

    >>> from celltable import Table
    >>> table = Table.from_rows(
    ...     ["Product", "Quantity", "Price"],
    ...     [["Videogame", "8", "66.5"], ["Laptop", "8", "38.72"], ["Laptop", "7", "77.46"]],
    ... )
    >>> print(tabulate(table))
    Product   | Quantity | Price
    --------- | -------- | -----
    Videogame | 8        | 66.50
    Laptop    | 8        | 38.72
    Laptop    | 7        | 77.46
"""

from typing import TYPE_CHECKING

from .. import config
from ..dtypes import DataType, parse_number

if TYPE_CHECKING:
    from ..table import Table


def tabulate(table: "Table", max_rows: int | None = None) -> str:
    """Format a Table into a text table.

    Will produce a string like::

        Product   | Quantity | Price | Total
        --------- | -------- | ----- | ------
        Videogame | 8        | 66.50 | 532.00
        Laptop    | 8        | 38.72 | 309.76
        Laptop    | 7        | 77.46 | 542.22

    :param max_rows: How many rows to display, by default the ``display.max_rows`` option.
    """
    if max_rows is None:
        max_rows = config.get_option("display.max_rows")

    cols = table.columns
    rows = [
        [
            format_value(row[idx] if idx < len(row) else "", table.column_types[idx])
            for idx in range(len(cols))
        ]
        for row in table.rows[:max_rows]
    ]

    colsizes = compute_max_colsize(cols, rows)
    header = [maketablerow(cols, colsizes=colsizes)]
    separator = [maketablerow(["-"] * len(cols), colsizes=colsizes, fillvalue="-")]
    textrows = [maketablerow(row, colsizes=colsizes) for row in rows]

    text = "\n".join(header + separator + textrows)
    if len(table.rows) > max_rows:
        text += f"\n... and {len(table.rows) - max_rows} more rows"
    return text


def compute_max_colsize(cols: list[str], rows: list[list[str]]) -> list[int]:
    """Compute the maximum size of each column in a table."""
    return [
        max([len(row[colidx]) for row in rows] + [len(cols[colidx])])
        for colidx, _ in enumerate(cols)
    ]


def maketablerow(cols: list[str], colsizes: list[int], fillvalue: str = " ") -> str:
    """Make a table row with the given column sizes."""
    return " | ".join(
        [col.ljust(colsizes[idx], fillvalue) for idx, col in enumerate(cols)]
    )


def format_value(cell: str, dtype: DataType = DataType.STRING) -> str:
    """Format a cell to be printed in the table.

    Cells of FLOAT columns are printed with the decimals
    of the ``display.float_precision`` option,
    long cells are truncated.
    """
    if dtype == DataType.FLOAT:
        value = parse_number(cell)
        if value is not None:
            return f"{value:.{config.get_option('display.float_precision')}f}"

    maxwidth = config.get_option("display.max_colwidth")
    if len(cell) > maxwidth:
        cell = cell[: max(maxwidth - 3, 0)] + "..."
    return cell
