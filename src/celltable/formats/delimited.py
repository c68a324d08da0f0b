"""Read and write delimited text files like CSV.

Files are parsed by :mod:`pyarrow.csv`. The first line of
the file provides the column names and every cell is loaded
as text, with the surrounding whitespace removed.

Type inference is left to the table itself, so all the
columns of the file are read as strings. To know the
column names before reading, the schema of the file is
polled first, reading only the first block of the file.

Rows with a different number of fields than the header
are not an error. They are recovered while parsing and
put back in their position, the table then pads
or truncates them to the number of columns::

    a,b,c
    1,2,3
    4,5          -> ["4", "5", ""]
    6,7,8,9      -> ["6", "7", "8"]
"""

import io
import logging
from typing import TYPE_CHECKING

import pyarrow as pa
import pyarrow.compute as pc
import pyarrow.csv

from ..compute.base import column_cells
from ..errors import TableIOError

if TYPE_CHECKING:
    from ..table import Table

log = logging.getLogger(__name__)

__all__ = ("poll_schema", "read_delimited", "write_delimited")


def _trimmed_rows(data: pa.Table) -> list[list[str]]:
    columns = [pc.utf8_trim_whitespace(column).to_pylist() for column in data.columns]
    return [list(cells) for cells in zip(*columns)]


def _all_strings(names: list[str]) -> pa.csv.ConvertOptions:
    return pa.csv.ConvertOptions(
        column_types={name: pa.string() for name in names},
        strings_can_be_null=False,
    )


def _parse_row(text: str, delimiter: str, width: int) -> list[str]:
    """Parse a single line of text with the given number of fields."""
    data = pa.csv.read_csv(
        io.BytesIO((text + "\n").encode("utf-8")),
        read_options=pa.csv.ReadOptions(autogenerate_column_names=True),
        parse_options=pa.csv.ParseOptions(delimiter=delimiter),
        convert_options=_all_strings([f"f{idx}" for idx in range(width)]),
    )
    return _trimmed_rows(data)[0]


def poll_schema(filename: str, delimiter: str = ",") -> pa.Schema:
    """Poll the schema of a delimited file without loading its content."""
    parse_options = pa.csv.ParseOptions(
        delimiter=delimiter, invalid_row_handler=lambda row: "skip"
    )
    try:
        with pa.csv.open_csv(filename, parse_options=parse_options) as reader:
            return reader.schema
    except (OSError, pa.ArrowInvalid) as err:
        raise TableIOError(f"Unable to read {filename}: {err}") from err


def read_delimited(filename: str, delimiter: str = ",") -> tuple[list[str], list[list[str]]]:
    """Read the column names and the rows of a delimited file.

    :param filename: The path of the local file.
    :param delimiter: The character separating the fields of each row.
    """
    schema = poll_schema(filename, delimiter)

    invalid_rows: list[tuple[int | None, str, int]] = []

    def recover(row: pa.csv.InvalidRow) -> str:
        number = row.number if row.number and row.number > 1 else None
        invalid_rows.append((number, row.text, row.actual_columns))
        return "skip"

    try:
        data = pa.csv.read_csv(
            filename,
            read_options=pa.csv.ReadOptions(use_threads=False),
            parse_options=pa.csv.ParseOptions(delimiter=delimiter, invalid_row_handler=recover),
            convert_options=_all_strings(schema.names),
        )
    except (OSError, pa.ArrowInvalid) as err:
        raise TableIOError(f"Unable to read {filename}: {err}") from err

    columns = pc.utf8_trim_whitespace(pa.array(data.column_names, type=pa.string())).to_pylist()
    rows = _trimmed_rows(data)
    for number, text, width in sorted(invalid_rows, key=lambda item: (item[0] is None, item[0] or 0)):
        try:
            cells = _parse_row(text, delimiter, width)
        except pa.ArrowInvalid as err:
            raise TableIOError(f"Unable to read line {number} of {filename}: {err}") from err
        # Line 1 is the header, so line N is the row at position N - 2.
        position = len(rows) if number is None else min(number - 2, len(rows))
        rows.insert(position, cells)
        log.warning(
            "Recovered row at line %s of %s with %d fields instead of %d",
            number, filename, width, len(columns),
        )
    return columns, rows


def write_delimited(
    table: "Table", filename: str, delimiter: str = ",", index: bool = False
) -> None:
    """Write a table to a delimited file.

    :param index: Also write the position of each row in a leading ``index`` column.
    """
    names = list(table.columns)
    arrays = [
        pa.array(column_cells(table, idx), type=pa.string()) for idx in range(len(names))
    ]
    if index:
        names.insert(0, "index")
        arrays.insert(0, pa.array([str(pos) for pos in range(len(table.rows))], type=pa.string()))

    try:
        pa.csv.write_csv(
            pa.Table.from_arrays(arrays, names=names),
            filename,
            write_options=pa.csv.WriteOptions(delimiter=delimiter),
        )
    except OSError as err:
        raise TableIOError(f"Unable to write {filename}: {err}") from err
    log.info("Exported %d rows to %s", len(table.rows), filename)
