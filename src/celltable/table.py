"""The Table object itself.

A table is made of named columns and of rows of text cells,
the empty string represents a null cell. Every column
has a type inferred from its cells, see :mod:`celltable.dtypes`.

Tables are usually created through the bulk loader,
which accepts rows of any value and converts them to text:

>>> table = Table.from_rows(["x"], [[1], [2], [None], [4]])
>>> table.rows
[['1'], ['2'], [''], ['4']]
>>> table.column_types, table.non_null_counts, table.null_positions
([<DataType.INT: 0>], [3], [[2]])

The table keeps track of where its null cells are,
those caches are rebuilt by :meth:`Table.refresh_caches`
every time the table is modified through its methods.
Code that modifies ``rows`` directly must call it on its own.

Rows are allowed to be shorter than the number of columns,
the missing cells read as null. Column names are not required
to be unique, looking up a column by name finds the first one.

Operations that produce a new table build it through
:meth:`Table.derive`, so that the new table never shares
its rows with the original one.
"""

import logging
import sys
from typing import Any, Callable, Iterable, Mapping, Self, Sequence

import pyarrow as pa

from .compute import grouping, join, missing, selection, sorting, statistics, transform
from .compute import window as window_functions
from .compute.base import column_cells, padded
from .dtypes import DataType, infer_column_type, infer_type, to_cell, widen
from .errors import (
    ColumnNotFoundError,
    ColumnTypeError,
    IndexOutOfRangeError,
    SchemaMismatchError,
)
from .formats import arrow, delimited, html, jsonlines
from .utils.tabulate import tabulate

log = logging.getLogger(__name__)

__all__ = ("Table",)


class Table:
    """Data structure that handles data in rows and columns.

    The Table object allows to represent in-memory data
    and perform analysis and transformations over it.

    All the cells are stored as text in ``rows``, numbers are
    parsed every time an operation needs them.
    """

    def __init__(
        self,
        columns: Sequence[str] | None = None,
        rows: Iterable[Sequence[str]] | None = None,
        column_types: Sequence[DataType] | None = None,
    ) -> None:
        """
        :param columns: The names of the columns.
        :param rows: The rows of the table, each cell must be a string.
        :param column_types: The type of each column, inferred from the cells when omitted.
        """
        self.columns: list[str] = list(columns or [])
        self.rows: list[list[str]] = [list(row) for row in rows or []]
        if column_types is None:
            column_types = [
                infer_column_type(column_cells(self, idx)) for idx in range(len(self.columns))
            ]
        self.column_types: list[DataType] = list(column_types)
        self.non_null_counts: list[int] = []
        self.null_positions: list[list[int]] = []
        self.validate()
        self.refresh_caches()

    @classmethod
    def from_rows(cls, columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> Self:
        """Load a table from rows of values.

        Values are converted to text, ``None`` becomes a null cell.
        Rows shorter than the columns are padded with null cells,
        longer rows are truncated. Types and null tracking
        are computed while loading.

        :param columns: The names of the columns.
        :param rows: Any iterable of rows, consumed only once.
        """
        table = cls(columns)
        width = len(table.columns)
        types = table.column_types
        counts = table.non_null_counts
        positions = table.null_positions

        for position, row in enumerate(rows):
            cells = [to_cell(value) for value in list(row)[:width]]
            cells.extend([""] * (width - len(cells)))
            for idx, cell in enumerate(cells):
                if cell:
                    counts[idx] += 1
                    if types[idx] != DataType.STRING:
                        types[idx] = widen(types[idx], infer_type(cell))
                else:
                    positions[idx].append(position)
            table.rows.append(cells)
        return table

    def derive(
        self,
        rows: Iterable[Sequence[str]],
        columns: Sequence[str] | None = None,
        column_types: Sequence[DataType] | None = None,
    ) -> Self:
        """Build a new table from the given rows.

        The new table has the same columns and types of this one,
        unless ``columns`` is provided. When new columns are provided
        without their types, the types are inferred from the rows.
        The rows are copied, the new table doesn't share them.
        """
        if columns is None:
            columns = self.columns
            if column_types is None:
                column_types = self.column_types
        return self.__class__(
            list(columns),
            [list(row) for row in rows],
            None if column_types is None else list(column_types),
        )

    def refresh_caches(self) -> None:
        """Recompute the count of non null cells and the positions of null cells."""
        width = len(self.columns)
        self.non_null_counts = [0] * width
        self.null_positions = [[] for _ in range(width)]
        for position, row in enumerate(self.rows):
            for idx, cell in enumerate(row[:width]):
                if cell:
                    self.non_null_counts[idx] += 1
                else:
                    self.null_positions[idx].append(position)

    def validate(self) -> None:
        """Check the structure of the table.

        There must be one type for each column, no row can be
        longer than the number of columns and every cell must be text.
        """
        width = len(self.columns)
        if len(self.column_types) != width:
            raise SchemaMismatchError(
                f"Expected {width} column types, got {len(self.column_types)}"
            )
        for position, row in enumerate(self.rows):
            if len(row) > width:
                raise SchemaMismatchError(
                    f"Row {position} has {len(row)} cells but the table has {width} columns"
                )
            for cell in row:
                if not isinstance(cell, str):
                    raise ColumnTypeError(
                        f"Cells must be strings, got {type(cell).__name__} in row {position}"
                    )

    def find_column(self, name: str) -> int:
        """Position of the first column with the given name."""
        try:
            return self.columns.index(name)
        except ValueError:
            raise ColumnNotFoundError(name) from None

    @property
    def shape(self) -> tuple[int, int]:
        """Number of rows and columns."""
        return len(self.rows), len(self.columns)

    @property
    def dtypes(self) -> dict[str, DataType]:
        """Type of each column by name."""
        result: dict[str, DataType] = {}
        for name, dtype in zip(self.columns, self.column_types):
            result.setdefault(name, dtype)
        return result

    @property
    def empty(self) -> bool:
        """If the table has no rows or no columns."""
        return not self.rows or not self.columns

    def __len__(self) -> int:
        return len(self.rows)

    def __repr__(self) -> str:
        return f"Table(columns={self.columns}, rows={len(self.rows)})"

    def __str__(self) -> str:
        return tabulate(self)

    def isnull(self) -> list[int]:
        """Number of null cells of each column."""
        return [len(positions) for positions in self.null_positions]

    def notnull(self) -> list[int]:
        """Number of non null cells of each column."""
        return list(self.non_null_counts)

    def count_nulls(self) -> int:
        """Total number of null cells."""
        return sum(self.isnull())

    def memory_usage(self) -> int:
        """Approximate number of bytes used by column names and cells."""
        total = sum(sys.getsizeof(name) for name in self.columns)
        for row in self.rows:
            total += sys.getsizeof(row) + sum(sys.getsizeof(cell) for cell in row)
        return total

    def copy(self) -> Self:
        """A new independent table with the same content."""
        return self.derive(self.rows)

    def equals(self, other: "Table") -> bool:
        """If the two tables have the same columns, types and cells."""
        if self.columns != other.columns or self.column_types != other.column_types:
            return False
        if len(self.rows) != len(other.rows):
            return False
        width = len(self.columns)
        return all(
            padded(a, width) == padded(b, width) for a, b in zip(self.rows, other.rows)
        )

    def info(self) -> str:
        """Summary of the table structure.

        Reports the number of rows and, for each column,
        how many cells have a value, how many are null and its type.
        """
        summary = Table(
            ["#", "column", "non-null", "nulls", "dtype"],
            [
                [str(idx), name, str(count), str(len(nulls)), str(dtype)]
                for idx, (name, count, nulls, dtype) in enumerate(
                    zip(self.columns, self.non_null_counts, self.null_positions, self.column_types)
                )
            ],
            [DataType.INT, DataType.STRING, DataType.INT, DataType.INT, DataType.STRING],
        )
        totals = {dtype: self.column_types.count(dtype) for dtype in DataType}
        return "\n".join(
            [
                f"{len(self.rows)} rows, {len(self.columns)} columns",
                tabulate(summary, max_rows=len(self.columns)),
                "dtypes: " + ", ".join(f"{dtype}({n})" for dtype, n in totals.items() if n),
            ]
        )

    # Columns

    def get_column(self, column: str | int) -> list[str]:
        """Cells of a column, by name or by position."""
        if isinstance(column, int):
            if column < 0 or column >= len(self.columns):
                raise IndexOutOfRangeError(f"Column index out of range: {column}")
            idx = column
        else:
            idx = self.find_column(column)
        return column_cells(self, idx)

    def add_column(self, name: str, values: Sequence[Any]) -> None:
        """Append a new column at the end of the table."""
        self.insert_column(len(self.columns), name, values)

    def insert_column(self, position: int, name: str, values: Sequence[Any]) -> None:
        """Insert a new column before ``position``.

        There must be exactly one value for each row,
        unless the table has no columns yet, in which case
        one row is created for each value.
        """
        if position < 0 or position > len(self.columns):
            raise IndexOutOfRangeError(f"Column position out of range: {position}")
        if not self.columns and not self.rows:
            self.rows = [[] for _ in values]
        if len(values) != len(self.rows):
            raise SchemaMismatchError(
                f"Column {name} has {len(values)} values but the table has {len(self.rows)} rows"
            )

        cells = [to_cell(value) for value in values]
        width = len(self.columns)
        for idx, row in enumerate(self.rows):
            if len(row) < width:
                row.extend([""] * (width - len(row)))
            row.insert(position, cells[idx])
        self.columns.insert(position, name)
        self.column_types.insert(position, infer_column_type(cells))
        self.refresh_caches()

    def drop_column(self, name: str) -> None:
        """Remove a column from the table."""
        idx = self.find_column(name)
        del self.columns[idx]
        del self.column_types[idx]
        for row in self.rows:
            if idx < len(row):
                del row[idx]
        self.refresh_caches()
        log.debug("Dropped column %r", name)

    def drop_columns(self, names: Iterable[str]) -> None:
        """Remove multiple columns from the table."""
        for name in names:
            self.drop_column(name)

    def rename_column(self, old: str, new: str) -> None:
        """Give a new name to a column."""
        self.columns[self.find_column(old)] = new

    def rename_columns(self, mapping: Mapping[str, str]) -> None:
        """Rename multiple columns, ``mapping`` goes from old to new name."""
        for old, new in mapping.items():
            self.rename_column(old, new)

    # Rows

    def drop_row(self, position: int) -> None:
        """Remove the row at ``position``."""
        self.drop_rows([position])

    def drop_rows(self, positions: Iterable[int]) -> None:
        """Remove the rows at the given positions."""
        positions = set(positions)
        for position in positions:
            if position < 0 or position >= len(self.rows):
                raise IndexOutOfRangeError(f"Row index out of range: {position}")
        for position in sorted(positions, reverse=True):
            del self.rows[position]
        self.refresh_caches()
        log.debug("Dropped %d rows", len(positions))

    def head(self, n: int = 5) -> Self:
        """The first ``n`` rows."""
        return self.derive(self.rows[:n])

    def tail(self, n: int = 5) -> Self:
        """The last ``n`` rows."""
        return self.derive(self.rows[max(len(self.rows) - n, 0):])

    # Selection

    def at(self, row: int, column: str) -> str:
        return selection.at(self, row, column)

    def iat(self, row: int, column: int) -> str:
        return selection.iat(self, row, column)

    def loc(self, rows: Sequence[int], columns: Sequence[str]) -> Self:
        return selection.loc(self, rows, columns)

    def iloc(self, rows: Sequence[int], columns: Sequence[int]) -> Self:
        return selection.iloc(self, rows, columns)

    def filter(self, predicate: Callable[[list[str]], bool]) -> Self:
        """Keep only the rows for which the predicate is true."""
        return selection.filter(self, predicate)

    def filter_rows(self, column: str, value: str) -> Self:
        return selection.filter_rows(self, column, value)

    def query(self, expression: str) -> Self:
        """Filter rows using a ``<column> <operator> <value>`` expression."""
        return selection.query(self, expression)

    def sample(self, n: int, replace: bool = False, seed: int | None = None) -> Self:
        return selection.sample(self, n, replace, seed)

    def nlargest(self, n: int, column: str) -> Self:
        return selection.nlargest(self, n, column)

    def nsmallest(self, n: int, column: str) -> Self:
        return selection.nsmallest(self, n, column)

    # Statistics

    def mean(self, column: str) -> float:
        return statistics.mean(self, column)

    def median(self, column: str) -> float:
        return statistics.median(self, column)

    def mode(self, column: str) -> str:
        return statistics.mode(self, column)

    def std_dev(self, column: str) -> float:
        return statistics.std_dev(self, column)

    def variance(self, column: str) -> float:
        return statistics.variance(self, column)

    def min(self, column: str) -> float:
        return statistics.min(self, column)

    def max(self, column: str) -> float:
        return statistics.max(self, column)

    def sum(self, column: str) -> float:
        return statistics.sum(self, column)

    def prod(self, column: str) -> float:
        return statistics.prod(self, column)

    def count(self, column: str) -> int:
        return statistics.count(self, column)

    def quantile(self, column: str, qs: Sequence[float]) -> list[float]:
        return statistics.quantile(self, column, qs)

    def unique(self, column: str) -> list[str]:
        return statistics.unique(self, column)

    def nunique(self, column: str) -> int:
        return statistics.nunique(self, column)

    def value_counts(self, column: str) -> dict[str, int]:
        return statistics.value_counts(self, column)

    def corr(self) -> dict[tuple[str, str], float]:
        return statistics.corr(self)

    def cov(self) -> dict[tuple[str, str], float]:
        return statistics.cov(self)

    def describe(self) -> Self:
        """Summary statistics of every numeric column."""
        return statistics.describe(self)

    # Missing data

    def dropna(self, how: str = "any") -> Self:
        return missing.dropna(self, how)

    def fillna_value(self, column: str, value: Any) -> None:
        missing.fillna_value(self, column, value)

    def fillna_method(self, column: str, method: str = "ffill") -> None:
        missing.fillna_method(self, column, method)

    def fillna_with_imputer(self, column: str, imputer: missing.Imputer) -> None:
        missing.fillna_with_imputer(self, column, imputer)

    def interpolate(self, column: str, method: str = "linear") -> Self:
        return missing.interpolate(self, column, method)

    # Grouping and reshaping

    def groupby(self, columns: str | Sequence[str]) -> grouping.GroupBy:
        return grouping.groupby(self, columns)

    def aggregate(self, agg_funcs: grouping.AggregationSpec) -> Self:
        return grouping.aggregate(self, agg_funcs)

    def pivot_table(self, values: str, index: str, columns: str) -> Self:
        return grouping.pivot_table(self, values, index, columns)

    def pivot(self, index: str, columns: str, values: str) -> Self:
        return grouping.pivot(self, index, columns, values)

    def melt(self, id_vars: Sequence[str] = (), value_vars: Sequence[str] = ()) -> Self:
        return grouping.melt(self, id_vars, value_vars)

    def stack(self) -> Self:
        return grouping.stack(self)

    def unstack(self) -> Self:
        return grouping.unstack(self)

    def transpose(self) -> Self:
        return grouping.transpose(self)

    # Combining

    def merge(
        self,
        other: "Table",
        on: str | Sequence[str] | None = None,
        how: str = "inner",
        left_on: str | Sequence[str] | None = None,
        right_on: str | Sequence[str] | None = None,
    ) -> Self:
        """Merge with another table matching the values of key columns."""
        return join.merge(self, other, on, how, left_on, right_on)

    def join(self, other: "Table", how: str = "left") -> Self:
        """Join with another table by row position."""
        return join.join(self, other, how)

    @staticmethod
    def concat(tables: Sequence["Table"], axis: int = 0, ignore_index: bool = False) -> "Table":
        """Concatenate tables by rows (``axis=0``) or by columns (``axis=1``)."""
        return join.concat(tables, axis, ignore_index)

    # Sorting

    def sort_values(
        self, by: str | Sequence[str], ascending: bool | Sequence[bool] = True
    ) -> None:
        """Sort the rows in place by one or more columns."""
        sorting.sort_values(self, by, ascending)

    def sort_index(self, ascending: bool = True) -> None:
        sorting.sort_index(self, ascending)

    def rank(self, column: str, method: str = "first") -> Self:
        return sorting.rank(self, column, method)

    def duplicated(
        self, subset: Sequence[str] | None = None, keep_first: bool = True
    ) -> list[bool]:
        return sorting.duplicated(self, subset, keep_first)

    def drop_duplicates(
        self, subset: Sequence[str] | None = None, keep_first: bool = True
    ) -> Self:
        return sorting.drop_duplicates(self, subset, keep_first)

    # Windows

    def rolling_mean(self, column: str, window: int) -> list[float]:
        return window_functions.rolling_mean(self, column, window)

    def rolling_sum(self, column: str, window: int) -> list[float]:
        return window_functions.rolling_sum(self, column, window)

    def rolling_std(self, column: str, window: int) -> list[float]:
        return window_functions.rolling_std(self, column, window)

    def expanding_mean(self, column: str) -> list[float]:
        return window_functions.expanding_mean(self, column)

    def cumsum(self, column: str) -> list[float]:
        return window_functions.cumsum(self, column)

    def cumprod(self, column: str) -> list[float]:
        return window_functions.cumprod(self, column)

    def pct_change(self, column: str, periods: int = 1) -> list[float]:
        return window_functions.pct_change(self, column, periods)

    # Transformations

    def label_encode(self, column: str) -> None:
        transform.label_encode(self, column)

    def one_hot_encode(self, column: str) -> Self:
        return transform.one_hot_encode(self, column)

    def get_dummies(self, columns: Sequence[str]) -> Self:
        return transform.get_dummies(self, columns)

    def apply_function(self, column: str, func: Callable[[str], str]) -> None:
        transform.apply_function(self, column, func)

    def map_values(self, column: str, mapping: Mapping[str, str]) -> Self:
        return transform.map_values(self, column, mapping)

    def str_contains(self, column: str, pattern: str) -> Self:
        return transform.str_contains(self, column, pattern)

    def str_startswith(self, column: str, prefix: str) -> Self:
        return transform.str_startswith(self, column, prefix)

    def str_endswith(self, column: str, suffix: str) -> Self:
        return transform.str_endswith(self, column, suffix)

    def str_replace(self, column: str, pattern: str, replacement: str) -> Self:
        return transform.str_replace(self, column, pattern, replacement)

    def str_upper(self, column: str) -> Self:
        return transform.str_upper(self, column)

    def str_lower(self, column: str) -> Self:
        return transform.str_lower(self, column)

    def str_strip(self, column: str) -> Self:
        return transform.str_strip(self, column)

    def str_len(self, column: str) -> list[int]:
        return transform.str_len(self, column)

    def add(self, other: "Table") -> Self:
        return transform.add(self, other)

    def subtract(self, other: "Table") -> Self:
        return transform.subtract(self, other)

    def multiply(self, other: "Table") -> Self:
        return transform.multiply(self, other)

    def divide(self, other: "Table") -> Self:
        return transform.divide(self, other)

    def add_scalar(self, value: float) -> Self:
        return transform.add_scalar(self, value)

    def multiply_scalar(self, value: float) -> Self:
        return transform.multiply_scalar(self, value)

    def eq(self, other: "Table") -> list[list[bool]]:
        return transform.eq(self, other)

    def ne(self, other: "Table") -> list[list[bool]]:
        return transform.ne(self, other)

    def lt(self, other: "Table") -> list[list[bool]]:
        return transform.lt(self, other)

    def le(self, other: "Table") -> list[list[bool]]:
        return transform.le(self, other)

    def gt(self, other: "Table") -> list[list[bool]]:
        return transform.gt(self, other)

    def ge(self, other: "Table") -> list[list[bool]]:
        return transform.ge(self, other)

    def where(self, condition: Callable[[list[str]], bool], other: str = "") -> Self:
        return transform.where(self, condition, other)

    def astype(self, column: str, dtype: DataType | str) -> Self:
        return transform.astype(self, column, dtype)

    def reset_index(self, drop: bool = False) -> Self:
        return transform.reset_index(self, drop)

    def reindex(self, indices: Sequence[int]) -> Self:
        return transform.reindex(self, indices)

    def to_datetime(self, column: str, format: str = "%Y-%m-%d") -> Self:
        return transform.to_datetime(self, column, format)

    def dt_year(self, column: str) -> list[int | None]:
        return transform.dt_year(self, column)

    def dt_month(self, column: str) -> list[int | None]:
        return transform.dt_month(self, column)

    def dt_day(self, column: str) -> list[int | None]:
        return transform.dt_day(self, column)

    def dt_dayofweek(self, column: str) -> list[int | None]:
        return transform.dt_dayofweek(self, column)

    # Input and output

    @classmethod
    def read_csv(cls, filename: str, delimiter: str = ",") -> Self:
        """Load a table from a CSV file.

        :param filename: The path to a local CSV file.
        :param delimiter: The character separating the fields.
        """
        return cls.from_rows(*delimited.read_delimited(filename, delimiter))

    def to_csv(self, filename: str, delimiter: str = ",", index: bool = False) -> None:
        """Write the table to a CSV file."""
        delimited.write_delimited(self, filename, delimiter, index)

    @classmethod
    def read_json(cls, filename: str) -> Self:
        """Load a table from a newline delimited JSON file."""
        return cls.from_rows(*jsonlines.read_json(filename))

    def to_json(self, filename: str, lines: bool = False) -> None:
        """Write the table to a JSON file, as an array or one object per line."""
        jsonlines.write_json(self, filename, lines)

    def to_records(self) -> list[dict[str, Any]]:
        """The rows as dictionaries of column name and value."""
        return jsonlines.to_records(self)

    def to_html(self, filename: str | None = None) -> str:
        """Render the table as HTML, also writing it to ``filename`` when provided."""
        if filename is not None:
            html.write_html(self, filename)
        return html.render_html(self)

    @classmethod
    def from_arrow(cls, data: pa.Table | pa.RecordBatch) -> Self:
        """Load a table from a :class:`pyarrow.Table` or :class:`pyarrow.RecordBatch`."""
        return cls.from_rows(*arrow.arrow_to_rows(data))

    def to_arrow(self) -> pa.Table:
        """Convert the table to a :class:`pyarrow.Table`."""
        return arrow.table_to_arrow(self)
