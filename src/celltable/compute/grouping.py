"""Grouping, aggregation and reshaping of tables.

Frequently when analysing data is necessary
to compute statistics like the min, max, average, etc...
of groups of rows sharing the same values in some columns.

For example, given the following data::

    city, shop, n_employees
    New York, Shop A, 10
    New York, Shop B, 15
    Los Angeles, Shop C, 8
    Los Angeles, Shop D, 12
    New York, Shop E, 20

We could group by city and compute the sum of the employees
to get::

    city, n_employees_sum
    Los Angeles, 20.0
    New York, 45.0

:func:`groupby` splits the table into one independent table
for each group, and :meth:`GroupBy.aggregate` computes
the aggregations for every group at once:

>>> from celltable import Table
>>> table = Table.from_rows(
...     ["city", "n_employees"],
...     [["New York", "10"], ["New York", "15"], ["Los Angeles", "8"],
...      ["Los Angeles", "12"], ["New York", "20"]]
... )
>>> groups = groupby(table, "city")
>>> list(groups)
['Los Angeles', 'New York']
>>> groups.aggregate({"n_employees": "sum"}).rows
[['Los Angeles', '20.0'], ['New York', '45.0']]

The same aggregations can be applied to the whole table
through :func:`aggregate`, which produces a single row.

The module also provides reshaping operations that
move data between rows and columns: :func:`pivot_table`,
:func:`melt`, :func:`stack`, :func:`unstack` and :func:`transpose`.
"""

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Callable, Sequence

from ..dtypes import DataType, format_number, infer_column_type, parse_number
from ..errors import InvalidArgumentError, TableError
from . import statistics
from .base import cell_at

if TYPE_CHECKING:
    from ..table import Table

__all__ = (
    "AGGREGATIONS",
    "GroupBy",
    "groupby",
    "aggregate",
    "pivot_table",
    "pivot",
    "melt",
    "stack",
    "unstack",
    "transpose",
)

AGGREGATIONS: dict[str, Callable[["Table", str], float | int]] = {
    "mean": statistics.mean,
    "sum": statistics.sum,
    "min": statistics.min,
    "max": statistics.max,
    "count": statistics.count,
    "std": statistics.std_dev,
}

GroupKey = str | tuple[str, ...]
AggregationSpec = Mapping[str, str | Sequence[str]]


class GroupBy(Mapping):
    """Groups of rows sharing the same values in the key columns.

    Behaves as a read only mapping from the group key to
    a table containing the rows of that group. Groups are
    ordered by their key.

    When grouping by a single column keys are the cell values,
    when grouping by more columns keys are tuples of cell values.
    """

    def __init__(self, template: "Table", keys: list[str], groups: dict[GroupKey, "Table"]) -> None:
        """
        :param template: An empty table with the schema of the grouped table.
        :param keys: The names of the columns the rows were grouped by.
        :param groups: The table of rows for each key.
        """
        self._template = template
        self.keys = keys
        self._groups = dict(sorted(groups.items()))

    def __getitem__(self, key: GroupKey) -> "Table":
        return self._groups[key]

    def __iter__(self) -> Iterator[GroupKey]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def __repr__(self) -> str:
        return f"GroupBy(keys={self.keys}, groups={len(self._groups)})"

    def aggregate(self, agg_funcs: AggregationSpec) -> "Table":
        """Compute aggregations for every group.

        Returns a table with one row per group, with
        the key columns followed by one column for each
        aggregation named ``<column>_<function>``.
        """
        pairs = _aggregation_pairs(self._template, agg_funcs)
        key_indices = [self._template.find_column(name) for name in self.keys]

        rows = []
        for key, group in self._groups.items():
            key_cells = list(key) if isinstance(key, tuple) else [key]
            rows.append(key_cells + _aggregate_row(group, pairs))

        return self._template.derive(
            rows,
            columns=self.keys + [f"{column}_{func}" for column, func in pairs],
            column_types=[self._template.column_types[idx] for idx in key_indices]
            + [DataType.FLOAT] * len(pairs),
        )


def groupby(table: "Table", columns: str | Sequence[str]) -> GroupBy:
    """Split the rows of a table in groups by the values of one or more columns.

    Rows that are too short to have a key column
    are grouped as if the cell was null.
    """
    single = isinstance(columns, str)
    keys = [columns] if single else list(columns)
    indices = [table.find_column(name) for name in keys]

    rows_by_key: dict[GroupKey, list[list[str]]] = {}
    for row in table.rows:
        values = tuple(cell_at(row, idx) for idx in indices)
        rows_by_key.setdefault(values[0] if single else values, []).append(row)

    groups = {key: table.derive(rows) for key, rows in rows_by_key.items()}
    return GroupBy(table.derive([]), keys, groups)


def _aggregation_pairs(table: "Table", agg_funcs: AggregationSpec) -> list[tuple[str, str]]:
    pairs = []
    for column, funcs in agg_funcs.items():
        table.find_column(column)
        for func in [funcs] if isinstance(funcs, str) else funcs:
            if func not in AGGREGATIONS:
                raise InvalidArgumentError(f"Unsupported aggregation function: {func}")
            pairs.append((column, func))
    return pairs


def _aggregate_row(table: "Table", pairs: list[tuple[str, str]]) -> list[str]:
    row = []
    for column, func in pairs:
        try:
            row.append(format_number(AGGREGATIONS[func](table, column)))
        except TableError:
            row.append("NaN")
    return row


def aggregate(table: "Table", agg_funcs: AggregationSpec) -> "Table":
    """Compute aggregations over the whole table.

    :param agg_funcs: For each column, the name or list of names of the
                      functions to compute. Supported functions are
                      ``mean``, ``sum``, ``min``, ``max``, ``count`` and ``std``.

    Returns a table with a single row and one column named ``<column>_<function>``
    for each aggregation. Aggregations that fail, like ``std`` of a single value,
    are reported as ``NaN``.
    """
    pairs = _aggregation_pairs(table, agg_funcs)
    return table.derive(
        [_aggregate_row(table, pairs)],
        columns=[f"{column}_{func}" for column, func in pairs],
        column_types=[DataType.FLOAT] * len(pairs),
    )


def pivot_table(table: "Table", values: str, index: str, columns: str) -> "Table":
    """Spread the values of a column over a grid of index and columns values.

    The resulting table has one row for each distinct value of ``index``
    and one column for each distinct value of ``columns``. Each cell is the
    mean of ``values`` for the rows matching both, or null when no row matches.
    """
    values_idx = table.find_column(values)
    index_idx = table.find_column(index)
    columns_idx = table.find_column(columns)

    index_values = statistics.unique(table, index)
    column_values = statistics.unique(table, columns)

    # sums and counts for each (index, column) pair.
    totals: dict[tuple[str, str], tuple[float, int]] = {}
    for row in table.rows:
        value = parse_number(cell_at(row, values_idx))
        if value is None:
            continue
        key = (cell_at(row, index_idx), cell_at(row, columns_idx))
        total, count = totals.get(key, (0.0, 0))
        totals[key] = (total + value, count + 1)

    rows = []
    for index_value in index_values:
        row = [index_value]
        for column_value in column_values:
            total, count = totals.get((index_value, column_value), (0.0, 0))
            row.append(format_number(total / count) if count else "")
        rows.append(row)

    return table.derive(
        rows,
        columns=[index] + column_values,
        column_types=[table.column_types[index_idx]]
        + [DataType.FLOAT] * len(column_values),
    )


def pivot(table: "Table", index: str, columns: str, values: str) -> "Table":
    """Same as :func:`pivot_table` with the arguments in a different order."""
    return pivot_table(table, values, index, columns)


def melt(
    table: "Table", id_vars: Sequence[str] = (), value_vars: Sequence[str] = ()
) -> "Table":
    """Reshape a table from wide to long format.

    Every row produces one row for each melted column, carrying the
    values of the ``id_vars`` columns, the name of the melted column
    in ``variable`` and its cell in ``value``. When ``value_vars`` is empty
    all the columns that are not in ``id_vars`` are melted.
    """
    id_indices = [table.find_column(name) for name in id_vars]
    if value_vars:
        melted = list(value_vars)
    else:
        melted = [name for name in table.columns if name not in id_vars]
    melted_indices = [table.find_column(name) for name in melted]

    rows = []
    for row in table.rows:
        id_cells = [cell_at(row, idx) for idx in id_indices]
        for name, idx in zip(melted, melted_indices):
            rows.append(id_cells + [name, cell_at(row, idx)])

    return table.derive(
        rows,
        columns=list(id_vars) + ["variable", "value"],
        column_types=[table.column_types[idx] for idx in id_indices]
        + [DataType.STRING, infer_column_type(row[-1] for row in rows)],
    )


def stack(table: "Table") -> "Table":
    """Move every cell to its own row.

    The result has a ``level_0`` column with the row position,
    a ``level_1`` column with the column name and a ``value`` column.
    """
    rows = [
        [str(position), name, cell_at(row, idx)]
        for position, row in enumerate(table.rows)
        for idx, name in enumerate(table.columns)
    ]
    return table.derive(
        rows,
        columns=["level_0", "level_1", "value"],
        column_types=[
            DataType.INT,
            DataType.STRING,
            infer_column_type(row[2] for row in rows),
        ],
    )


def unstack(table: "Table") -> "Table":
    """Reverse of :func:`stack`.

    Expects the ``level_0``, ``level_1`` and ``value`` columns
    and rebuilds one row for each ``level_0`` and one column for
    each ``level_1``, in order of first appearance.
    """
    position_idx = table.find_column("level_0")
    name_idx = table.find_column("level_1")
    value_idx = table.find_column("value")

    cells: dict[str, dict[str, str]] = {}
    names: dict[str, None] = {}
    for row in table.rows:
        name = cell_at(row, name_idx)
        names.setdefault(name, None)
        cells.setdefault(cell_at(row, position_idx), {})[name] = cell_at(row, value_idx)

    columns = list(names)
    rows = [[by_name.get(name, "") for name in columns] for by_name in cells.values()]
    return table.derive(rows, columns=columns, column_types=None)


def transpose(table: "Table") -> "Table":
    """Swap rows and columns.

    Columns of the result are named ``row_<position>``.
    """
    rows = [
        [cell_at(row, idx) for row in table.rows] for idx in range(len(table.columns))
    ]
    return table.derive(
        rows,
        columns=[f"row_{position}" for position in range(len(table.rows))],
        column_types=None,
    )
