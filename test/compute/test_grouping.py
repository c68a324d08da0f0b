import pytest

from celltable import DataType, GroupBy, Table
from celltable.compute import grouping
from celltable.errors import ColumnNotFoundError, InvalidArgumentError

TEST_COLUMNS = ["city", "shop", "n_employees"]
TEST_ROWS = [
    ["New York", "Shop A", "10"],
    ["New York", "Shop B", "15"],
    ["Los Angeles", "Shop C", "8"],
    ["Los Angeles", "Shop D", "12"],
    ["New York", "Shop E", "20"],
]


@pytest.fixture
def table():
    return Table.from_rows(TEST_COLUMNS, TEST_ROWS)


def test_groupby_single_column(table):
    groups = table.groupby("city")
    assert isinstance(groups, GroupBy)
    assert list(groups) == ["Los Angeles", "New York"]
    assert len(groups) == 2
    new_york = groups["New York"]
    assert new_york.columns == TEST_COLUMNS
    assert new_york.get_column("shop") == ["Shop A", "Shop B", "Shop E"]


def test_groups_are_independent(table):
    group = table.groupby("city")["Los Angeles"]
    group.rows[0][1] = "changed"
    assert table.rows[2][1] == "Shop C"


def test_groupby_multiple_columns():
    table = Table.from_rows(
        ["a", "b", "v"], [["x", "1", "1"], ["x", "2", "2"], ["x", "1", "3"], ["y", "1", "4"]]
    )
    groups = table.groupby(["a", "b"])
    assert list(groups) == [("x", "1"), ("x", "2"), ("y", "1")]
    assert groups[("x", "1")].get_column("v") == ["1", "3"]


def test_groupby_missing_keys_group_as_null():
    table = Table(["k", "v"], [["a", "1"], [], ["", "2"]])
    groups = table.groupby("k")
    assert list(groups) == ["", "a"]
    assert len(groups[""]) == 2


def test_groupby_unknown_column(table):
    with pytest.raises(ColumnNotFoundError):
        table.groupby("country")


def test_groupby_aggregate(table):
    result = table.groupby("city").aggregate({"n_employees": ["sum", "max", "count"]})
    assert result.columns == ["city", "n_employees_sum", "n_employees_max", "n_employees_count"]
    assert result.rows == [
        ["Los Angeles", "20.0", "12.0", "2"],
        ["New York", "45.0", "20.0", "3"],
    ]
    assert result.column_types == [DataType.STRING] + [DataType.FLOAT] * 3


def test_aggregate(table):
    result = table.aggregate({"n_employees": ["mean", "min"], "shop": "count"})
    assert result.columns == ["n_employees_mean", "n_employees_min", "shop_count"]
    assert result.rows == [["13.0", "8.0", "5"]]
    assert result.column_types == [DataType.FLOAT] * 3


def test_aggregate_failures_are_nan(table):
    result = grouping.aggregate(table, {"shop": "mean"})
    assert result.rows == [["NaN"]]
    single = table.filter_rows("shop", "Shop A").aggregate({"n_employees": "std"})
    assert single.rows == [["NaN"]]


def test_aggregate_unknown_function(table):
    with pytest.raises(InvalidArgumentError):
        table.aggregate({"n_employees": "average"})


def test_pivot_table():
    table = Table.from_rows(
        ["region", "product", "sales"],
        [
            ["north", "apples", "10"],
            ["north", "apples", "20"],
            ["south", "pears", "5"],
            ["north", "pears", ""],
            ["south", "apples", "7"],
        ],
    )
    result = table.pivot_table("sales", "region", "product")
    assert result.columns == ["region", "apples", "pears"]
    assert result.rows == [["north", "15.0", ""], ["south", "7.0", "5.0"]]
    assert table.pivot("region", "product", "sales").equals(result)


def test_melt():
    table = Table.from_rows(["id", "a", "b"], [["1", "x", "y"], ["2", "z", ""]])
    result = table.melt(id_vars=["id"])
    assert result.columns == ["id", "variable", "value"]
    assert result.rows == [
        ["1", "a", "x"],
        ["1", "b", "y"],
        ["2", "a", "z"],
        ["2", "b", ""],
    ]
    only_b = table.melt(id_vars=["id"], value_vars=["b"])
    assert only_b.get_column("value") == ["y", ""]


def test_stack_and_unstack():
    table = Table.from_rows(["a", "b"], [["1", "x"], ["2", "y"]])
    stacked = table.stack()
    assert stacked.columns == ["level_0", "level_1", "value"]
    assert stacked.rows == [
        ["0", "a", "1"],
        ["0", "b", "x"],
        ["1", "a", "2"],
        ["1", "b", "y"],
    ]
    assert stacked.unstack().equals(table)


def test_transpose():
    table = Table.from_rows(["a", "b"], [["1", "x"], ["2", "y"]])
    result = table.transpose()
    assert result.columns == ["row_0", "row_1"]
    assert result.rows == [["1", "2"], ["x", "y"]]
    assert result.column_types == [DataType.STRING, DataType.STRING]
