import math

import pytest

from celltable import DataType, Table
from celltable.compute import statistics
from celltable.errors import (
    ColumnTypeError,
    EmptyColumnError,
    InsufficientDataError,
    InvalidArgumentError,
)

TEST_COLUMNS = ["name", "age", "score"]
TEST_ROWS = [
    ["Alice", "30", "88.5"],
    ["Bob", "25", ""],
    ["Charlie", "35", "92.0"],
    ["David", "", "75.5"],
    ["Eve", "30", "80.0"],
]


@pytest.fixture
def table():
    return Table.from_rows(TEST_COLUMNS, TEST_ROWS)


@pytest.fixture
def empty_column():
    return Table.from_rows(["x"], [[""], [""]])


def test_mean(table):
    assert table.mean("age") == 30.0
    assert table.mean("score") == pytest.approx(84.0)


def test_median(table):
    assert table.median("age") == 30.0
    assert table.median("score") == pytest.approx(84.25)


def test_mode(table):
    assert table.mode("age") == "30"
    assert table.mode("name") == "Alice"


def test_mode_ties_pick_first_seen():
    table = Table.from_rows(["v"], [["b"], ["a"], ["a"], ["b"]])
    assert statistics.mode(table, "v") == "b"


def test_variance_and_std(table):
    assert table.variance("age") == pytest.approx(50 / 3)
    assert table.std_dev("age") == pytest.approx(math.sqrt(50 / 3))


def test_min_max_sum_prod(table):
    assert table.min("age") == 25.0
    assert table.max("score") == 92.0
    assert table.sum("age") == 120.0
    assert table.prod("age") == 30.0 * 25.0 * 35.0 * 30.0


def test_count_unique(table):
    assert table.count("age") == 4
    assert table.count("score") == 4
    assert table.unique("age") == ["25", "30", "35"]
    assert table.nunique("age") == 3
    assert table.value_counts("age") == {"25": 1, "30": 2, "35": 1}
    assert list(table.value_counts("name")) == ["Alice", "Bob", "Charlie", "David", "Eve"]


def test_unparseable_cells_are_skipped():
    table = Table(["x"], [["1"], ["oops"], ["3"]], [DataType.INT])
    assert statistics.mean(table, "x") == 2.0
    assert statistics.sum(table, "x") == 4.0


@pytest.mark.parametrize(
    "func", [statistics.mean, statistics.median, statistics.min, statistics.max, statistics.sum]
)
def test_empty_column_errors(empty_column, func):
    with pytest.raises(EmptyColumnError):
        func(empty_column, "x")


def test_empty_column_mode(empty_column):
    with pytest.raises(EmptyColumnError):
        statistics.mode(empty_column, "x")


def test_empty_column_prod(empty_column):
    assert statistics.prod(empty_column, "x") == 1.0


@pytest.mark.parametrize("func", [statistics.std_dev, statistics.variance])
def test_insufficient_data(func):
    table = Table.from_rows(["x"], [["1"], [""]])
    with pytest.raises(InsufficientDataError):
        func(table, "x")


@pytest.mark.parametrize(
    "func",
    [
        statistics.mean,
        statistics.median,
        statistics.std_dev,
        statistics.variance,
        statistics.min,
        statistics.max,
        statistics.sum,
        statistics.prod,
    ],
)
def test_string_columns_are_rejected(table, func):
    with pytest.raises(ColumnTypeError):
        func(table, "name")


def test_quantile(table):
    assert table.quantile("age", [0.0, 0.25, 0.5, 1.0]) == [25.0, 28.75, 30.0, 35.0]


def test_quantile_matches_other_statistics(table):
    for column in ("age", "score"):
        low, middle, high = table.quantile(column, [0.0, 0.5, 1.0])
        assert low == table.min(column)
        assert middle == pytest.approx(table.median(column))
        assert high == table.max(column)


@pytest.mark.parametrize("qs", [[1.5], [0.5, -0.1]])
def test_quantile_out_of_range(table, qs):
    with pytest.raises(InvalidArgumentError):
        table.quantile("age", qs)


def test_quantile_validates_before_type(table):
    with pytest.raises(InvalidArgumentError):
        table.quantile("name", [2.0])


def test_corr():
    table = Table.from_rows(
        ["x", "y", "z", "label"],
        [["1", "2", "5", "a"], ["2", "4", "5", "b"], ["3", "6", "5", "c"]],
    )
    result = table.corr()
    assert result[("x", "x")] == 1.0
    assert result[("x", "y")] == pytest.approx(1.0)
    assert result[("x", "z")] == 0.0
    assert ("y", "x") not in result
    assert all("label" not in key for key in result)


def test_corr_skips_incomplete_pairs():
    table = Table.from_rows(["x", "y"], [["1", "1"], ["2", ""], ["3", "3"], ["", "9"]])
    assert table.corr()[("x", "y")] == pytest.approx(1.0)


def test_cov():
    table = Table.from_rows(["x", "y"], [["1", "2"], ["2", "4"], ["3", "6"]])
    result = table.cov()
    assert result[("x", "x")] == pytest.approx(1.0)
    assert result[("x", "y")] == pytest.approx(2.0)
    assert result[("y", "y")] == pytest.approx(4.0)


def test_cov_insufficient_pairs():
    table = Table.from_rows(["x", "y"], [["1", ""], ["", "2"]])
    assert table.cov()[("x", "y")] == 0.0


def test_describe(table):
    result = table.describe()
    assert result.columns == ["column", "count", "mean", "std", "min", "25%", "50%", "75%", "max"]
    assert result.get_column("column") == ["age", "score"]
    age = result.rows[0]
    assert age[1] == "4"
    assert age[2] == "30.0"
    assert age[4] == "25.0"
    assert age[8] == "35.0"


def test_describe_reports_failures_as_nan():
    table = Table.from_rows(["x"], [["5"]])
    row = table.describe().rows[0]
    assert row[3] == "NaN"
    assert row[2] == "5.0"


def test_describe_keeps_columns_sharing_a_name_apart():
    table = Table(["v", "v"], [["1", "10"], ["3", "30"]], [DataType.INT, DataType.INT])
    result = table.describe()
    assert result.get_column("column") == ["v", "v"]
    assert [row[2] for row in result.rows] == ["2.0", "20.0"]
    assert [row[8] for row in result.rows] == ["3.0", "30.0"]


def test_reductions_return_plain_floats():
    table = Table.from_rows(["x"], [["1"], ["2"], ["4"], [""]])
    results = [
        table.mean("x"),
        table.median("x"),
        table.variance("x"),
        table.min("x"),
        table.max("x"),
        table.sum("x"),
        table.prod("x"),
        *table.quantile("x", [0.0, 0.5, 1.0]),
    ]
    assert all(type(value) is float for value in results)
    assert results == [
        pytest.approx(7 / 3), 2.0, pytest.approx(7 / 3), 1.0, 4.0, 7.0, 8.0, 1.0, 2.0, 4.0,
    ]
