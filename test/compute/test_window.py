import math

import pytest

from celltable import DataType, Table
from celltable.compute import window
from celltable.errors import ColumnNotFoundError, ColumnTypeError, InvalidArgumentError


@pytest.fixture
def table():
    return Table.from_rows(["x", "label"], [["1", "a"], ["2", "b"], ["3", "c"], ["4", "d"]])


def assert_floats(actual, expected):
    assert len(actual) == len(expected)
    for a, e in zip(actual, expected):
        if math.isnan(e):
            assert math.isnan(a)
        else:
            assert a == pytest.approx(e)


NAN = float("nan")


def test_rolling_mean(table):
    assert_floats(table.rolling_mean("x", 2), [NAN, 1.5, 2.5, 3.5])


def test_rolling_mean_skips_nulls():
    table = Table.from_rows(["x"], [["1"], [""], ["3"], [""], [""]])
    assert_floats(window.rolling_mean(table, "x", 2), [NAN, 1.0, 3.0, 3.0, NAN])


def test_rolling_sum(table):
    assert_floats(table.rolling_sum("x", 3), [NAN, NAN, 6.0, 9.0])


def test_rolling_std(table):
    assert_floats(table.rolling_std("x", 2), [NAN] + [math.sqrt(0.5)] * 3)


def test_window_of_one(table):
    assert_floats(table.rolling_mean("x", 1), [1.0, 2.0, 3.0, 4.0])


def test_window_larger_than_table(table):
    assert all(math.isnan(v) for v in table.rolling_sum("x", 10))


@pytest.mark.parametrize("size", [0, -1])
def test_invalid_window(table, size):
    with pytest.raises(InvalidArgumentError):
        table.rolling_mean("x", size)


def test_string_column_rejected(table):
    with pytest.raises(ColumnTypeError):
        table.rolling_mean("label", 2)
    with pytest.raises(ColumnTypeError):
        table.cumsum("label")


def test_missing_column(table):
    with pytest.raises(ColumnNotFoundError):
        table.rolling_sum("missing", 2)


def test_expanding_mean():
    table = Table.from_rows(["x"], [[""], ["2"], ["4"], [""]])
    assert_floats(table.expanding_mean("x"), [NAN, 2.0, 3.0, 3.0])


def test_cumulative(table):
    assert table.cumsum("x") == [1.0, 3.0, 6.0, 10.0]
    assert table.cumprod("x") == [1.0, 2.0, 6.0, 24.0]


def test_cumulative_skips_nulls():
    table = Table.from_rows(["x"], [["2"], [""], ["3"]])
    assert table.cumsum("x") == [2.0, 2.0, 5.0]
    assert table.cumprod("x") == [2.0, 2.0, 6.0]


def test_pct_change():
    table = Table.from_rows(["x"], [["10"], ["15"], ["0"], ["5"], [""]])
    assert_floats(table.pct_change("x"), [NAN, 0.5, -1.0, NAN, NAN])
    assert_floats(table.pct_change("x", periods=2), [NAN, NAN, -1.0, -2.0 / 3.0, NAN])


def test_pct_change_invalid_periods(table):
    with pytest.raises(InvalidArgumentError):
        table.pct_change("x", periods=0)


def test_cumulative_of_empty_table():
    table = Table(["x"], [], [DataType.INT])
    assert table.cumsum("x") == []
    assert table.cumprod("x") == []


def test_cumulative_rejects_string_columns():
    table = Table.from_rows(["x"], [["a"], ["b"]])
    with pytest.raises(ColumnTypeError):
        table.cumsum("x")
    with pytest.raises(ColumnTypeError):
        table.cumprod("x")
