import pytest

from celltable import DataType, Table
from celltable.compute import join
from celltable.errors import InvalidArgumentError, SchemaMismatchError

LEFT_COLUMNS = ["id", "name"]
LEFT_ROWS = [["1", "Alice"], ["2", "Bob"], ["3", "Charlie"], ["4", "David"]]

RIGHT_COLUMNS = ["id", "age"]
RIGHT_ROWS = [["3", "25"], ["4", "30"], ["5", "35"], ["3", "26"]]


@pytest.fixture
def left():
    return Table.from_rows(LEFT_COLUMNS, LEFT_ROWS)


@pytest.fixture
def right():
    return Table.from_rows(RIGHT_COLUMNS, RIGHT_ROWS)


def test_left_merge_example():
    left = Table.from_rows(["k", "v"], [["a", "1"], ["b", "2"]])
    right = Table.from_rows(["k", "w"], [["a", "10"]])
    result = left.merge(right, on="k", how="left")
    assert result.columns == ["k", "v", "w"]
    assert result.rows == [["a", "1", "10"], ["b", "2", ""]]


def test_inner_merge(left, right):
    result = left.merge(right, on="id")
    assert result.columns == ["id", "name", "age"]
    assert result.rows == [
        ["3", "Charlie", "25"],
        ["3", "Charlie", "26"],
        ["4", "David", "30"],
    ]
    assert result.column_types == [DataType.INT, DataType.STRING, DataType.INT]


def test_right_merge(left, right):
    result = left.merge(right, on="id", how="right")
    assert result.rows == [
        ["3", "Charlie", "25"],
        ["3", "Charlie", "26"],
        ["4", "David", "30"],
        ["5", "", "35"],
    ]


def test_outer_merge(left, right):
    result = left.merge(right, on="id", how="outer")
    assert result.get_column("id") == ["1", "2", "3", "3", "4", "5"]
    assert result.get_column("age") == ["", "", "25", "26", "30", "35"]


def test_merge_different_key_names(left):
    right = Table.from_rows(["person", "city"], [["2", "Rome"]])
    result = left.merge(right, left_on="id", right_on="person")
    assert result.columns == ["id", "name", "city"]
    assert result.rows == [["2", "Bob", "Rome"]]


def test_merge_multiple_keys():
    left = Table.from_rows(["a", "b", "v"], [["x", "1", "l1"], ["x", "2", "l2"]])
    right = Table.from_rows(["a", "b", "w"], [["x", "2", "r2"], ["y", "1", "r1"]])
    result = join.merge(left, right, on=["a", "b"])
    assert result.rows == [["x", "2", "l2", "r2"]]


def test_merge_defaults_to_common_columns(left, right):
    assert left.merge(right).equals(left.merge(right, on="id"))


def test_merge_missing_keys_match_as_null():
    left = Table(["k", "v"], [["1"], ["", "2"]])
    right = Table.from_rows(["k", "w"], [["", "x"]])
    assert left.merge(right, on="k").rows == [["", "2", "x"]]


def test_merge_key_count_mismatch(left, right):
    with pytest.raises(SchemaMismatchError):
        left.merge(right, left_on=["id", "name"], right_on=["id"])


def test_merge_invalid_mode(left, right):
    with pytest.raises(InvalidArgumentError):
        left.merge(right, on="id", how="cross")


def test_merge_without_common_columns():
    with pytest.raises(InvalidArgumentError):
        Table(["a"], []).merge(Table(["b"], []))


def test_concat_rows():
    first = Table.from_rows(["a", "b"], [["1", "x"]])
    second = Table.from_rows(["a", "b"], [["2.5", "y"], ["3"]])
    result = Table.concat([first, second])
    assert result.rows == [["1", "x"], ["2.5", "y"], ["3", ""]]
    assert result.column_types == [DataType.FLOAT, DataType.STRING]
    assert result.null_positions == [[], [2]]


def test_concat_rows_requires_same_columns():
    with pytest.raises(SchemaMismatchError):
        join.concat([Table(["a"], []), Table(["b"], [])])


def test_concat_columns():
    first = Table(["a", "b"], [["1"], ["2", "y"]])
    second = Table(["c"], [["x"], ["z"]])
    result = Table.concat([first, second], axis=1)
    assert result.columns == ["a", "b", "c"]
    assert result.rows == [["1", "", "x"], ["2", "y", "z"]]


def test_concat_columns_requires_same_rows():
    with pytest.raises(SchemaMismatchError):
        join.concat([Table(["a"], [["1"]]), Table(["b"], [])], axis=1)


def test_concat_edge_cases():
    assert join.concat([]).shape == (0, 0)
    with pytest.raises(InvalidArgumentError):
        join.concat([Table()], axis=2)
    single = Table.from_rows(["a"], [["1"]])
    assert join.concat([single], ignore_index=True).equals(single)


def test_join_by_position(left):
    other = Table.from_rows(["score"], [["9"], ["7"]])
    result = left.join(other)
    assert result.columns == ["id", "name", "score"]
    assert result.get_column("score") == ["9", "7", "", ""]
    inner = left.join(other, how="inner")
    assert inner.rows == [["1", "Alice", "9"], ["2", "Bob", "7"]]


def test_join_invalid_mode(left):
    with pytest.raises(InvalidArgumentError):
        left.join(left, how="outer")
