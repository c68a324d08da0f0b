import pytest

from celltable import Table
from celltable.errors import ColumnNotFoundError, ColumnTypeError, InvalidArgumentError


def test_sort_single_column():
    table = Table.from_rows(["name"], [["c"], ["a"], ["b"]])
    table.sort_values("name")
    assert table.get_column("name") == ["a", "b", "c"]


def test_sort_descending():
    table = Table.from_rows(["name"], [["c"], ["a"], ["b"]])
    table.sort_values("name", ascending=False)
    assert table.get_column("name") == ["c", "b", "a"]


def test_sort_is_lexicographic():
    table = Table.from_rows(["n"], [["9"], ["10"], ["100"]])
    table.sort_values("n")
    assert table.get_column("n") == ["10", "100", "9"]


def test_sort_multiple_columns():
    table = Table.from_rows(
        ["city", "name"], [["Rome", "b"], ["Milan", "z"], ["Rome", "a"], ["Milan", "c"]]
    )
    table.sort_values(["city", "name"], [True, False])
    assert table.rows == [["Milan", "z"], ["Milan", "c"], ["Rome", "b"], ["Rome", "a"]]


def test_sort_is_stable():
    table = Table.from_rows(["k", "v"], [["b", "1"], ["a", "2"], ["b", "3"], ["a", "4"]])
    table.sort_values("k")
    assert table.get_column("v") == ["2", "4", "1", "3"]


def test_sort_short_rows_are_never_smaller():
    table = Table(["a", "b"], [["x", "2"], ["y", "1"], ["z"]])
    table.sort_values("b")
    assert table.rows == [["y", "1"], ["x", "2"], ["z"]]


def test_sort_updates_null_positions():
    table = Table.from_rows(["a"], [["b"], [""], ["a"]])
    table.sort_values("a")
    assert table.get_column("a") == ["", "a", "b"]
    assert table.null_positions == [[0]]


def test_sort_invalid_arguments():
    table = Table.from_rows(["a"], [["1"]])
    with pytest.raises(ColumnNotFoundError):
        table.sort_values("missing")
    with pytest.raises(InvalidArgumentError):
        table.sort_values(["a"], [True, False])


def test_sort_index():
    table = Table.from_rows(["a"], [["1"], ["2"], ["3"]])
    table.sort_index()
    assert table.get_column("a") == ["1", "2", "3"]
    table.sort_index(ascending=False)
    assert table.get_column("a") == ["3", "2", "1"]


@pytest.mark.parametrize(
    "method, expected",
    [
        ("first", ["3", "1", "4", "2", ""]),
        ("average", ["3.5", "1.0", "3.5", "2.0", ""]),
        ("min", ["3", "1", "3", "2", ""]),
        ("max", ["4", "1", "4", "2", ""]),
        ("dense", ["3", "1", "3", "2", ""]),
    ],
)
def test_rank(method, expected):
    table = Table.from_rows(["score"], [["30"], ["10"], ["30"], ["20"], [""]])
    ranked = table.rank("score", method)
    assert ranked.columns == ["score", "score_rank"]
    assert ranked.get_column("score_rank") == expected
    assert table.columns == ["score"]


def test_rank_invalid():
    table = Table.from_rows(["name", "n"], [["a", "1"]])
    with pytest.raises(ColumnTypeError):
        table.rank("name")
    with pytest.raises(InvalidArgumentError):
        table.rank("n", "random")


def test_duplicated():
    table = Table.from_rows(["a", "b"], [["1", "x"], ["2", "y"], ["1", "x"], ["1", "z"]])
    assert table.duplicated() == [False, False, True, False]
    assert table.duplicated(["a"]) == [False, False, True, True]
    assert table.duplicated(["a"], keep_first=False) == [True, False, True, False]


def test_drop_duplicates_leaves_no_duplicates():
    table = Table.from_rows(
        ["a", "b"], [["1", "x"], ["2", "y"], ["1", "x"], ["2", "y"], ["3", "z"]]
    )
    result = table.drop_duplicates()
    assert result.rows == [["1", "x"], ["2", "y"], ["3", "z"]]
    assert not any(result.duplicated())
    assert len(table) == 5


@pytest.mark.parametrize("keep_first", [True, False])
@pytest.mark.parametrize("subset", [None, ["a"], ["b"], ["a", "b"], ["b", "c"]])
def test_drop_duplicates_for_any_subset(subset, keep_first):
    table = Table(
        ["a", "b", "c"],
        [["1", "x", "p"], ["2", "x", "q"], ["1", "y", "p"], ["1", "x", "q"], ["2"], ["2", ""]],
    )
    result = table.drop_duplicates(subset, keep_first=keep_first)
    assert not any(result.duplicated(subset))
    assert not any(result.duplicated(subset, keep_first=False))
    assert len(result) == table.duplicated(subset, keep_first).count(False)
