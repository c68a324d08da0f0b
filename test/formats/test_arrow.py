import pyarrow as pa

from celltable import DataType, Table


def test_to_arrow_types():
    table = Table.from_rows(["i", "f", "s"], [["1", "1.5", "a"], ["", "2", ""]])
    data = table.to_arrow()
    assert data.schema.types == [pa.int64(), pa.float64(), pa.string()]
    assert data.to_pydict() == {"i": [1, None], "f": [1.5, 2.0], "s": ["a", None]}


def test_to_arrow_unrepresentable_cells():
    table = Table(["i"], [["1"], ["2.0"], ["x"]], [DataType.INT])
    assert table.to_arrow().column("i").to_pylist() == [1, 2, None]


def test_to_arrow_ragged_rows():
    table = Table(["a", "b"], [["x"], ["y", "z"]])
    assert table.to_arrow().column("b").to_pylist() == [None, "z"]


def test_from_arrow():
    data = pa.table({"n": [1, None, 3], "flag": [True, False, None], "x": [0.5, 1.0, None]})
    table = Table.from_arrow(data)
    assert table.columns == ["n", "flag", "x"]
    assert table.rows == [["1", "true", "0.5"], ["", "false", "1.0"], ["3", "", ""]]
    assert table.column_types == [DataType.INT, DataType.STRING, DataType.FLOAT]


def test_from_record_batch():
    batch = pa.record_batch({"a": ["x", "y"]})
    assert Table.from_arrow(batch).rows == [["x"], ["y"]]


def test_arrow_roundtrip():
    table = Table.from_rows(["i", "s"], [["1", "a"], ["", "b"]])
    assert Table.from_arrow(table.to_arrow()).equals(table)
