import json

import pytest

from celltable import DataType, Table
from celltable.errors import TableIOError


def test_read_json(tmp_path):
    path = tmp_path / "data.jsonl"
    path.write_text(
        '{"name": "Rome", "population": 2873000, "area": 1285.0}\n'
        '{"name": "Milan", "population": null, "area": 181.8}\n'
    )
    table = Table.read_json(str(path))
    assert table.columns == ["name", "population", "area"]
    assert table.rows == [["Rome", "2873000", "1285.0"], ["Milan", "", "181.8"]]
    assert table.column_types == [DataType.STRING, DataType.INT, DataType.FLOAT]


def test_read_json_missing_file(tmp_path):
    with pytest.raises(TableIOError):
        Table.read_json(str(tmp_path / "missing.jsonl"))


def test_read_json_invalid_content(tmp_path):
    path = tmp_path / "data.jsonl"
    path.write_text("not json\n")
    with pytest.raises(TableIOError):
        Table.read_json(str(path))


def test_to_records():
    table = Table(
        ["name", "n", "x"],
        [["a", "1", "2.5"], ["b", "", "inf"], ["c"]],
        [DataType.STRING, DataType.INT, DataType.FLOAT],
    )
    assert table.to_records() == [
        {"name": "a", "n": 1, "x": 2.5},
        {"name": "b", "n": None, "x": None},
        {"name": "c", "n": None, "x": None},
    ]


def test_to_records_keeps_unparseable_cells():
    table = Table(["n"], [["1"], ["oops"]], [DataType.INT])
    assert table.to_records() == [{"n": 1}, {"n": "oops"}]


def test_write_json_array(tmp_path):
    table = Table.from_rows(["name", "n"], [["a", "1"], ["b", ""]])
    filename = tmp_path / "out.json"
    table.to_json(str(filename))
    assert json.loads(filename.read_text()) == [{"name": "a", "n": 1}, {"name": "b", "n": None}]


def test_write_json_lines_roundtrip(tmp_path):
    table = Table.from_rows(["name", "n"], [["a", "1"], ["b", "2"]])
    filename = str(tmp_path / "out.jsonl")
    table.to_json(filename, lines=True)
    assert Table.read_json(filename).equals(table)


def test_write_json_to_missing_directory(tmp_path):
    with pytest.raises(TableIOError):
        Table.from_rows(["a"], [["1"]]).to_json(str(tmp_path / "missing" / "out.json"))
