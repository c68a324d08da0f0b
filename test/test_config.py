import pytest

from celltable import config
from celltable.errors import InvalidArgumentError


@pytest.fixture(autouse=True)
def restore_options():
    yield
    for name in ("display.max_rows", "display.max_colwidth", "format.float_precision"):
        config.reset_option(name)


def test_defaults():
    assert config.get_option("display.max_rows") == 20
    assert config.get_option("display.max_colwidth") == 30
    assert config.get_option("display.float_precision") == 2
    assert config.get_option("format.float_precision") is None


def test_set_and_reset_option():
    config.set_option("display.max_rows", 5)
    assert config.get_option("display.max_rows") == 5
    config.reset_option("display.max_rows")
    assert config.get_option("display.max_rows") == 20


@pytest.mark.parametrize(
    "name,value",
    [
        ("display.max_rows", -1),
        ("display.max_rows", "10"),
        ("display.max_colwidth", 2.5),
        ("display.max_colwidth", True),
        ("format.float_precision", -3),
    ],
)
def test_invalid_values(name, value):
    with pytest.raises(InvalidArgumentError):
        config.set_option(name, value)


def test_unknown_option():
    with pytest.raises(InvalidArgumentError, match="Unknown option"):
        config.get_option("display.unknown")
    with pytest.raises(InvalidArgumentError):
        config.set_option("display.unknown", 1)


def test_option_context_restores_values():
    config.set_option("display.max_colwidth", 10)
    with config.option_context(display__max_colwidth=5, display__max_rows=3):
        assert config.get_option("display.max_colwidth") == 5
        assert config.get_option("display.max_rows") == 3
    assert config.get_option("display.max_colwidth") == 10
    assert config.get_option("display.max_rows") == 20


def test_option_context_restores_on_error():
    with pytest.raises(RuntimeError):
        with config.option_context({"format.float_precision": 3}):
            raise RuntimeError("boom")
    assert config.get_option("format.float_precision") is None


def test_describe_option():
    text = config.describe_option("display.max_rows")
    assert text.startswith("display.max_rows:")
    assert "[default: 20]" in text
