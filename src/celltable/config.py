"""Options that tune how tables are rendered and formatted.

Options are identified by dotted names, grouped by the
area they affect::

    display.max_rows          rows rendered when a table is printed
    display.max_colwidth      longer cells are truncated when printed
    display.float_precision   decimals used when printing numeric cells
    format.float_precision    decimals of computed numbers written into cells,
                              None means the shortest exact representation

>>> get_option("display.max_rows")
20
>>> with option_context({"display.max_rows": 5}):
...     get_option("display.max_rows")
5
>>> get_option("display.max_rows")
20

Options are process wide, they are the only global state of the library.
"""

import contextlib
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from .errors import InvalidArgumentError

__all__ = ("get_option", "set_option", "reset_option", "option_context", "describe_option")


def _non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _optional_non_negative_int(value: Any) -> bool:
    return value is None or _non_negative_int(value)


@dataclass(frozen=True)
class _Option:
    default: Any
    validator: Callable[[Any], bool]
    doc: str


_OPTIONS: dict[str, _Option] = {
    "display.max_rows": _Option(
        20, _non_negative_int, "Maximum number of rows rendered when printing a table."
    ),
    "display.max_colwidth": _Option(
        30, _non_negative_int, "Cells longer than this are truncated when printed."
    ),
    "display.float_precision": _Option(
        2, _non_negative_int, "Decimals used to print cells of numeric columns."
    ),
    "format.float_precision": _Option(
        None,
        _optional_non_negative_int,
        "Decimals of computed numbers stored in cells, None for the shortest exact form.",
    ),
}

_values: dict[str, Any] = {}


def _lookup(name: str) -> _Option:
    try:
        return _OPTIONS[name]
    except KeyError:
        raise InvalidArgumentError(f"Unknown option: {name}") from None


def get_option(name: str) -> Any:
    """Get the current value of an option."""
    option = _lookup(name)
    return _values.get(name, option.default)


def set_option(name: str, value: Any) -> None:
    """Change the value of an option.

    :param name: The dotted name of the option, like ``display.max_rows``.
    :param value: The new value, it must be accepted by the option validator.
    """
    option = _lookup(name)
    if not option.validator(value):
        raise InvalidArgumentError(f"Invalid value for option {name}: {value!r}")
    _values[name] = value


def reset_option(name: str) -> None:
    """Restore the default value of an option."""
    _lookup(name)
    _values.pop(name, None)


def describe_option(name: str) -> str:
    """Human readable description of an option and its current value."""
    option = _lookup(name)
    return f"{name}: {option.doc} [default: {option.default!r}] [currently: {get_option(name)!r}]"


@contextlib.contextmanager
def option_context(options: dict[str, Any] | None = None, **kwargs: Any) -> Iterator[None]:
    """Temporarily change options within a ``with`` block.

    Options can be provided as a dictionary of dotted names,
    or as keyword arguments where dots are replaced by
    double underscores (``display__max_rows=5``).
    """
    changes = dict(options or {})
    changes.update({k.replace("__", "."): v for k, v in kwargs.items()})

    previous = {name: _values.get(name, _lookup(name).default) for name in changes}
    try:
        for name, value in changes.items():
            set_option(name, value)
        yield
    finally:
        for name, value in previous.items():
            _values[name] = value
