"""Errors raised by celltable.

All errors are subclasses of :class:`TableError`, so callers
can catch every failure of the library at once, and they also
subclass the builtin exception that better describes them.
So code that doesn't know about celltable can still handle
a missing column as a ``KeyError`` or a wrong position
as an ``IndexError``.

Numeric cells that can't be parsed never raise,
they are skipped by the operations that need numbers.
"""

__all__ = (
    "TableError",
    "ColumnNotFoundError",
    "IndexOutOfRangeError",
    "ColumnTypeError",
    "EmptyColumnError",
    "InsufficientDataError",
    "InvalidArgumentError",
    "SchemaMismatchError",
    "TableIOError",
)


class TableError(Exception):
    """Base class of all the errors raised by celltable."""

    pass


class ColumnNotFoundError(TableError, KeyError):
    """A column with the requested name does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Column not found: {name}")
        self.name = name

    def __str__(self) -> str:
        # KeyError would otherwise quote the message.
        return self.args[0]


class IndexOutOfRangeError(TableError, IndexError):
    """A row or column position is beyond the bounds of the table."""

    pass


class ColumnTypeError(TableError, TypeError):
    """A numeric operation was requested on a STRING column, or the opposite."""

    pass


class EmptyColumnError(TableError, ValueError):
    """A statistic was requested on a column without usable values."""

    pass


class InsufficientDataError(TableError, ValueError):
    """Not enough values are available to compute a statistic."""

    pass


class InvalidArgumentError(TableError, ValueError):
    """A parameter has an unsupported value."""

    pass


class SchemaMismatchError(TableError, ValueError):
    """Shapes or columns of tables are not compatible for the operation."""

    pass


class TableIOError(TableError, OSError):
    """Data could not be read from or written to a file."""

    pass
