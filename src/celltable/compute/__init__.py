"""The celltable compute functions.

Every operation that can be performed on a :class:`celltable.Table`
is implemented as a plain function in one of the modules of this
package, taking the table as its first argument. The Table methods
only delegate to these functions::

    table.mean("price")  ->  statistics.mean(table, "price")

Functions either return a new table, built through
:meth:`celltable.Table.derive` so that it never shares its rows
with the original, or modify the table in place and then
call :meth:`celltable.Table.refresh_caches` to keep
the null tracking up to date.

The functions are grouped by area:

* :mod:`.selection` picks rows, columns and cells.
* :mod:`.statistics` computes descriptive statistics.
* :mod:`.missing` drops and fills null cells.
* :mod:`.grouping` groups, aggregates and reshapes.
* :mod:`.join` merges and concatenates tables.
* :mod:`.sorting` sorts, ranks and removes duplicates.
* :mod:`.window` computes rolling and cumulative values.
* :mod:`.transform` encodes, maps and combines cells.

>>> from celltable import Table
>>> from celltable.compute import statistics
>>> table = Table.from_rows(["price"], [["10"], ["20"], [""]])
>>> statistics.mean(table, "price")
15.0
"""

from . import grouping, join, missing, selection, sorting, statistics, transform, window
from .grouping import GroupBy
from .missing import Imputer, ImputeStrategy

__all__ = (
    "grouping",
    "join",
    "missing",
    "selection",
    "sorting",
    "statistics",
    "transform",
    "window",
    "GroupBy",
    "Imputer",
    "ImputeStrategy",
)
