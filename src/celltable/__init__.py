"""celltable

An in-memory tabular data engine where every cell is text.

celltable provides a two dimensional table with named and typed columns,
and the operations usually expected from a dataframe library: selection,
statistics, handling of missing data, grouping, merging, sorting,
window functions and transformations. It's meant for ad-hoc data wrangling
in applications that don't want to depend on a full data processing runtime.

The library is constituted by multiple components, each self documented
in literate programming style:

* The :class:`Table` itself, which stores the data.
* The compute functions in :mod:`celltable.compute`, that implement the operations.
* The adapters in :mod:`celltable.formats`, to read and write CSV, JSON, HTML and Arrow.
* The options in :mod:`celltable.config`, which tune how data is displayed.

>>> from celltable import Table
>>> table = Table.from_rows(["temp", "city"], [["21.5", "Rome"], ["8", "Oslo"]])
>>> table.shape
(2, 2)
>>> print(table)
temp  | city
----- | ----
21.50 | Rome
8.00  | Oslo

The library logs through the standard :mod:`logging` module
under the ``celltable`` logger and never configures handlers on its own.
"""

import logging

from . import compute, config, errors, formats
from .compute import GroupBy, Imputer, ImputeStrategy
from .config import get_option, option_context, reset_option, set_option
from .dtypes import DataType
from .table import Table

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = (
    "compute",
    "config",
    "errors",
    "formats",
    "DataType",
    "GroupBy",
    "Imputer",
    "ImputeStrategy",
    "Table",
    "get_option",
    "option_context",
    "reset_option",
    "set_option",
)
