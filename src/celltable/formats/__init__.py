"""Read and write tables in other formats.

The adapters only rely on the public interface of
:class:`celltable.Table`: readers return the column
names and the rows of cells that are then loaded
through :meth:`celltable.Table.from_rows`, writers
read ``columns``, ``column_types`` and ``rows``.

Parsing of CSV and JSON files and conversion to Arrow
is done by pyarrow, so that the same files can be shared
with any other tool of the Arrow ecosystem.
"""

from . import arrow, delimited, html, jsonlines

__all__ = ("arrow", "delimited", "html", "jsonlines")
