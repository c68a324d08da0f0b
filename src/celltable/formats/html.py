"""Export tables as HTML.

The table is rendered as a plain ``<table>`` element,
with the column names in the header and one ``<tr>``
for each row. The content of the cells is escaped:

>>> from celltable import Table
>>> print(render_html(Table.from_rows(["a"], [["<b>"]])))
<table>
  <thead>
    <tr><th>a</th></tr>
  </thead>
  <tbody>
    <tr><td>&lt;b&gt;</td></tr>
  </tbody>
</table>
"""

import html
import logging
from typing import TYPE_CHECKING

from ..compute.base import cell_at
from ..errors import TableIOError

if TYPE_CHECKING:
    from ..table import Table

log = logging.getLogger(__name__)

__all__ = ("render_html", "write_html")


def _html_row(cells: list[str], tag: str) -> str:
    return "<tr>" + "".join(f"<{tag}>{html.escape(cell)}</{tag}>" for cell in cells) + "</tr>"


def render_html(table: "Table") -> str:
    """Render a table to an HTML string."""
    width = len(table.columns)
    lines = ["<table>", "  <thead>", "    " + _html_row(table.columns, "th"), "  </thead>", "  <tbody>"]
    for row in table.rows:
        lines.append("    " + _html_row([cell_at(row, idx) for idx in range(width)], "td"))
    lines.extend(["  </tbody>", "</table>"])
    return "\n".join(lines)


def write_html(table: "Table", filename: str) -> None:
    """Write a table to an HTML file."""
    try:
        with open(filename, "w", encoding="utf-8") as f:
            f.write(render_html(table) + "\n")
    except OSError as err:
        raise TableIOError(f"Unable to write {filename}: {err}") from err
    log.info("Exported %d rows to %s", len(table.rows), filename)
