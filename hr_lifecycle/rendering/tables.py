"""
Table rendering.
"""

from typing import Callable

from .document import Table, TableCell

TABLE_OPEN = '<table border="1" style="border-collapse: collapse; width: 100%;">'


def render_table(table: Table, render_cell: Callable[[TableCell], str]) -> str:
    """
    Render a table; every cell of the first row is a header cell.

    Args:
        table: The table
        render_cell: Renders a cell's block content, recursing into
            nested tables

    Returns:
        HTML ``<table>`` markup
    """
    parts = [TABLE_OPEN]
    for row_index, row in enumerate(table.rows):
        cell_tag = "th" if row_index == 0 else "td"
        parts.append("<tr>")
        for cell in row.cells:
            parts.append(f"<{cell_tag}>{render_cell(cell)}</{cell_tag}>")
        parts.append("</tr>")
    parts.append("</table>")
    return "".join(parts)
