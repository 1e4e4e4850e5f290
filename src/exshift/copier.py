from __future__ import annotations

from copy import copy

from openpyxl.cell.cell import MergedCell

from .sheet import SheetCell
from .values import read_typed_value, write_typed_value


def copy_cell(source: SheetCell, target: SheetCell, copy_value: bool) -> None:
    """Copy style, comment and optionally the typed value between cells.

    Formulas are never copied as live formulas: with ``copy_value`` the
    formula text lands in the target as plain text. A target covered by a
    merged region only takes the style.
    """
    # Style indices point into the shared workbook style tables; a default
    # source style still replaces whatever the target had.
    target._style = copy(source._style)
    if isinstance(target, MergedCell):
        return
    if source.comment is not None:
        target.comment = source.comment
    if copy_value:
        copy_cell_value(source, target)


def copy_cell_value(source: SheetCell, target: SheetCell) -> None:
    """Copy the typed value of ``source`` into ``target``."""
    write_typed_value(target, read_typed_value(source))
