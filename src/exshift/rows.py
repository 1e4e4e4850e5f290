from __future__ import annotations

from collections.abc import Sequence
import logging

from openpyxl.styles.cell_style import StyleArray
from openpyxl.worksheet.worksheet import Worksheet

from .copier import copy_cell
from .regions import remap_regions
from .sheet import OpenpyxlSheet, as_sheet

logger = logging.getLogger(__name__)


def shift_rows(
    sheet: OpenpyxlSheet | Worksheet,
    from_row: int,
    to_row: int,
    offset: int,
    *,
    copy_row_height: bool = False,
    reset_original_height: bool = False,
) -> None:
    """Move rows ``from_row..to_row`` by a signed ``offset``.

    A positive offset opens a gap, a negative one closes it. See
    :meth:`OpenpyxlSheet.shift_rows` for the exact height rules.
    """
    as_sheet(sheet).shift_rows(
        from_row,
        to_row,
        offset,
        copy_row_height=copy_row_height,
        reset_original_height=reset_original_height,
    )


def remove_row(sheet: OpenpyxlSheet | Worksheet, row: int) -> None:
    """Delete one row, pulling every row below it up by one.

    The last row is dropped without a shift. Negative indices and indices past
    the last row are ignored.
    """
    adapter = as_sheet(sheet)
    last_row = adapter.last_row_index
    if row < 0 or row > last_row:
        logger.debug("Ignoring removal of row %d (last row %d).", row, last_row)
        return
    if row < last_row:
        adapter.shift_rows(
            row + 1,
            last_row,
            -1,
            copy_row_height=True,
            reset_original_height=False,
        )
        return
    adapter.remove_row(row)


def delete_rows(sheet: OpenpyxlSheet | Worksheet, row_indexes: Sequence[int]) -> None:
    """Delete every row in ``row_indexes``, given in original numbering.

    Each deletion moves later rows up by one, so the k-th index is applied at
    ``row_indexes[k] - k``. That only holds for strictly ascending input.

    Raises:
        ValueError: If ``row_indexes`` is not strictly ascending.
    """
    indexes = list(row_indexes)
    for previous, current in zip(indexes, indexes[1:]):
        if current <= previous:
            raise ValueError(
                "row_indexes must be strictly ascending without duplicates: "
                f"{indexes}"
            )
    adapter = as_sheet(sheet)
    for deleted, row in enumerate(indexes):
        remove_row(adapter, row - deleted)


def clone_row(
    sheet: OpenpyxlSheet | Worksheet,
    source_row: int,
    target_row: int,
    copy_value: bool,
) -> None:
    """Copy height, anchored merged regions and cells of one row onto another."""
    adapter = as_sheet(sheet)
    adapter.set_row_height(target_row, adapter.row_height(source_row))
    remap_regions(adapter, source_row, target_row)
    for cell in adapter.row_cells(source_row):
        target = adapter.create_cell(target_row, cell.column - 1)
        copy_cell(cell, target, copy_value)


def copy_rows_below(
    sheet: OpenpyxlSheet | Worksheet,
    template_row: int,
    copy_count: int = 1,
    copy_value: bool = False,
) -> None:
    """Insert ``copy_count`` copies of ``template_row`` directly below it."""
    if copy_count < 1:
        return
    adapter = as_sheet(sheet)
    adapter.shift_rows(
        template_row + 1,
        adapter.last_row_index,
        copy_count,
        copy_row_height=True,
        reset_original_height=False,
    )
    style = adapter.row_style(template_row)
    height = adapter.row_height(template_row)
    for count in range(1, copy_count + 1):
        new_row = template_row + count
        _create_template_row(adapter, new_row, style, height)
        clone_row(adapter, template_row, new_row, copy_value)
    logger.debug(
        "Copied row %d %d time(s) on %s.", template_row, copy_count, adapter.title
    )


def add_and_copy_rows(
    sheet: OpenpyxlSheet | Worksheet,
    template_row: int,
    add_count: int,
    jump: int,
    copy_value: bool,
) -> None:
    """Insert ``add_count`` rows ``jump`` rows past the template block.

    Iteration ``i`` copies row ``template_row + i`` into a new row at
    ``template_row + jump + i + 1``. The source is re-read every iteration, so
    with ``jump == 0`` each new row copies the row just inserted before it and
    the template is repeated downward in place.
    """
    adapter = as_sheet(sheet)
    for index in range(add_count):
        source_row = template_row + index
        new_row = template_row + jump + index + 1
        adapter.shift_rows(
            new_row,
            adapter.last_row_index,
            1,
            copy_row_height=True,
            reset_original_height=False,
        )
        _create_template_row(
            adapter,
            new_row,
            adapter.row_style(source_row),
            adapter.row_height(source_row),
        )
        clone_row(adapter, source_row, new_row, copy_value)
    logger.debug(
        "Added %d row(s) after template row %d (jump=%d) on %s.",
        add_count,
        template_row,
        jump,
        adapter.title,
    )


def _create_template_row(
    adapter: OpenpyxlSheet,
    row: int,
    style: StyleArray | None,
    height: float | None,
) -> None:
    adapter.create_row(row)
    if style is not None:
        adapter.set_row_style(row, style)
    adapter.set_row_height(row, height)
