from __future__ import annotations

import logging

from openpyxl.worksheet.worksheet import Worksheet

from .models import CellRange
from .sheet import OpenpyxlSheet, as_sheet

logger = logging.getLogger(__name__)


def merge_region(
    sheet: OpenpyxlSheet | Worksheet,
    first_row: int,
    last_row: int,
    first_col: int,
    last_col: int,
) -> CellRange | None:
    """Merge a rectangular span of cells.

    Single-cell and inverted spans are ignored.

    Returns:
        The merged region, or None when nothing was merged.
    """
    if first_row > last_row or first_col > last_col:
        return None
    if first_row == last_row and first_col == last_col:
        return None
    region = CellRange(
        first_row=first_row,
        last_row=last_row,
        first_col=first_col,
        last_col=last_col,
    )
    as_sheet(sheet).add_merged_region(region)
    return region


def remap_regions(
    sheet: OpenpyxlSheet | Worksheet, source_row: int, target_row: int
) -> list[CellRange]:
    """Duplicate the merged regions anchored at ``source_row`` onto ``target_row``.

    Only regions whose first row is exactly ``source_row`` are copied; a
    multi-row region anchored above ``source_row`` is left as it is, even when
    rows have shifted underneath it.

    Returns:
        The regions created for ``target_row``.
    """
    adapter = as_sheet(sheet)
    created: list[CellRange] = []
    for region in adapter.merged_regions():
        if region.first_row != source_row:
            continue
        remapped = CellRange(
            first_row=target_row,
            last_row=target_row + (region.last_row - region.first_row),
            first_col=region.first_col,
            last_col=region.last_col,
        )
        adapter.add_merged_region(remapped)
        created.append(remapped)
    if created:
        logger.debug(
            "Remapped %d merged region(s) from row %d to row %d.",
            len(created),
            source_row,
            target_row,
        )
    return created
