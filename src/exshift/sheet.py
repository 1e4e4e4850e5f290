from __future__ import annotations

from copy import copy
import logging
from typing import TypeAlias

from openpyxl.cell.cell import Cell, MergedCell
from openpyxl.styles.cell_style import StyleArray
from openpyxl.worksheet.worksheet import Worksheet

from .models import CellRange
from .validation import ListValidation, OpenpyxlListValidation, OpenpyxlValidationHelper

logger = logging.getLogger(__name__)

SheetCell: TypeAlias = Cell | MergedCell


class OpenpyxlSheet:
    """Row-structured view of an openpyxl worksheet.

    Rows and columns are 0-based here; openpyxl coordinates are 1-based. A row
    exists when it holds at least one cell or a row-dimension record. The
    sheet is read and written in place and is not safe for concurrent use.
    """

    def __init__(self, worksheet: Worksheet) -> None:
        self.worksheet = worksheet

    @property
    def title(self) -> str:
        return self.worksheet.title

    @property
    def last_row_index(self) -> int:
        """Index of the last existing row, or -1 for an empty sheet."""
        rows = self._existing_rows()
        return max(rows) - 1 if rows else -1

    def row_cells(self, row: int) -> list[SheetCell]:
        """Return the populated cells of a row ordered by column."""
        cells = self.worksheet._cells
        excel_row = row + 1
        columns = sorted(col for (r, col) in cells if r == excel_row)
        return [cells[(excel_row, col)] for col in columns]

    def get_cell(self, row: int, col: int) -> SheetCell | None:
        return self.worksheet._cells.get((row + 1, col + 1))

    def create_cell(self, row: int, col: int) -> SheetCell:
        """Return the cell at (row, col), creating it when missing."""
        _ensure_non_negative(row, "row")
        _ensure_non_negative(col, "column")
        return self.worksheet.cell(row=row + 1, column=col + 1)

    def create_row(self, row: int) -> None:
        """Create an empty row at ``row``, replacing any existing one."""
        _ensure_non_negative(row, "row")
        self._drop_row(row + 1)
        # Indexing a missing row dimension creates the row record.
        self.worksheet.row_dimensions[row + 1]

    def remove_row(self, row: int) -> None:
        """Drop a row's cells and dimension without moving other rows."""
        self._drop_row(row + 1)

    def row_height(self, row: int) -> float | None:
        """Return the custom row height, or None for the default height."""
        dimension = self.worksheet.row_dimensions.get(row + 1)
        return None if dimension is None else dimension.height

    def set_row_height(self, row: int, height: float | None) -> None:
        _ensure_non_negative(row, "row")
        self.worksheet.row_dimensions[row + 1].height = height

    def row_style(self, row: int) -> StyleArray | None:
        dimension = self.worksheet.row_dimensions.get(row + 1)
        if dimension is None or not dimension.has_style:
            return None
        return dimension._style

    def set_row_style(self, row: int, style: StyleArray) -> None:
        _ensure_non_negative(row, "row")
        # StyleArray holds indices into the workbook style tables; copying it
        # shares the styles themselves.
        self.worksheet.row_dimensions[row + 1]._style = copy(style)

    def merged_regions(self) -> list[CellRange]:
        return [
            CellRange(
                first_row=merged.min_row - 1,
                last_row=merged.max_row - 1,
                first_col=merged.min_col - 1,
                last_col=merged.max_col - 1,
            )
            for merged in self.worksheet.merged_cells.ranges
        ]

    def add_merged_region(self, region: CellRange) -> None:
        """Merge ``region``.

        Raises:
            ValueError: If the region overlaps an existing merged region.
        """
        for existing in self.merged_regions():
            if existing.intersects(region):
                raise ValueError(
                    f"Merged region {region.to_a1()} overlaps existing merged "
                    f"region {existing.to_a1()}."
                )
        self.worksheet.merge_cells(
            start_row=region.first_row + 1,
            start_column=region.first_col + 1,
            end_row=region.last_row + 1,
            end_column=region.last_col + 1,
        )

    def shift_rows(
        self,
        from_row: int,
        to_row: int,
        offset: int,
        *,
        copy_row_height: bool = False,
        reset_original_height: bool = False,
    ) -> None:
        """Move rows ``from_row..to_row`` (inclusive) by ``offset``.

        Destination rows are overwritten. Cells and row styles travel with
        their row; heights travel only with ``copy_row_height``. Rows vacated
        by a downward shift stay as empty rows (keeping their height unless
        ``reset_original_height``); rows vacated by an upward shift are
        discarded. Merged regions are not adjusted.
        """
        if from_row > to_row or offset == 0:
            return
        if from_row + offset < 0:
            raise ValueError(
                f"Cannot shift rows {from_row}..{to_row} by {offset}: "
                "destination is before the first row."
            )
        cells = self.worksheet._cells
        dimensions = self.worksheet.row_dimensions
        moved = range(from_row + 1, to_row + 2)
        heights = {
            excel_row: dimensions[excel_row].height
            for excel_row in moved
            if excel_row in dimensions
        }
        for excel_row in range(moved.start + offset, moved.stop + offset):
            if excel_row not in moved:
                self._drop_row(excel_row)

        cell_rows: dict[int, list[int]] = {}
        for excel_row, col in cells:
            if excel_row in moved:
                cell_rows.setdefault(excel_row, []).append(col)
        for excel_row in sorted(moved, reverse=offset > 0):
            target = excel_row + offset
            for col in cell_rows.get(excel_row, []):
                cell = cells.pop((excel_row, col))
                cell.row = target
                if cell.hyperlink is not None:
                    cell.hyperlink.ref = cell.coordinate
                cells[(target, col)] = cell
            dimension = dimensions.pop(excel_row, None)
            if dimension is not None:
                dimension.index = target
                if not copy_row_height:
                    dimension.height = None
                dimensions[target] = dimension

        landed = {excel_row + offset for excel_row in moved}
        for excel_row in moved:
            if excel_row in landed or offset < 0:
                continue
            height = heights.get(excel_row)
            if height is not None and not reset_original_height:
                dimensions[excel_row].height = height
        logger.debug(
            "Shifted rows %d..%d by %d on %s.",
            from_row,
            to_row,
            offset,
            self.title,
        )

    def validation_helper(self) -> OpenpyxlValidationHelper:
        return OpenpyxlValidationHelper()

    def add_validation(self, validation: ListValidation) -> None:
        if not isinstance(validation, OpenpyxlListValidation):
            raise TypeError(
                f"openpyxl sheets only accept openpyxl validations: {type(validation).__name__}"
            )
        self.worksheet.add_data_validation(validation.data_validation)

    def _existing_rows(self) -> set[int]:
        rows = {excel_row for excel_row, _ in self.worksheet._cells}
        rows.update(self.worksheet.row_dimensions.keys())
        return rows

    def _drop_row(self, excel_row: int) -> None:
        cells = self.worksheet._cells
        for key in [key for key in cells if key[0] == excel_row]:
            del cells[key]
        self.worksheet.row_dimensions.pop(excel_row, None)


def as_sheet(sheet: OpenpyxlSheet | Worksheet) -> OpenpyxlSheet:
    """Wrap a worksheet in the row-structured adapter when needed."""
    if isinstance(sheet, OpenpyxlSheet):
        return sheet
    return OpenpyxlSheet(sheet)


def _ensure_non_negative(value: int, name: str) -> None:
    if value < 0:
        raise ValueError(f"{name} index must not be negative: {value}")
