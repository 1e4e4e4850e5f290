from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any

from openpyxl.worksheet.worksheet import Worksheet

from .models import CellRange
from .sheet import OpenpyxlSheet
from .validation import (
    ListValidation,
    SuppressibleListValidation,
    ValidationSheet,
    XlwingsValidationSheet,
)

logger = logging.getLogger(__name__)


def set_dropdown(
    sheet: ValidationSheet | Worksheet | Any,
    first_row: int,
    last_row: int,
    first_col: int,
    last_col: int,
    allowed_values: Sequence[str],
) -> ListValidation:
    """Restrict a cell range to an explicit list of values.

    The dropdown mode depends on what the document format supports: when the
    validation can hide the in-cell arrow, the arrow is hidden and an error
    box is shown on invalid entry; otherwise the arrow stays visible.

    Args:
        sheet: openpyxl worksheet, xlwings sheet or a validation sheet adapter.
        first_row: First row (0-based, inclusive).
        last_row: Last row (0-based, inclusive).
        first_col: First column (0-based, inclusive).
        last_col: Last column (0-based, inclusive).
        allowed_values: Values offered by the dropdown.

    Returns:
        The validation attached to the sheet.

    Raises:
        ValueError: If the range is invalid or ``allowed_values`` is empty.
    """
    target_sheet = as_validation_sheet(sheet)
    helper = target_sheet.validation_helper()
    target = CellRange(
        first_row=first_row,
        last_row=last_row,
        first_col=first_col,
        last_col=last_col,
    )
    constraint = helper.create_explicit_list_constraint(allowed_values)
    validation = helper.create_validation(constraint, target)
    if isinstance(validation, SuppressibleListValidation):
        validation.suppress_dropdown_arrow()
        validation.enable_error_box()
    else:
        validation.show_dropdown_arrow()
    target_sheet.add_validation(validation)
    logger.debug(
        "Attached dropdown with %d value(s) to %s.", len(allowed_values), target.to_a1()
    )
    return validation


def as_validation_sheet(sheet: ValidationSheet | Worksheet | Any) -> ValidationSheet:
    """Pick the validation adapter matching the sheet's document model."""
    if isinstance(sheet, Worksheet):
        return OpenpyxlSheet(sheet)
    if hasattr(sheet, "validation_helper") and hasattr(sheet, "add_validation"):
        return sheet
    if hasattr(sheet, "range") and hasattr(sheet, "api"):
        return XlwingsValidationSheet(sheet)
    raise TypeError(f"Unsupported sheet type: {type(sheet).__name__}")
