from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from openpyxl.worksheet.datavalidation import DataValidation
from pydantic import BaseModel, ConfigDict, field_validator

from .models import CellRange

# Excel COM constants (XlDVType.xlValidateList, XlDVAlertStyle.xlValidAlertStop,
# XlFormatConditionOperator.xlBetween).
_XL_VALIDATE_LIST = 3
_XL_VALID_ALERT_STOP = 1
_XL_BETWEEN = 1


class ExplicitListConstraint(BaseModel):
    """Enumerated list of values a validated cell may take."""

    model_config = ConfigDict(frozen=True)

    values: tuple[str, ...]

    @field_validator("values")
    @classmethod
    def _validate_values(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("allowed values must not be empty.")
        return value

    def to_ooxml_formula(self) -> str:
        """Quoted list formula as stored in ``dataValidation/formula1``."""
        escaped = ",".join(item.replace('"', '""') for item in self.values)
        return f'"{escaped}"'

    def to_com_formula(self) -> str:
        """Bare comma-separated list accepted by ``Validation.Add``."""
        return ",".join(self.values)


@runtime_checkable
class ListValidation(Protocol):
    """Dropdown validation produced by a validation helper."""

    target: CellRange

    def show_dropdown_arrow(self) -> None: ...


@runtime_checkable
class SuppressibleListValidation(ListValidation, Protocol):
    """Validation whose document format can hide the in-cell arrow."""

    def suppress_dropdown_arrow(self) -> None: ...

    def enable_error_box(self) -> None: ...


class ValidationHelper(Protocol):
    """Factory for constraints and validations bound to one document format."""

    def create_explicit_list_constraint(
        self, values: Sequence[str]
    ) -> ExplicitListConstraint: ...

    def create_validation(
        self, constraint: ExplicitListConstraint, target: CellRange
    ) -> ListValidation: ...


class ValidationSheet(Protocol):
    """Sheet that accepts data validations."""

    def validation_helper(self) -> ValidationHelper: ...

    def add_validation(self, validation: ListValidation) -> None: ...


class OpenpyxlListValidation:
    """List validation backed by an openpyxl ``DataValidation``."""

    def __init__(self, constraint: ExplicitListConstraint, target: CellRange) -> None:
        self.target = target
        self.data_validation = DataValidation(
            type="list",
            formula1=constraint.to_ooxml_formula(),
            allow_blank=True,
        )
        self.data_validation.add(target.to_a1())

    def show_dropdown_arrow(self) -> None:
        # OOXML showDropDown=1 means the arrow is hidden.
        self.data_validation.showDropDown = False

    def suppress_dropdown_arrow(self) -> None:
        self.data_validation.showDropDown = True

    def enable_error_box(self) -> None:
        self.data_validation.showErrorMessage = True


class OpenpyxlValidationHelper:
    """Validation helper for openpyxl worksheets."""

    def create_explicit_list_constraint(
        self, values: Sequence[str]
    ) -> ExplicitListConstraint:
        return ExplicitListConstraint(values=tuple(values))

    def create_validation(
        self, constraint: ExplicitListConstraint, target: CellRange
    ) -> OpenpyxlListValidation:
        return OpenpyxlListValidation(constraint, target)


class ComListValidation:
    """List validation applied through Excel COM on legacy workbooks.

    The in-cell dropdown can only be shown here; there is no arrow
    suppression in this mode.
    """

    def __init__(self, constraint: ExplicitListConstraint, target: CellRange) -> None:
        self.target = target
        self.constraint = constraint
        self.in_cell_dropdown = True

    def show_dropdown_arrow(self) -> None:
        self.in_cell_dropdown = True


class ComValidationHelper:
    """Validation helper for xlwings sheets."""

    def create_explicit_list_constraint(
        self, values: Sequence[str]
    ) -> ExplicitListConstraint:
        return ExplicitListConstraint(values=tuple(values))

    def create_validation(
        self, constraint: ExplicitListConstraint, target: CellRange
    ) -> ComListValidation:
        return ComListValidation(constraint, target)


class XlwingsValidationSheet:
    """Validation target over an xlwings sheet (Excel COM)."""

    def __init__(self, sheet: Any) -> None:
        self.sheet = sheet

    def validation_helper(self) -> ComValidationHelper:
        return ComValidationHelper()

    def add_validation(self, validation: ListValidation) -> None:
        if not isinstance(validation, ComListValidation):
            raise TypeError(
                f"Excel COM sheets only accept COM validations: {type(validation).__name__}"
            )
        com_validation = self.sheet.range(validation.target.to_a1()).api.Validation
        com_validation.Delete()
        com_validation.Add(
            Type=_XL_VALIDATE_LIST,
            AlertStyle=_XL_VALID_ALERT_STOP,
            Operator=_XL_BETWEEN,
            Formula1=validation.constraint.to_com_formula(),
        )
        com_validation.InCellDropdown = validation.in_cell_dropdown
