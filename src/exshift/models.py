from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal

from openpyxl.utils.cell import get_column_letter
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .types import CellValueKind

CellPayload = (
    str | bool | int | float | Decimal | datetime | date | time | timedelta | None
)


class TypedValue(BaseModel):
    """Tagged cell value; ``kind`` decides how ``value`` is read and written."""

    model_config = ConfigDict(frozen=True)

    kind: CellValueKind
    value: CellPayload = None


class CellRange(BaseModel):
    """Rectangular, 0-based and inclusive cell span.

    Used for merged regions and for data-validation targets.
    """

    model_config = ConfigDict(frozen=True)

    first_row: int = Field(..., ge=0)
    last_row: int = Field(..., ge=0)
    first_col: int = Field(..., ge=0)
    last_col: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _validate_bounds(self) -> CellRange:
        if self.first_row > self.last_row:
            raise ValueError(
                f"first_row must not exceed last_row: {self.first_row} > {self.last_row}"
            )
        if self.first_col > self.last_col:
            raise ValueError(
                f"first_col must not exceed last_col: {self.first_col} > {self.last_col}"
            )
        return self

    def intersects(self, other: CellRange) -> bool:
        """Return True if both spans share at least one cell."""
        return not (
            self.last_col < other.first_col
            or other.last_col < self.first_col
            or self.last_row < other.first_row
            or other.last_row < self.first_row
        )

    def to_a1(self) -> str:
        """Render as an A1 range such as ``B4:D6``."""
        start = f"{get_column_letter(self.first_col + 1)}{self.first_row + 1}"
        end = f"{get_column_letter(self.last_col + 1)}{self.last_row + 1}"
        return f"{start}:{end}"
