from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

from exshift.types import OnConflictPolicy, RowOpEngine, RowOpType

from .normalize import coerce_row_ops


class RowOp(BaseModel):
    """Single structural operation on one worksheet.

    Row and column fields are 0-based.
    """

    op: RowOpType
    sheet: str
    row: int | None = Field(default=None, description="Row for remove_row.")
    rows: list[int] | None = Field(default=None, description="Rows for delete_rows.")
    source_row: int | None = Field(default=None, ge=0)
    target_row: int | None = Field(default=None, ge=0)
    template_row: int | None = Field(default=None, ge=0)
    count: int | None = Field(
        default=None, description="Copies for copy_rows_below/add_and_copy_rows."
    )
    jump: int = Field(default=0, ge=0)
    copy_value: bool = False
    first_row: int | None = None
    last_row: int | None = None
    first_col: int | None = None
    last_col: int | None = None
    values: list[str] | None = Field(
        default=None, description="Allowed values for set_dropdown."
    )

    @field_validator("sheet")
    @classmethod
    def _validate_sheet(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("sheet must not be empty.")
        return value

    @model_validator(mode="after")
    def _validate_op(self) -> RowOp:
        validator = _validator_for_op(self.op)
        if validator is not None:
            validator(self)
        return self


def _validator_for_op(op_type: RowOpType) -> Callable[[RowOp], None] | None:
    validators: dict[RowOpType, Callable[[RowOp], None]] = {
        "remove_row": _validate_remove_row,
        "delete_rows": _validate_delete_rows,
        "merge_region": _validate_bounds_required,
        "clone_row": _validate_clone_row,
        "copy_rows_below": _validate_copy_rows_below,
        "add_and_copy_rows": _validate_add_and_copy_rows,
        "set_dropdown": _validate_set_dropdown,
    }
    return validators.get(op_type)


def _validate_remove_row(op: RowOp) -> None:
    if op.row is None:
        raise ValueError("remove_row requires row.")


def _validate_delete_rows(op: RowOp) -> None:
    if op.rows is None:
        raise ValueError("delete_rows requires rows.")
    for previous, current in zip(op.rows, op.rows[1:]):
        if current <= previous:
            raise ValueError(
                "delete_rows requires strictly ascending rows without duplicates."
            )


def _validate_bounds_required(op: RowOp) -> None:
    missing = [
        name
        for name in ("first_row", "last_row", "first_col", "last_col")
        if getattr(op, name) is None
    ]
    if missing:
        raise ValueError(f"{op.op} requires {', '.join(missing)} (or range).")


def _validate_clone_row(op: RowOp) -> None:
    if op.source_row is None or op.target_row is None:
        raise ValueError("clone_row requires source_row and target_row.")


def _validate_copy_rows_below(op: RowOp) -> None:
    if op.template_row is None:
        raise ValueError("copy_rows_below requires template_row.")
    if op.count is not None and op.count < 1:
        raise ValueError("copy_rows_below count must be >= 1.")


def _validate_add_and_copy_rows(op: RowOp) -> None:
    if op.template_row is None:
        raise ValueError("add_and_copy_rows requires template_row.")
    if op.count is None or op.count < 1:
        raise ValueError("add_and_copy_rows requires count >= 1.")


def _validate_set_dropdown(op: RowOp) -> None:
    _validate_bounds_required(op)
    if not op.values:
        raise ValueError("set_dropdown requires non-empty values.")


class RowOpsRequest(BaseModel):
    """Input model for applying row operations to a workbook.

    Raw op payloads (dicts or JSON strings) are normalized first, so aliases,
    A1 ``range`` shorthand and a top-level default ``sheet`` are accepted.
    """

    xlsx_path: Path
    ops: list[RowOp]
    sheet: str | None = None
    out_dir: Path | None = None
    out_name: str | None = None
    on_conflict: OnConflictPolicy = "rename"
    dry_run: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalize_ops(cls, data: object) -> object:
        if not isinstance(data, dict):
            return data
        ops = data.get("ops")
        if not isinstance(ops, list) or not all(
            isinstance(op, dict | str) for op in ops
        ):
            return data
        payload = dict(data)
        payload["ops"] = coerce_row_ops(ops, sheet=data.get("sheet"))
        return payload


class RowOpDiffItem(BaseModel):
    """Applied change record for one row operation."""

    op_index: int
    op: RowOpType
    sheet: str
    last_row_before: int | None = None
    last_row_after: int | None = None
    detail: str | None = None


class RowOpErrorDetail(BaseModel):
    """Structured error details for row-op failures."""

    op_index: int
    op: RowOpType
    sheet: str
    message: str


class RowOpsResult(BaseModel):
    """Output model for applying row operations."""

    out_path: str
    engine: RowOpEngine = "openpyxl"
    applied: list[RowOpDiffItem] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    error: RowOpErrorDetail | None = None


class RowOpError(ValueError):
    """Row operation error with structured detail."""

    def __init__(self, detail: RowOpErrorDetail) -> None:
        super().__init__(detail.message)
        self.detail = detail

    @classmethod
    def from_op(cls, index: int, op: RowOp, exc: Exception) -> RowOpError:
        """Build a RowOpError from an op and exception."""
        detail = RowOpErrorDetail(
            op_index=index,
            op=op.op,
            sheet=op.sheet,
            message=str(exc),
        )
        return cls(detail)
