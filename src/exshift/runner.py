from __future__ import annotations

from collections.abc import Callable
import logging
from pathlib import Path
from typing import Any, TypeVar

from .dropdown import set_dropdown
from .ops.models import (
    RowOp,
    RowOpDiffItem,
    RowOpError,
    RowOpsRequest,
    RowOpsResult,
)
from .paths import PathPolicy, plan_output, resolve_workbook
from .regions import merge_region
from .rows import add_and_copy_rows, clone_row, copy_rows_below, delete_rows, remove_row
from .sheet import OpenpyxlSheet
from .types import RowOpType
from .validation import XlwingsValidationSheet
from .workbooks import editable_workbook, excel_workbook

logger = logging.getLogger(__name__)

_COM_ONLY_OPS: frozenset[RowOpType] = frozenset({"set_dropdown"})

T = TypeVar("T")


def run_row_ops(
    request: RowOpsRequest, *, policy: PathPolicy | None = None
) -> RowOpsResult:
    """Apply row operations to a workbook and write the result.

    Args:
        request: Row operation request.
        policy: Optional path policy for access control.

    Returns:
        Result with output path and per-op records. A failing op is reported
        in ``error`` and nothing is written.

    Raises:
        FileNotFoundError: If the input file does not exist.
        ValueError: If validation fails or the path violates policy.
    """
    resolved_input = resolve_workbook(request.xlsx_path, policy=policy)
    plan = plan_output(
        resolved_input,
        out_dir=request.out_dir,
        out_name=request.out_name,
        on_conflict=request.on_conflict,
        policy=policy,
    )
    output_path = plan.path
    warnings: list[str] = []
    if plan.warning:
        warnings.append(plan.warning)
    if plan.skipped:
        return RowOpsResult(out_path=str(output_path), warnings=warnings)

    use_com = resolved_input.suffix.lower() == ".xls"
    if use_com:
        unsupported = sorted({op.op for op in request.ops} - _COM_ONLY_OPS)
        if unsupported:
            raise ValueError(
                ".xls workbooks only support set_dropdown via Excel COM; "
                f"unsupported ops: {', '.join(unsupported)}"
            )
    if not request.dry_run:
        output_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info(
        "Applying %d row op(s) to %s -> %s",
        len(request.ops),
        resolved_input,
        output_path,
    )
    engine = "com" if use_com else "openpyxl"
    try:
        if use_com:
            applied = _apply_ops_com(
                resolved_input, output_path, request.ops, dry_run=request.dry_run
            )
        else:
            applied = _apply_ops_openpyxl(
                resolved_input, output_path, request.ops, dry_run=request.dry_run
            )
    except RowOpError as exc:
        logger.warning(
            "Row op %d (%s) failed: %s", exc.detail.op_index, exc.detail.op, exc
        )
        return RowOpsResult(
            out_path=str(output_path),
            engine=engine,
            warnings=warnings,
            error=exc.detail,
        )
    if request.dry_run:
        warnings.append("Dry run; workbook was not written.")
    return RowOpsResult(
        out_path=str(output_path),
        engine=engine,
        applied=applied,
        warnings=warnings,
    )


def _apply_ops_openpyxl(
    input_path: Path, output_path: Path, ops: list[RowOp], *, dry_run: bool
) -> list[RowOpDiffItem]:
    """Apply ops with openpyxl and save unless ``dry_run``."""
    with editable_workbook(input_path) as workbook:
        applied = apply_ops_to_workbook(workbook, ops)
        if not dry_run:
            workbook.save(output_path)
    return applied


def apply_ops_to_workbook(workbook: Any, ops: list[RowOp]) -> list[RowOpDiffItem]:
    """Apply ops in order to an open openpyxl workbook.

    Raises:
        RowOpError: If an op fails; earlier ops stay applied in memory.
    """
    applied: list[RowOpDiffItem] = []
    for index, op in enumerate(ops):
        try:
            applied.append(_apply_openpyxl_op(workbook, op, index))
        except (ValueError, KeyError) as exc:
            raise RowOpError.from_op(index, op, exc) from exc
    return applied


def _apply_openpyxl_op(workbook: Any, op: RowOp, index: int) -> RowOpDiffItem:
    if op.sheet not in workbook.sheetnames:
        raise ValueError(f"Sheet not found: {op.sheet}")
    sheet = OpenpyxlSheet(workbook[op.sheet])
    before = sheet.last_row_index
    detail = _openpyxl_handler(sheet, op)()
    return RowOpDiffItem(
        op_index=index,
        op=op.op,
        sheet=op.sheet,
        last_row_before=before,
        last_row_after=sheet.last_row_index,
        detail=detail,
    )


def _openpyxl_handler(sheet: OpenpyxlSheet, op: RowOp) -> Callable[[], str | None]:
    handlers: dict[RowOpType, Callable[[], str | None]] = {
        "remove_row": lambda: _apply_remove_row(sheet, op),
        "delete_rows": lambda: _apply_delete_rows(sheet, op),
        "merge_region": lambda: _apply_merge_region(sheet, op),
        "clone_row": lambda: _apply_clone_row(sheet, op),
        "copy_rows_below": lambda: _apply_copy_rows_below(sheet, op),
        "add_and_copy_rows": lambda: _apply_add_and_copy_rows(sheet, op),
        "set_dropdown": lambda: _apply_set_dropdown(sheet, op),
    }
    handler = handlers.get(op.op)
    if handler is None:
        raise ValueError(f"Unsupported op: {op.op}")
    return handler


def _apply_remove_row(sheet: OpenpyxlSheet, op: RowOp) -> str | None:
    row = _require(op.row, "row")
    remove_row(sheet, row)
    return f"removed row {row}"


def _apply_delete_rows(sheet: OpenpyxlSheet, op: RowOp) -> str | None:
    rows = _require(op.rows, "rows")
    delete_rows(sheet, rows)
    return f"deleted {len(rows)} row(s)"


def _apply_merge_region(sheet: OpenpyxlSheet, op: RowOp) -> str | None:
    region = merge_region(
        sheet,
        _require(op.first_row, "first_row"),
        _require(op.last_row, "last_row"),
        _require(op.first_col, "first_col"),
        _require(op.last_col, "last_col"),
    )
    return None if region is None else f"merged {region.to_a1()}"


def _apply_clone_row(sheet: OpenpyxlSheet, op: RowOp) -> str | None:
    source = _require(op.source_row, "source_row")
    target = _require(op.target_row, "target_row")
    clone_row(sheet, source, target, op.copy_value)
    return f"cloned row {source} to {target}"


def _apply_copy_rows_below(sheet: OpenpyxlSheet, op: RowOp) -> str | None:
    template = _require(op.template_row, "template_row")
    count = op.count or 1
    copy_rows_below(sheet, template, count, op.copy_value)
    return f"copied row {template} x{count}"


def _apply_add_and_copy_rows(sheet: OpenpyxlSheet, op: RowOp) -> str | None:
    template = _require(op.template_row, "template_row")
    count = _require(op.count, "count")
    add_and_copy_rows(sheet, template, count, op.jump, op.copy_value)
    return f"added {count} row(s) from template {template}"


def _apply_set_dropdown(sheet: Any, op: RowOp) -> str | None:
    validation = set_dropdown(
        sheet,
        _require(op.first_row, "first_row"),
        _require(op.last_row, "last_row"),
        _require(op.first_col, "first_col"),
        _require(op.last_col, "last_col"),
        _require(op.values, "values"),
    )
    return f"dropdown on {validation.target.to_a1()}"


def _apply_ops_com(
    input_path: Path, output_path: Path, ops: list[RowOp], *, dry_run: bool
) -> list[RowOpDiffItem]:
    """Apply dropdown ops through Excel COM and save unless ``dry_run``."""
    applied: list[RowOpDiffItem] = []
    with excel_workbook(input_path) as workbook:
        for index, op in enumerate(ops):
            try:
                sheet = XlwingsValidationSheet(workbook.sheets[op.sheet])
                detail = _apply_set_dropdown(sheet, op)
            except (ValueError, KeyError) as exc:
                raise RowOpError.from_op(index, op, exc) from exc
            applied.append(
                RowOpDiffItem(op_index=index, op=op.op, sheet=op.sheet, detail=detail)
            )
        if not dry_run:
            workbook.save(str(output_path))
    return applied


def _require(value: T | None, name: str) -> T:
    if value is None:
        raise ValueError(f"{name} is required.")
    return value

