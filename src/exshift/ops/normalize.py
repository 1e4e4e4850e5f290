from __future__ import annotations

import json
from typing import Any, cast

from openpyxl.utils.cell import column_index_from_string, coordinate_from_string
from openpyxl.utils.exceptions import CellCoordinatesException

from .specs import get_alias_map_for_op, op_accepts_range

_BOUND_FIELDS = ("first_row", "last_row", "first_col", "last_col")


def range_bounds(range_ref: str) -> tuple[int, int, int, int]:
    """Parse an A1 range such as ``B4:D6`` into 0-based row and column bounds.

    Returns ``(first_row, last_row, first_col, last_col)``; the corners may be
    given in either order.
    """
    start, separator, end = range_ref.strip().upper().partition(":")
    if not separator:
        raise ValueError(f"Invalid range reference: {range_ref}")
    try:
        start_col, start_row = coordinate_from_string(start)
        end_col, end_row = coordinate_from_string(end)
        cols = (column_index_from_string(start_col), column_index_from_string(end_col))
    except (CellCoordinatesException, ValueError) as exc:
        raise ValueError(f"Invalid range reference: {range_ref}") from exc
    return (
        min(start_row, end_row) - 1,
        max(start_row, end_row) - 1,
        min(cols) - 1,
        max(cols) - 1,
    )


def coerce_row_ops(
    ops_data: list[dict[str, Any] | str], *, sheet: str | None = None
) -> list[dict[str, Any]]:
    """Normalize row-op payloads into canonical dict form.

    Args:
        ops_data: Operations as dicts or JSON object strings.
        sheet: Default sheet for operations that omit one.

    Returns:
        Normalized operation dicts ready for ``RowOp`` validation.
    """
    default_sheet = normalize_top_level_sheet(sheet)
    normalized_ops: list[dict[str, Any]] = []
    for index, raw_op in enumerate(ops_data):
        parsed_op = (
            dict(raw_op)
            if isinstance(raw_op, dict)
            else parse_row_op_json(raw_op, index=index)
        )
        op_data = normalize_row_op_aliases(parsed_op, index=index)
        if op_data.get("sheet") is None:
            if default_sheet is None:
                raise ValueError(build_missing_sheet_message(index=index, op_data=op_data))
            op_data["sheet"] = default_sheet
        normalized_ops.append(op_data)
    return normalized_ops


def normalize_row_op_aliases(op_data: dict[str, Any], *, index: int) -> dict[str, Any]:
    """Normalize short aliases and range shorthand to canonical fields."""
    normalized = dict(op_data)
    op_name = normalized.get("op")
    if not isinstance(op_name, str):
        return normalized
    for alias, canonical in get_alias_map_for_op(op_name).items():
        alias_to_canonical_with_conflict_check(
            normalized,
            index=index,
            alias=alias,
            canonical=canonical,
            op_name=op_name,
        )
    if op_accepts_range(op_name):
        normalize_range_shorthand(normalized, index=index)
    return normalized


def alias_to_canonical_with_conflict_check(
    op_data: dict[str, Any],
    *,
    index: int,
    alias: str,
    canonical: str,
    op_name: str,
) -> None:
    """Map alias field to canonical field when operation type matches."""
    if op_data.get("op") != op_name or alias not in op_data:
        return
    alias_value = op_data[alias]
    if canonical in op_data:
        if op_data[canonical] != alias_value:
            raise ValueError(
                build_row_op_error_message(
                    index,
                    f"conflicting fields: '{canonical}' and alias '{alias}'",
                )
            )
    else:
        op_data[canonical] = alias_value
    del op_data[alias]


def normalize_range_shorthand(op_data: dict[str, Any], *, index: int) -> None:
    """Convert an A1 ``range`` into 0-based bound fields."""
    if "range" not in op_data:
        return
    op_name = op_data.get("op")
    if any(field in op_data for field in _BOUND_FIELDS):
        raise ValueError(
            build_row_op_error_message(
                index,
                f"{op_name} does not allow mixing 'range' with row/column bounds",
            )
        )
    range_ref = op_data.get("range")
    if not isinstance(range_ref, str):
        raise ValueError(
            build_row_op_error_message(index, f"{op_name} range must be a string")
        )
    try:
        bounds = range_bounds(range_ref)
    except ValueError as exc:
        raise ValueError(
            build_row_op_error_message(index, f"{op_name} range must be like 'A1:C3'")
        ) from exc
    op_data.update(zip(_BOUND_FIELDS, bounds))
    del op_data["range"]


def parse_row_op_json(raw_op: str, *, index: int) -> dict[str, Any]:
    """Parse a JSON string row operation into object form."""
    text = raw_op.strip()
    if not text:
        raise ValueError(build_row_op_error_message(index, "empty string"))
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(build_row_op_error_message(index, "invalid JSON")) from exc
    if not isinstance(parsed, dict):
        raise ValueError(
            build_row_op_error_message(index, "JSON value must be an object")
        )
    return cast(dict[str, Any], parsed)


def normalize_top_level_sheet(value: object) -> str | None:
    """Normalize optional top-level sheet text."""
    if not isinstance(value, str):
        return None
    candidate = value.strip()
    return candidate or None


def build_missing_sheet_message(*, index: int, op_data: dict[str, Any]) -> str:
    """Build error for an operation without a resolvable sheet."""
    op_name = op_data.get("op") or "<unknown>"
    return (
        f"ops[{index}] ({op_name}) is missing sheet. "
        "Set op.sheet or pass a default sheet."
    )


def build_row_op_error_message(index: int, reason: str) -> str:
    """Build a consistent validation message for invalid row ops."""
    example = '{"op":"remove_row","sheet":"Sheet1","row":3}'
    return (
        f"Invalid row operation at ops[{index}]: {reason}. "
        f"Use object form like {example}."
    )
