from __future__ import annotations

from typing import Final, cast

from pydantic import BaseModel, Field

from exshift.types import RowOpType


class RowOpSpec(BaseModel):
    """Specification metadata used by row-op normalization."""

    op: RowOpType
    aliases: dict[str, str] = Field(default_factory=dict)
    accepts_range: bool = False


ROW_OP_SPECS: Final[dict[RowOpType, RowOpSpec]] = {
    "remove_row": RowOpSpec(op="remove_row", aliases={"index": "row"}),
    "delete_rows": RowOpSpec(
        op="delete_rows", aliases={"indexes": "rows", "row_indexes": "rows"}
    ),
    "merge_region": RowOpSpec(op="merge_region", accepts_range=True),
    "clone_row": RowOpSpec(
        op="clone_row", aliases={"source": "source_row", "target": "target_row"}
    ),
    "copy_rows_below": RowOpSpec(
        op="copy_rows_below",
        aliases={"template": "template_row", "copy_count": "count"},
    ),
    "add_and_copy_rows": RowOpSpec(
        op="add_and_copy_rows",
        aliases={"template": "template_row", "add_count": "count"},
    ),
    "set_dropdown": RowOpSpec(
        op="set_dropdown",
        aliases={"allowed_values": "values", "options": "values"},
        accepts_range=True,
    ),
}


def get_alias_map_for_op(op_name: str) -> dict[str, str]:
    """Return alias mapping for one operation name."""
    if op_name not in ROW_OP_SPECS:
        return {}
    spec = ROW_OP_SPECS[cast(RowOpType, op_name)]
    return dict(spec.aliases)


def op_accepts_range(op_name: str) -> bool:
    """Return True if the operation takes an A1 ``range`` shorthand."""
    if op_name not in ROW_OP_SPECS:
        return False
    return ROW_OP_SPECS[cast(RowOpType, op_name)].accepts_range
