from __future__ import annotations

from .models import (
    RowOp,
    RowOpDiffItem,
    RowOpError,
    RowOpErrorDetail,
    RowOpsRequest,
    RowOpsResult,
)
from .normalize import coerce_row_ops
from .specs import ROW_OP_SPECS, RowOpSpec

__all__ = [
    "ROW_OP_SPECS",
    "RowOp",
    "RowOpDiffItem",
    "RowOpError",
    "RowOpErrorDetail",
    "RowOpSpec",
    "RowOpsRequest",
    "RowOpsResult",
    "coerce_row_ops",
]
