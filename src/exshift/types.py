from __future__ import annotations

from typing import Literal

CellValueKind = Literal["text", "number", "formula", "boolean", "error", "empty"]
RowOpType = Literal[
    "remove_row",
    "delete_rows",
    "merge_region",
    "clone_row",
    "copy_rows_below",
    "add_and_copy_rows",
    "set_dropdown",
]
RowOpEngine = Literal["openpyxl", "com"]
OnConflictPolicy = Literal["overwrite", "skip", "rename"]
