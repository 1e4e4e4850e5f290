"""Structural row edits for Excel worksheets.

Rows and columns are 0-based throughout the public API.
"""

from __future__ import annotations

from .copier import copy_cell, copy_cell_value
from .download import set_download_response, set_download_response_url_encoded
from .dropdown import set_dropdown
from .errors import DownloadError, UnsupportedFileTypeError
from .filetypes import (
    FileType,
    file_type_by_base64_prefix,
    file_type_by_int,
    file_type_by_name,
    file_type_by_suffix,
)
from .models import CellRange, TypedValue
from .regions import merge_region, remap_regions
from .rows import (
    add_and_copy_rows,
    clone_row,
    copy_rows_below,
    delete_rows,
    remove_row,
    shift_rows,
)
from .sheet import OpenpyxlSheet, as_sheet
from .values import read_typed_value, write_typed_value

__all__ = [
    "CellRange",
    "DownloadError",
    "FileType",
    "OpenpyxlSheet",
    "TypedValue",
    "UnsupportedFileTypeError",
    "add_and_copy_rows",
    "as_sheet",
    "clone_row",
    "copy_cell",
    "copy_cell_value",
    "copy_rows_below",
    "delete_rows",
    "file_type_by_base64_prefix",
    "file_type_by_int",
    "file_type_by_name",
    "file_type_by_suffix",
    "merge_region",
    "read_typed_value",
    "remap_regions",
    "remove_row",
    "set_download_response",
    "set_download_response_url_encoded",
    "set_dropdown",
    "shift_rows",
    "write_typed_value",
]
