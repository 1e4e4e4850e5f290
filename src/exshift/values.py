from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Protocol

from .models import TypedValue

_FORMULA_PREFIX = "="
_NUMBER_TYPES = (int, float, Decimal, datetime, date, time, timedelta)


class CellProtocol(Protocol):
    """Subset of the openpyxl cell API used for typed value access."""

    value: object
    data_type: str


def read_typed_value(cell: CellProtocol) -> TypedValue:
    """Read a cell into its tagged value.

    openpyxl data types map as ``s``/``inlineStr`` to text, ``n``/``d`` to
    number, ``f`` to formula, ``b`` to boolean and ``e`` to error. A ``None``
    value is always empty; anything unrecognized reads as empty too.
    """
    raw = cell.value
    if raw is None:
        return TypedValue(kind="empty")
    data_type = cell.data_type
    if data_type == "f":
        return TypedValue(kind="formula", value=formula_text(raw))
    if data_type == "b":
        return TypedValue(kind="boolean", value=bool(raw))
    if data_type == "e":
        return TypedValue(kind="error", value=str(raw))
    if data_type in {"n", "d"} and isinstance(raw, _NUMBER_TYPES):
        return TypedValue(kind="number", value=raw)
    if data_type in {"s", "inlineStr"}:
        return TypedValue(kind="text", value=str(raw))
    return TypedValue(kind="empty")


def formula_text(raw: object) -> str:
    """Return formula text without the leading ``=``.

    Array and data-table formulas expose their text through ``.text``.
    """
    text = getattr(raw, "text", raw)
    candidate = str(text) if text is not None else ""
    if candidate.startswith(_FORMULA_PREFIX):
        return candidate[len(_FORMULA_PREFIX) :]
    return candidate


def set_text_value(cell: CellProtocol, text: str) -> None:
    """Store text that must never be re-read as a formula or error code."""
    cell.value = text
    cell.data_type = "s"


def set_error_value(cell: CellProtocol, code: str) -> None:
    """Store an error code such as ``#N/A``."""
    cell.value = code
    cell.data_type = "e"


def write_typed_value(cell: CellProtocol, typed: TypedValue) -> None:
    """Write a tagged value into ``cell``.

    Formulas are written as their plain text and are never re-evaluated;
    ``empty`` leaves the cell untouched.
    """
    kind = typed.kind
    if kind == "text":
        set_text_value(cell, str(typed.value))
    elif kind == "number":
        cell.value = typed.value
    elif kind == "formula":
        set_text_value(cell, str(typed.value))
    elif kind == "boolean":
        cell.value = bool(typed.value)
    elif kind == "error":
        set_error_value(cell, str(typed.value))
    elif kind == "empty":
        pass
