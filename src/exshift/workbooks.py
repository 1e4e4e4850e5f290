from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Any
import warnings

from openpyxl import load_workbook
from openpyxl.workbook.workbook import Workbook
import xlwings as xw

logger = logging.getLogger(__name__)


@contextmanager
def editable_workbook(path: Path) -> Iterator[Workbook]:
    """Load a workbook for row edits and close it afterwards.

    VBA projects of ``.xlsm`` books are kept. Warnings about extensions
    openpyxl cannot keep are silenced.
    """
    with warnings.catch_warnings():
        warnings.filterwarnings(
            "ignore",
            message=".*extension is not supported and will be removed",
            category=UserWarning,
        )
        workbook = load_workbook(path, keep_vba=path.suffix.lower() == ".xlsm")
    try:
        yield workbook
    finally:
        workbook.close()


@contextmanager
def excel_workbook(path: Path) -> Iterator[Any]:
    """Open a legacy workbook in a private, hidden Excel instance.

    Alerts are off and the instance is quit on exit.
    """
    app = xw.App(add_book=False, visible=False)
    app.display_alerts = False
    try:
        book = app.books.open(str(path))
        try:
            yield book
        finally:
            book.close()
    finally:
        try:
            app.quit()
        except Exception as exc:  # pragma: no cover - COM teardown
            logger.warning("Failed to quit Excel after editing %s: %s", path, exc)
