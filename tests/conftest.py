from __future__ import annotations

from functools import lru_cache
import os
import re
import sys

import pytest

IS_WINDOWS = sys.platform == "win32"
SKIP_COM_TESTS = os.getenv("SKIP_COM_TESTS") == "1"
FORCE_COM_TESTS = os.getenv("FORCE_COM_TESTS") == "1"


def _markexpr_requests_com(markexpr: str) -> bool:
    """Return True when markexpr explicitly requests the ``com`` marker."""
    tokens = re.findall(r"[A-Za-z_][A-Za-z0-9_]*", markexpr.lower())
    for index, token in enumerate(tokens):
        if token != "com":
            continue
        prev = tokens[index - 1] if index > 0 else ""
        if prev != "not":
            return True
    return False


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers to avoid pytest warnings."""
    markexpr = getattr(config.option, "markexpr", "") or ""
    if _markexpr_requests_com(markexpr):
        os.environ.pop("SKIP_COM_TESTS", None)
    config.addinivalue_line("markers", "com: requires Excel COM (Windows + Excel).")


@lru_cache(maxsize=1)
def _has_excel_com() -> bool:
    """Return True if Excel COM can be opened via xlwings."""
    try:
        import xlwings as xw

        app = xw.App(add_book=False, visible=False)
        app.quit()
        return True
    except Exception:
        return False


def _com_skip_reason() -> str | None:
    """
    Return a skip reason for COM-marked tests, or None when they should run.

    If FORCE_COM_TESTS=1 and COM is unavailable, raises RuntimeError to fail fast.
    """
    if SKIP_COM_TESTS:
        return "COM tests skipped via SKIP_COM_TESTS=1."
    if not IS_WINDOWS:
        return "COM tests require Windows."
    if not _has_excel_com():
        if FORCE_COM_TESTS:
            raise RuntimeError("Excel COM is unavailable but FORCE_COM_TESTS=1 is set.")
        return "Excel COM is unavailable."
    return None


def pytest_runtest_setup(item: pytest.Item) -> None:
    """Skip COM-marked tests when Excel is not available."""
    if item.get_closest_marker("com") is not None:
        reason = _com_skip_reason()
        if reason:
            pytest.skip(reason)
