from __future__ import annotations

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet
import pytest

from exshift.models import CellRange
from exshift.regions import merge_region, remap_regions


def _sheet() -> Worksheet:
    return Workbook().active


def _ranges(sheet: Worksheet) -> set[str]:
    return {str(merged) for merged in sheet.merged_cells.ranges}


def test_merge_region_merges_span() -> None:
    sheet = _sheet()
    region = merge_region(sheet, 1, 2, 1, 3)
    assert region == CellRange(first_row=1, last_row=2, first_col=1, last_col=3)
    assert _ranges(sheet) == {"B2:D3"}


@pytest.mark.parametrize(
    "bounds",
    [
        (2, 1, 0, 0),
        (0, 0, 3, 1),
        (1, 1, 1, 1),
    ],
)
def test_merge_region_ignores_degenerate_spans(
    bounds: tuple[int, int, int, int],
) -> None:
    sheet = _sheet()
    assert merge_region(sheet, *bounds) is None
    assert _ranges(sheet) == set()


def test_merge_region_rejects_overlap() -> None:
    sheet = _sheet()
    merge_region(sheet, 0, 1, 0, 1)
    with pytest.raises(ValueError, match="overlaps"):
        merge_region(sheet, 1, 2, 0, 0)


def test_remap_regions_copies_anchored_region() -> None:
    sheet = _sheet()
    sheet.merge_cells("A4:B5")
    created = remap_regions(sheet, 3, 10)
    assert created == [CellRange(first_row=10, last_row=11, first_col=0, last_col=1)]
    assert _ranges(sheet) == {"A4:B5", "A11:B12"}


def test_remap_regions_skips_regions_anchored_elsewhere() -> None:
    sheet = _sheet()
    sheet.merge_cells("A3:A5")
    assert remap_regions(sheet, 3, 10) == []
    assert _ranges(sheet) == {"A3:A5"}
