from __future__ import annotations

from pathlib import Path

from openpyxl import Workbook, load_workbook
from openpyxl.comments import Comment
from openpyxl.styles import Font
from openpyxl.worksheet.worksheet import Worksheet
import pytest

from exshift.rows import (
    add_and_copy_rows,
    clone_row,
    copy_rows_below,
    delete_rows,
    remove_row,
    shift_rows,
)
from exshift.sheet import OpenpyxlSheet


def _labeled_sheet(count: int) -> Worksheet:
    workbook = Workbook()
    sheet = workbook.active
    for index in range(count):
        sheet.cell(row=index + 1, column=1, value=f"R{index}")
    return sheet


def _labels(sheet: Worksheet) -> list[str | None]:
    adapter = OpenpyxlSheet(sheet)
    labels: list[str | None] = []
    for row in range(adapter.last_row_index + 1):
        cell = adapter.get_cell(row, 0)
        labels.append(None if cell is None else cell.value)
    return labels


def _template_sheet() -> Worksheet:
    workbook = Workbook()
    sheet = workbook.active
    sheet["A1"] = "H"
    sheet["A2"] = "tpl"
    sheet["B2"] = 5
    sheet["A2"].font = Font(bold=True)
    sheet.row_dimensions[2].height = 25
    sheet["A3"] = "tail"
    return sheet


def test_delete_rows_uses_original_numbering() -> None:
    sheet = _labeled_sheet(8)
    delete_rows(sheet, [2, 4, 6])
    assert _labels(sheet) == ["R0", "R1", "R3", "R5", "R7"]


def test_delete_rows_rejects_unsorted_input() -> None:
    sheet = _labeled_sheet(8)
    with pytest.raises(ValueError, match="strictly ascending"):
        delete_rows(sheet, [4, 2])
    assert _labels(sheet) == [f"R{index}" for index in range(8)]


def test_delete_rows_rejects_duplicates() -> None:
    sheet = _labeled_sheet(4)
    with pytest.raises(ValueError):
        delete_rows(sheet, [1, 1])


def test_delete_rows_empty_is_noop() -> None:
    sheet = _labeled_sheet(3)
    delete_rows(sheet, [])
    assert _labels(sheet) == ["R0", "R1", "R2"]


def test_remove_row_pulls_rows_up() -> None:
    sheet = _labeled_sheet(4)
    remove_row(sheet, 1)
    assert _labels(sheet) == ["R0", "R2", "R3"]


def test_remove_row_last_row_drops_without_shift(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    adapter = OpenpyxlSheet(_labeled_sheet(3))

    def _fail(*args: object, **kwargs: object) -> None:
        raise AssertionError("shift_rows must not be called")

    monkeypatch.setattr(adapter, "shift_rows", _fail)
    remove_row(adapter, 2)
    assert adapter.last_row_index == 1
    assert _labels(adapter.worksheet) == ["R0", "R1"]


@pytest.mark.parametrize("row", [-1, 3, 10])
def test_remove_row_out_of_range_is_noop(row: int) -> None:
    sheet = _labeled_sheet(3)
    remove_row(sheet, row)
    assert _labels(sheet) == ["R0", "R1", "R2"]


def test_remove_row_keeps_heights_with_rows() -> None:
    sheet = _labeled_sheet(4)
    for index, height in enumerate([10, 20, 30, 40], start=1):
        sheet.row_dimensions[index].height = height
    remove_row(sheet, 1)
    adapter = OpenpyxlSheet(sheet)
    assert [adapter.row_height(row) for row in range(3)] == [10, 30, 40]
    assert adapter.row_height(3) is None
    assert adapter.last_row_index == 2


def test_remove_row_moves_comment_hyperlink_and_row_style(tmp_path: Path) -> None:
    sheet = _labeled_sheet(3)
    sheet["A3"].comment = Comment("note", "author")
    sheet["A3"].hyperlink = "https://example.com/r2"
    sheet.row_dimensions[3].font = Font(bold=True)
    remove_row(sheet, 0)
    assert sheet["A2"].hyperlink.ref == "A2"

    path = tmp_path / "moved.xlsx"
    sheet.parent.save(path)
    reloaded = load_workbook(path).active
    assert reloaded["A2"].value == "R2"
    assert reloaded["A2"].hyperlink is not None
    assert reloaded["A2"].hyperlink.target == "https://example.com/r2"
    assert reloaded["A2"].comment is not None
    assert reloaded["A2"].comment.text == "note"
    assert reloaded["A3"].hyperlink is None
    assert reloaded["A3"].comment is None
    assert reloaded.row_dimensions[2].font.b is True


def test_shift_rows_down_rewrites_hyperlink_ref() -> None:
    sheet = _labeled_sheet(2)
    sheet["A2"].hyperlink = "https://example.com"
    shift_rows(sheet, 1, 1, 3)
    assert sheet["A5"].hyperlink.ref == "A5"
    assert sheet["A2"].hyperlink is None


def test_shift_rows_down_keeps_vacated_height() -> None:
    sheet = _labeled_sheet(3)
    sheet.row_dimensions[2].height = 15
    shift_rows(sheet, 1, 2, 2)
    adapter = OpenpyxlSheet(sheet)
    assert adapter.get_cell(1, 0) is None
    assert adapter.get_cell(3, 0).value == "R1"
    assert adapter.get_cell(4, 0).value == "R2"
    assert adapter.row_height(1) == 15
    assert adapter.row_height(3) is None


def test_shift_rows_down_copies_height() -> None:
    sheet = _labeled_sheet(3)
    sheet.row_dimensions[2].height = 15
    shift_rows(sheet, 1, 2, 2, copy_row_height=True, reset_original_height=True)
    adapter = OpenpyxlSheet(sheet)
    assert adapter.row_height(3) == 15
    assert adapter.row_height(1) is None


def test_shift_rows_overwrites_destination() -> None:
    sheet = _labeled_sheet(4)
    shift_rows(sheet, 0, 0, 2)
    assert _labels(sheet) == [None, "R1", "R0", "R3"]


def test_shift_rows_rejects_negative_destination() -> None:
    sheet = _labeled_sheet(3)
    with pytest.raises(ValueError, match="before the first row"):
        shift_rows(sheet, 0, 1, -1)


def test_clone_row_copies_height_and_cells() -> None:
    sheet = _template_sheet()
    clone_row(sheet, 1, 5, copy_value=True)
    assert sheet["A6"].value == "tpl"
    assert sheet["B6"].value == 5
    assert sheet["A6"].font.b is True
    assert sheet.row_dimensions[6].height == 25


def test_clone_row_replaces_target_style_with_plain_source() -> None:
    sheet = _labeled_sheet(2)
    sheet["A2"].font = Font(bold=True)
    clone_row(sheet, 0, 1, copy_value=True)
    assert sheet["A2"].value == "R0"
    assert sheet["A2"].font.b is False
    assert sheet["A2"].style_id == sheet["A1"].style_id


def test_copy_rows_below_inserts_copies() -> None:
    sheet = _template_sheet()
    copy_rows_below(sheet, 1, 2, copy_value=True)
    assert _labels(sheet) == ["H", "tpl", "tpl", "tpl", "tail"]
    adapter = OpenpyxlSheet(sheet)
    assert adapter.get_cell(3, 1).value == 5
    assert adapter.row_height(2) == 25
    assert adapter.row_height(3) == 25
    assert sheet["A4"].font.b is True


def test_copy_rows_below_without_values_copies_style_only() -> None:
    sheet = _template_sheet()
    copy_rows_below(sheet, 1)
    adapter = OpenpyxlSheet(sheet)
    copied = adapter.get_cell(2, 0)
    assert copied is not None
    assert copied.value is None
    assert copied.font.b is True
    assert adapter.get_cell(3, 0).value == "tail"


def test_copy_rows_below_remaps_merged_regions() -> None:
    sheet = _template_sheet()
    sheet.merge_cells("A2:B2")
    copy_rows_below(sheet, 1, 1, copy_value=True)
    ranges = {str(merged) for merged in sheet.merged_cells.ranges}
    assert ranges == {"A2:B2", "A3:B3"}
    assert sheet["A3"].value == "tpl"


def test_add_and_copy_rows_repeats_template() -> None:
    sheet = _template_sheet()
    add_and_copy_rows(sheet, 1, 2, 0, copy_value=True)
    assert _labels(sheet) == ["H", "tpl", "tpl", "tpl", "tail"]


def test_add_and_copy_rows_with_jump() -> None:
    sheet = _labeled_sheet(4)
    add_and_copy_rows(sheet, 1, 1, 1, copy_value=True)
    assert _labels(sheet) == ["R0", "R1", "R2", "R1", "R3"]
