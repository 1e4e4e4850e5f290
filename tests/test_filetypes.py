from __future__ import annotations

import pytest

from exshift.errors import UnsupportedFileTypeError
from exshift.filetypes import (
    FileType,
    file_type_by_base64_prefix,
    file_type_by_int,
    file_type_by_name,
    file_type_by_suffix,
    member_name_for_suffix,
)


def test_member_name_for_suffix() -> None:
    assert member_name_for_suffix(".xlsx") == "XLSX"
    assert member_name_for_suffix("7z") == "_7Z"


@pytest.mark.parametrize(
    ("suffix", "expected"),
    [(".xlsx", FileType.XLSX), ("PDF", FileType.PDF), (".7z", FileType._7Z)],
)
def test_file_type_by_suffix(suffix: str, expected: FileType) -> None:
    assert file_type_by_suffix(suffix) is expected


def test_file_type_by_name_uses_last_suffix() -> None:
    assert file_type_by_name("archive.tar.zip") is FileType.ZIP


@pytest.mark.parametrize("name", ["README", "program.exe"])
def test_file_type_by_name_rejects_unknown(name: str) -> None:
    with pytest.raises(UnsupportedFileTypeError):
        file_type_by_name(name)


def test_int_codes_are_one_based() -> None:
    assert FileType.JPG.int_type == 1
    assert FileType.XLSX.int_type == 13
    assert file_type_by_int(1) is FileType.JPG
    assert file_type_by_int(len(FileType)) is FileType.MP4


@pytest.mark.parametrize("code", [0, -1, 21])
def test_file_type_by_int_rejects_out_of_range(code: int) -> None:
    with pytest.raises(UnsupportedFileTypeError):
        file_type_by_int(code)


def test_file_type_by_base64_prefix() -> None:
    assert file_type_by_base64_prefix("data:image/PNG;") is FileType.PNG
    assert file_type_by_base64_prefix("data:image/jpeg;") is FileType.JPG
    with pytest.raises(UnsupportedFileTypeError):
        file_type_by_base64_prefix("data:image/webp;")


def test_unsupported_file_type_error_default_message() -> None:
    error = UnsupportedFileTypeError()
    assert str(error) == "Unsupported file type."
    assert isinstance(error, ValueError)
