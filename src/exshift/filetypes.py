from __future__ import annotations

from enum import Enum
from pathlib import PurePath
from typing import Final

from .errors import UnsupportedFileTypeError


class FileType(Enum):
    """Supported upload/download file types keyed by suffix.

    Member order defines the 1-based integer code; append new members only.
    """

    JPG = "jpg"
    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    ICO = "ico"
    BMP = "bmp"
    TXT = "txt"
    CSV = "csv"
    PDF = "pdf"
    DOC = "doc"
    DOCX = "docx"
    XLS = "xls"
    XLSX = "xlsx"
    PPT = "ppt"
    PPTX = "pptx"
    ZIP = "zip"
    RAR = "rar"
    _7Z = "7z"
    MP3 = "mp3"
    MP4 = "mp4"

    @property
    def int_type(self) -> int:
        """1-based integer code of this type."""
        return _INT_CODES[self]

    @property
    def suffix(self) -> str:
        return self.value


_INT_CODES: Final[dict[FileType, int]] = {
    member: index for index, member in enumerate(FileType, start=1)
}
_BASE64_PREFIXES: Final[dict[str, FileType]] = {
    "data:image/jpeg;": FileType.JPG,
    "data:image/x-icon;": FileType.ICO,
    "data:image/gif;": FileType.GIF,
    "data:image/png;": FileType.PNG,
}


def member_name_for_suffix(suffix: str) -> str:
    """Map a suffix such as ``.xlsx`` or ``7z`` to its member name."""
    name = suffix.replace(".", "")
    if name[:1].isdigit():
        name = f"_{name}"
    return name.upper()


def file_type_by_suffix(suffix: str) -> FileType:
    """Classify a bare suffix.

    Raises:
        UnsupportedFileTypeError: If the suffix is unknown.
    """
    try:
        return FileType[member_name_for_suffix(suffix)]
    except KeyError as exc:
        raise UnsupportedFileTypeError(f"Unsupported file type: {suffix}") from exc


def file_type_by_name(file_name: str) -> FileType:
    """Classify a file by the suffix of its name.

    Raises:
        UnsupportedFileTypeError: If the name has no known suffix.
    """
    suffix = PurePath(file_name).suffix
    if not suffix:
        raise UnsupportedFileTypeError(f"Unsupported file type: {file_name}")
    return file_type_by_suffix(suffix)


def file_type_by_int(code: int) -> FileType:
    """Resolve a 1-based integer code.

    Raises:
        UnsupportedFileTypeError: If the code is out of range.
    """
    members = list(FileType)
    if code < 1 or code > len(members):
        raise UnsupportedFileTypeError(f"Unsupported file type code: {code}")
    return members[code - 1]


def file_type_by_base64_prefix(prefix: str) -> FileType:
    """Classify an image from its base64 data URI prefix (``data:image/png;``).

    Raises:
        UnsupportedFileTypeError: If the prefix is not a supported image type.
    """
    file_type = _BASE64_PREFIXES.get(prefix.lower())
    if file_type is None:
        raise UnsupportedFileTypeError(f"Unsupported image data prefix: {prefix}")
    return file_type
