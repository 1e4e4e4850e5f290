from __future__ import annotations


class DownloadError(RuntimeError):
    """Raised when a download response cannot be prepared."""


class UnsupportedFileTypeError(ValueError):
    """Raised when a file type cannot be classified."""

    def __init__(self, message: str = "Unsupported file type.") -> None:
        super().__init__(message)
