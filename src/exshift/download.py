from __future__ import annotations

from collections.abc import MutableMapping
from typing import Protocol
from urllib.parse import quote_plus

from .errors import DownloadError

EXCEL_CONTENT_TYPE = "application/msexcel"
_CHARSET = "utf-8"


class DownloadResponse(Protocol):
    """HTTP response exposing mutable headers (Flask, Starlette, ...)."""

    headers: MutableMapping[str, str]


def set_download_response(response: DownloadResponse, file_name: str) -> None:
    """Mark ``response`` as an Excel attachment named ``file_name``."""
    response.headers["Content-Disposition"] = f"attachment;filename={file_name}"
    response.headers["Content-Type"] = f"{EXCEL_CONTENT_TYPE}; charset={_CHARSET}"


def set_download_response_url_encoded(
    response: DownloadResponse, file_name: str
) -> None:
    """Like :func:`set_download_response`, with a UTF-8 URL-encoded file name.

    Raises:
        DownloadError: If the file name cannot be encoded as UTF-8.
    """
    try:
        encoded = quote_plus(
            file_name, safe="*", encoding=_CHARSET, errors="strict"
        )
    except UnicodeEncodeError as exc:
        raise DownloadError(str(exc)) from exc
    set_download_response(response, encoded)
