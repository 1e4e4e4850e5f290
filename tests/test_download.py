from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from exshift.download import (
    EXCEL_CONTENT_TYPE,
    set_download_response,
    set_download_response_url_encoded,
)
from exshift.errors import DownloadError


@dataclass
class _Response:
    headers: dict[str, str] = field(default_factory=dict)


def test_set_download_response_headers() -> None:
    response = _Response()
    set_download_response(response, "report.xlsx")
    assert response.headers["Content-Disposition"] == "attachment;filename=report.xlsx"
    assert response.headers["Content-Type"] == f"{EXCEL_CONTENT_TYPE}; charset=utf-8"


def test_set_download_response_url_encoded_name() -> None:
    response = _Response()
    set_download_response_url_encoded(response, "報告 書.xlsx")
    assert (
        response.headers["Content-Disposition"]
        == "attachment;filename=%E5%A0%B1%E5%91%8A+%E6%9B%B8.xlsx"
    )


def test_set_download_response_url_encoded_rejects_unencodable_name() -> None:
    response = _Response()
    with pytest.raises(DownloadError):
        set_download_response_url_encoded(response, "bad\ud800.xlsx")
    assert response.headers == {}


def test_set_download_response_url_encoded_keeps_asterisk() -> None:
    response = _Response()
    set_download_response_url_encoded(response, "a*b c.xlsx")
    assert response.headers["Content-Disposition"] == "attachment;filename=a*b+c.xlsx"
