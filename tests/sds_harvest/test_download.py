"""Download stage: outcomes, guards and filesystem effects."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from SdsHarvest.api.types import DownloadFailed, DownloadSkipped, DownloadSuccess, Record
from SdsHarvest.download import download_pdf
from SdsHarvest.urls import build_url

URL = build_url(Record("290031915", "630000000001", "SDS_FR", "FR"))
FILENAME = "290031915_630000000001_sds_fr_fr.pdf"


class _FailingStream(httpx.SyncByteStream):
    def __iter__(self):
        yield b"%PDF-"
        raise httpx.ReadError("connection reset")


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    path = tmp_path / "PDFs"
    path.mkdir()
    return path


def test_successful_download_writes_exact_body(make_client, pdf_response, output_dir) -> None:
    calls: list[httpx.Request] = []
    client = make_client(pdf_response(calls=calls))

    outcome = download_pdf(URL, output_dir, client=client)

    dest = output_dir / FILENAME
    assert isinstance(outcome, DownloadSuccess)
    assert outcome.classification == "success"
    assert outcome.bytes_written == 1024
    assert outcome.path == str(dest)
    assert dest.read_bytes().startswith(b"%PDF-1.7")
    assert dest.stat().st_size == 1024
    assert [p.name for p in output_dir.iterdir()] == [FILENAME]
    assert len(calls) == 1
    assert calls[0].method == "GET"
    assert calls[0].url == httpx.URL(URL)


def test_existing_file_is_skipped_without_request(make_client, pdf_response, output_dir) -> None:
    (output_dir / FILENAME).write_bytes(b"old")
    calls: list[httpx.Request] = []
    client = make_client(pdf_response(calls=calls))

    outcome = download_pdf(URL, output_dir, client=client)

    assert isinstance(outcome, DownloadSkipped)
    assert outcome.path == str(output_dir / FILENAME)
    assert calls == []
    assert (output_dir / FILENAME).read_bytes() == b"old"


def test_directory_at_destination_is_not_a_skip(make_client, pdf_response, output_dir) -> None:
    (output_dir / FILENAME).mkdir()
    client = make_client(pdf_response())

    outcome = download_pdf(URL, output_dir, client=client)

    assert isinstance(outcome, DownloadFailed)
    assert outcome.kind == "write-failed"


def test_empty_body_creates_no_file(make_client, pdf_response, output_dir) -> None:
    client = make_client(pdf_response(b""))

    outcome = download_pdf(URL, output_dir, client=client)

    assert isinstance(outcome, DownloadFailed)
    assert outcome.kind == "empty-download"
    assert list(output_dir.iterdir()) == []


def test_html_content_type_is_rejected(make_client, pdf_response, output_dir) -> None:
    client = make_client(pdf_response(b"<html>login</html>", content_type="text/html"))

    outcome = download_pdf(URL, output_dir, client=client)

    assert isinstance(outcome, DownloadFailed)
    assert outcome.kind == "invalid-content-type"
    assert "text/html" in outcome.detail
    assert list(output_dir.iterdir()) == []


def test_content_type_parameters_are_accepted(make_client, pdf_response, output_dir) -> None:
    client = make_client(pdf_response(content_type="application/pdf; charset=binary"))

    outcome = download_pdf(URL, output_dir, client=client)

    assert isinstance(outcome, DownloadSuccess)


def test_non_200_status_reports_status_text(make_client, pdf_response, output_dir) -> None:
    client = make_client(pdf_response(b"missing", status=404))

    outcome = download_pdf(URL, output_dir, client=client)

    assert isinstance(outcome, DownloadFailed)
    assert outcome.kind == "bad-status"
    assert "404 Not Found" in outcome.detail
    assert list(output_dir.iterdir()) == []


def test_transport_error_is_request_failed(make_client, output_dir) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("name resolution failed", request=request)

    outcome = download_pdf(URL, output_dir, client=make_client(handler))

    assert isinstance(outcome, DownloadFailed)
    assert outcome.kind == "request-failed"
    assert "name resolution failed" in outcome.detail


def test_timeout_is_request_failed(make_client, output_dir) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    outcome = download_pdf(URL, output_dir, client=make_client(handler))

    assert isinstance(outcome, DownloadFailed)
    assert outcome.kind == "request-failed"


def test_body_read_error_is_read_failed(make_client, output_dir) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, headers={"Content-Type": "application/pdf"}, stream=_FailingStream()
        )

    outcome = download_pdf(URL, output_dir, client=make_client(handler))

    assert isinstance(outcome, DownloadFailed)
    assert outcome.kind == "read-failed"
    assert list(output_dir.iterdir()) == []


def test_malformed_url_fails_before_network(make_client, pdf_response, output_dir) -> None:
    calls: list[httpx.Request] = []
    client = make_client(pdf_response(calls=calls))

    outcome = download_pdf("https://example.test/document.pdf", output_dir, client=client)

    assert isinstance(outcome, DownloadFailed)
    assert outcome.kind == "malformed-url"
    assert calls == []


def test_missing_output_dir_is_write_failed(make_client, pdf_response, tmp_path: Path) -> None:
    missing = tmp_path / "absent"
    client = make_client(pdf_response())

    outcome = download_pdf(URL, missing, client=client)

    assert isinstance(outcome, DownloadFailed)
    assert outcome.kind == "write-failed"
    assert not missing.exists()


def test_custom_required_content_type(make_client, pdf_response, output_dir) -> None:
    client = make_client(pdf_response(content_type="application/octet-stream"))

    outcome = download_pdf(
        URL, output_dir, client=client, required_content_type="application/octet-stream"
    )

    assert isinstance(outcome, DownloadSuccess)
