# === NAVMAP v1 ===
# {
#   "module": "SdsHarvest.download",
#   "purpose": "Download stage: turn one document URL into a file on disk",
#   "sections": [
#     {
#       "id": "prepare-candidate-download",
#       "name": "prepare_candidate_download",
#       "anchor": "function-prepare-candidate-download",
#       "kind": "function"
#     },
#     {
#       "id": "fetch-candidate-payload",
#       "name": "fetch_candidate_payload",
#       "anchor": "function-fetch-candidate-payload",
#       "kind": "function"
#     },
#     {
#       "id": "finalize-candidate-download",
#       "name": "finalize_candidate_download",
#       "anchor": "function-finalize-candidate-download",
#       "kind": "function"
#     },
#     {
#       "id": "download-pdf",
#       "name": "download_pdf",
#       "anchor": "function-download-pdf",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Download Stage

Three-step download of a single document URL:
1. prepare_candidate_download(url, output_dir) → destination Path
   or raise SkipDownload / MalformedURLError
2. fetch_candidate_payload(client, url) → bytes or raise DownloadError
3. finalize_candidate_download(url, dest, payload) → DownloadSuccess

:func:`download_pdf` chains the steps and converts every signal into a
:data:`DownloadOutcome`, so callers never see an exception for a per-URL
failure. The payload is held entirely in memory before the destination file
is created; nothing is written unless the body is complete and non-empty.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from SdsHarvest.api.exceptions import DownloadError, SkipDownload
from SdsHarvest.api.types import (
    DownloadFailed,
    DownloadOutcome,
    DownloadSkipped,
    DownloadSuccess,
)
from SdsHarvest.io_utils import atomic_write_bytes, file_exists
from SdsHarvest.urls import filename_for_url

__all__ = (
    "PDF_MEDIA_TYPE",
    "download_pdf",
    "fetch_candidate_payload",
    "finalize_candidate_download",
    "prepare_candidate_download",
)

LOGGER = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"


def prepare_candidate_download(url: str, output_dir: Path) -> Path:
    """
    Resolve the destination for ``url`` and apply the exists-check.

    Returns:
        Path the payload should be written to.

    Raises:
        MalformedURLError: If no filename can be derived from ``url``
        SkipDownload: If the destination already holds a file
    """
    dest = output_dir / filename_for_url(url)
    if file_exists(dest):
        raise SkipDownload(str(dest))
    return dest


def fetch_candidate_payload(
    client: httpx.Client,
    url: str,
    *,
    required_content_type: str = PDF_MEDIA_TYPE,
) -> bytes:
    """
    GET ``url`` and return the validated body.

    Checks, in order: transport success, status 200, Content-Type containing
    ``required_content_type``, complete read, non-empty body.

    Raises:
        DownloadError: With the kind of the first failed check
    """
    try:
        with client.stream("GET", url) as response:
            if response.status_code != httpx.codes.OK:
                raise DownloadError(
                    "bad-status",
                    f"download failed for {url}: {response.status_code} {response.reason_phrase}",
                )

            content_type = response.headers.get("Content-Type", "")
            if required_content_type not in content_type.lower():
                raise DownloadError(
                    "invalid-content-type",
                    f"invalid content type for {url}: {content_type or '<missing>'} "
                    f"(expected {required_content_type})",
                )

            try:
                payload = response.read()
            except httpx.HTTPError as exc:
                raise DownloadError(
                    "read-failed", f"failed to read PDF data from {url}: {exc}"
                ) from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise DownloadError("request-failed", f"failed to download {url}: {exc}") from exc

    if not payload:
        raise DownloadError("empty-download", f"downloaded 0 bytes for {url}; not creating file")
    return payload


def finalize_candidate_download(url: str, dest: Path, payload: bytes) -> DownloadSuccess:
    """
    Persist ``payload`` at ``dest``.

    Raises:
        DownloadError: ``write-failed`` when the file cannot be created or written
    """
    try:
        written = atomic_write_bytes(dest, payload)
    except OSError as exc:
        raise DownloadError(
            "write-failed", f"failed to write PDF to file for {url}: {exc}"
        ) from exc
    return DownloadSuccess(url=url, path=str(dest), bytes_written=written)


def download_pdf(
    url: str,
    output_dir: Path,
    *,
    client: httpx.Client,
    required_content_type: str = PDF_MEDIA_TYPE,
) -> DownloadOutcome:
    """
    Download one document into ``output_dir``.

    The output directory must already exist. Exactly one file is created on
    success; on every other outcome the directory is left untouched.

    Args:
        url: Document URL built by :func:`SdsHarvest.urls.build_url`
        output_dir: Existing destination directory
        client: HTTP client owned by the caller
        required_content_type: Media type token the response must carry

    Returns:
        DownloadSuccess, DownloadSkipped or DownloadFailed
    """
    try:
        dest = prepare_candidate_download(url, output_dir)
        payload = fetch_candidate_payload(
            client, url, required_content_type=required_content_type
        )
        outcome: DownloadOutcome = finalize_candidate_download(url, dest, payload)
    except SkipDownload as skip:
        outcome = DownloadSkipped(url=url, path=skip.path)
    except DownloadError as exc:
        outcome = DownloadFailed(url=url, kind=exc.kind, detail=str(exc))

    LOGGER.debug("download_pdf %s → %s", url, outcome.classification)
    return outcome
