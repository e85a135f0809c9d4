"""
Canonical Exception Types for the Download Pipeline

Thin signal types for the prepare/fetch/finalize stages. Raised to signal a
skip or an error condition; :func:`SdsHarvest.download.download_pdf` catches
them and converts them to a :data:`DownloadOutcome`.
"""

from __future__ import annotations

from typing import Optional

from .types import FailureKind


class SkipDownload(Exception):
    """
    Raise when the destination already exists.

    Caught by the downloader and converted to:
        DownloadSkipped(url=url, path=path)
    """

    def __init__(self, path: str, message: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message or f"File already exists, skipping: {path}")


class DownloadError(Exception):
    """
    Raise when a download attempt cannot complete.

    Caught by the downloader and converted to:
        DownloadFailed(url=url, kind=kind, detail=str(exc))

    Common kinds:
        - "request-failed": DNS, connection or timeout failure
        - "bad-status": non-200 response
        - "invalid-content-type": response is not a PDF
        - "empty-download": zero-byte body
    """

    def __init__(self, kind: FailureKind, message: Optional[str] = None) -> None:
        self.kind = kind
        super().__init__(message or f"Download error: {kind}")


class MalformedURLError(DownloadError):
    """Raised when a URL does not carry the four templated document fields."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__("malformed-url", f"URL does not match the document template: {url}")


class SnapshotError(Exception):
    """Raised when the snapshot cannot be read or parsed in strict mode."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")
