"""Public types and signal exceptions shared across SdsHarvest."""

from .exceptions import DownloadError, MalformedURLError, SkipDownload, SnapshotError
from .types import (
    DownloadFailed,
    DownloadOutcome,
    DownloadSkipped,
    DownloadSuccess,
    FailureKind,
    OutcomeClass,
    Record,
    RunSummary,
)

__all__ = [
    "DownloadError",
    "DownloadFailed",
    "DownloadOutcome",
    "DownloadSkipped",
    "DownloadSuccess",
    "FailureKind",
    "MalformedURLError",
    "OutcomeClass",
    "Record",
    "RunSummary",
    "SkipDownload",
    "SnapshotError",
]
