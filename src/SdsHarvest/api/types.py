"""
Canonical API Types for the SdsHarvest Pipeline

Provides frozen, immutable dataclasses as contracts between the record
source, URL builder, downloader, and run orchestration.

Data Flow:
  load_records(snapshot) → Record[]
  build_urls(records) → str[] → dedupe → str[]
  download_pdf(url) → DownloadOutcome
  run_pipeline records outcomes → RunSummary

Design Principles:
  - Frozen dataclasses prevent accidental mutation
  - One outcome class per result tag; success, skip and failure never
    share a channel
  - Literal types prevent invalid string values
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Sequence, Union

# ============================================================================
# STABLE TOKEN VOCABULARIES (Public Contract)
# ============================================================================

#: Final outcome classification
OutcomeClass = Literal["success", "skip", "error"]

#: Normalized failure kinds
FailureKind = Literal[
    "malformed-url",
    "request-failed",
    "bad-status",
    "invalid-content-type",
    "read-failed",
    "empty-download",
    "write-failed",
]


# ============================================================================
# RECORDS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Record:
    """
    One document variant listed in the snapshot.

    The four fields identify a safety data sheet; they are carried verbatim
    from the snapshot (``Matnr``, ``Subid``, ``Sbgvid``, ``Laiso``).
    """

    material_number: str
    """Material number (``Matnr``)."""

    sub_id: str
    """Sub identifier (``Subid``)."""

    storage_location: str
    """Storage/location code of the sheet variant (``Sbgvid``)."""

    language: str
    """Language ISO code (``Laiso``)."""


# ============================================================================
# DOWNLOAD OUTCOMES
# ============================================================================


@dataclass(frozen=True, slots=True)
class DownloadSuccess:
    """A new file was written to ``path``."""

    url: str
    path: str
    bytes_written: int

    def __post_init__(self) -> None:
        if self.bytes_written <= 0:
            raise ValueError(
                f"DownloadSuccess.bytes_written must be > 0, got {self.bytes_written}"
            )

    @property
    def classification(self) -> OutcomeClass:
        return "success"


@dataclass(frozen=True, slots=True)
class DownloadSkipped:
    """The destination already existed; no request was issued."""

    url: str
    path: str

    @property
    def classification(self) -> OutcomeClass:
        return "skip"


@dataclass(frozen=True, slots=True)
class DownloadFailed:
    """The attempt failed; nothing was left behind in the output directory."""

    url: str
    kind: FailureKind
    detail: str = ""

    @property
    def classification(self) -> OutcomeClass:
        return "error"


DownloadOutcome = Union[DownloadSuccess, DownloadSkipped, DownloadFailed]


# ============================================================================
# RUN SUMMARY
# ============================================================================


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Aggregate result of one pass over the snapshot."""

    record_count: int
    """Records read from the snapshot."""

    url_count: int
    """Unique URLs handed to the downloader."""

    outcomes: Sequence[DownloadOutcome] = field(default_factory=tuple)
    """Outcomes in processing order."""

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.classification == "success")

    @property
    def skip_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.classification == "skip")

    @property
    def error_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.classification == "error")
