"""SdsHarvest: batch downloader for safety data sheet PDFs.

Reads document records from a local OData snapshot, templates them into
DocContentSet URLs, and downloads each unique PDF once into an output
directory. Files already on disk are never fetched again.
"""

from SdsHarvest.api import (
    DownloadFailed,
    DownloadOutcome,
    DownloadSkipped,
    DownloadSuccess,
    Record,
    RunSummary,
)
from SdsHarvest.download import download_pdf
from SdsHarvest.records import load_records
from SdsHarvest.runner import run_pipeline
from SdsHarvest.urls import build_url, build_urls, dedupe, filename_for_url

__all__ = [
    "DownloadFailed",
    "DownloadOutcome",
    "DownloadSkipped",
    "DownloadSuccess",
    "Record",
    "RunSummary",
    "build_url",
    "build_urls",
    "dedupe",
    "download_pdf",
    "filename_for_url",
    "load_records",
    "run_pipeline",
]
