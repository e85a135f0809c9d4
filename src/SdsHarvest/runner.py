"""Single-pass run orchestration: snapshot → URLs → downloads.

URLs are processed strictly one after another. Per-URL failures are logged
and never abort the run; only a strict-mode snapshot failure propagates.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import httpx

from SdsHarvest.api.types import DownloadOutcome, DownloadSkipped, DownloadSuccess, RunSummary
from SdsHarvest.config.models import SdsHarvestConfig
from SdsHarvest.download import download_pdf
from SdsHarvest.io_utils import ensure_directory
from SdsHarvest.net.client import build_http_client
from SdsHarvest.records import load_records
from SdsHarvest.urls import build_urls, dedupe

LOGGER = logging.getLogger(__name__)


def _log_outcome(outcome: DownloadOutcome) -> None:
    extra = {"url": outcome.url, "outcome": outcome.classification}
    if isinstance(outcome, DownloadSuccess):
        extra.update(path=outcome.path, bytes_written=outcome.bytes_written)
        LOGGER.info(
            "Downloaded %d bytes: %s → %s",
            outcome.bytes_written,
            outcome.url,
            outcome.path,
            extra=extra,
        )
    elif isinstance(outcome, DownloadSkipped):
        extra["path"] = outcome.path
        LOGGER.info("Already exists, skipping: %s", outcome.path, extra=extra)
    else:
        extra["kind"] = outcome.kind
        LOGGER.warning("[%s] %s", outcome.kind, outcome.detail, extra=extra)


def run_pipeline(
    config: SdsHarvestConfig,
    *,
    client: Optional[httpx.Client] = None,
) -> RunSummary:
    """
    Run one pass over the configured snapshot.

    Args:
        config: Validated configuration
        client: Optional HTTP client; when omitted one is built from
            ``config.http`` and closed before returning

    Returns:
        RunSummary with one outcome per unique URL

    Raises:
        SnapshotError: If ``config.source.strict`` is set and the snapshot
            cannot be read or parsed
    """
    records = load_records(Path(config.source.snapshot_path), strict=config.source.strict)
    urls = dedupe(build_urls(records, config.source.base_url))
    LOGGER.info("Processing %d unique URLs from %d records", len(urls), len(records))

    output_dir = Path(config.download.output_dir)
    ensure_directory(output_dir, mode=config.download.dir_mode)

    owns_client = client is None
    http = client if client is not None else build_http_client(config.http)
    outcomes: list[DownloadOutcome] = []
    try:
        for url in urls:
            outcome = download_pdf(
                url,
                output_dir,
                client=http,
                required_content_type=config.download.required_content_type,
            )
            _log_outcome(outcome)
            outcomes.append(outcome)
    finally:
        if owns_client:
            http.close()

    summary = RunSummary(record_count=len(records), url_count=len(urls), outcomes=tuple(outcomes))
    LOGGER.info(
        "Run complete: %d downloaded, %d skipped, %d failed",
        summary.success_count,
        summary.skip_count,
        summary.error_count,
    )
    return summary
