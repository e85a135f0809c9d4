"""Console and JSON sidecar logging."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from SdsHarvest.logging_utils import JSONFormatter, setup_logging


def test_json_formatter_includes_download_fields() -> None:
    record = logging.LogRecord(
        "SdsHarvest.runner", logging.WARNING, __file__, 1, "[%s] failed", ("bad-status",), None
    )
    record.url = "https://example.test/doc"
    record.kind = "bad-status"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["message"] == "[bad-status] failed"
    assert payload["url"] == "https://example.test/doc"
    assert payload["kind"] == "bad-status"
    assert "path" not in payload


def test_setup_logging_writes_json_lines(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "run.jsonl"
    logger = setup_logging(level="DEBUG", json_log_path=log_path)

    logging.getLogger("SdsHarvest.download").info("hello", extra={"outcome": "skip"})
    for handler in logger.handlers:
        handler.flush()

    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[-1])["outcome"] == "skip"


def test_setup_logging_is_idempotent(tmp_path: Path) -> None:
    setup_logging(json_log_path=tmp_path / "a.jsonl")
    logger = setup_logging()

    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
