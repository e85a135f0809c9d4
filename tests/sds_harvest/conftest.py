"""Shared fixtures for SdsHarvest tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Iterator

import httpx
import pytest

from SdsHarvest.logging_utils import ROOT_LOGGER_NAME

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop SDSH_* variables and undo logger changes made by ``setup_logging``."""

    import os

    for key in list(os.environ):
        if key.startswith("SDSH_"):
            monkeypatch.delenv(key, raising=False)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def make_client() -> Iterator[Callable[[Handler], httpx.Client]]:
    """Build HTTPX clients backed by ``httpx.MockTransport``; closed on teardown."""

    clients: list[httpx.Client] = []

    def _factory(handler: Handler) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler), timeout=30.0)
        clients.append(client)
        return client

    yield _factory
    for client in clients:
        client.close()


@pytest.fixture
def pdf_response() -> Callable[..., Handler]:
    """Return a handler factory answering every request with a fixed response."""

    def _factory(
        body: bytes = b"%PDF-1.7\n" + b"x" * 1015,
        *,
        status: int = 200,
        content_type: str = "application/pdf",
        calls: list[httpx.Request] | None = None,
    ) -> Handler:
        def handler(request: httpx.Request) -> httpx.Response:
            if calls is not None:
                calls.append(request)
            return httpx.Response(status, headers={"Content-Type": content_type}, content=body)

        return handler

    return _factory


def snapshot_payload(*entries: dict) -> dict:
    return {"d": {"results": list(entries)}}


@pytest.fixture
def sample_entry() -> dict:
    return {
        "Matnr": "290031915",
        "Subid": "630000000001",
        "Sbgvid": "SDS_FR",
        "Laiso": "FR",
        "Vkorg": "",
    }


@pytest.fixture
def write_snapshot(tmp_path: Path) -> Callable[..., Path]:
    def _write(*entries: dict, name: str = "main.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(snapshot_payload(*entries)), encoding="utf-8")
        return path

    return _write
