"""Fetch the remote DocHeaderSet listing and save it as the local snapshot."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from SdsHarvest.io_utils import atomic_write_bytes

LOGGER = logging.getLogger(__name__)


def fetch_snapshot(client: httpx.Client, url: str, dest: Path) -> int:
    """GET ``url`` as JSON and replace ``dest`` with the response body.

    Returns the number of bytes written.

    Raises:
        httpx.HTTPError: On transport failure or a non-2xx response.
        OSError: If the snapshot cannot be written.
    """

    response = client.get(url, headers={"Accept": "application/json"})
    response.raise_for_status()
    body = response.content
    if not body.endswith(b"\n"):
        body += b"\n"

    dest.parent.mkdir(parents=True, exist_ok=True)
    written = atomic_write_bytes(dest, body)
    LOGGER.info("Saved %d-byte snapshot from %s to %s", written, url, dest)
    return written
