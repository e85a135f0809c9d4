"""
HTTPX Client Factory.

Builds the explicitly-owned HTTP client used by a run:
- One client-wide timeout (connect, read, write and pool share it)
- Default redirect following, TLS verification on
- No custom request headers unless a User-Agent is configured
- Injectable transport so tests can substitute ``httpx.MockTransport``

There is no module-level singleton: callers construct a client, pass it into
:func:`SdsHarvest.download.download_pdf`, and close it when the run ends.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from SdsHarvest.config.models import HttpClientConfig

logger = logging.getLogger(__name__)


def build_http_client(
    config: Optional[HttpClientConfig] = None,
    *,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """
    Build a new HTTPX client from ``config``.

    Args:
        config: HTTP settings (defaults to a 30 second timeout)
        transport: Optional transport override, e.g. ``httpx.MockTransport``

    Returns:
        A configured ``httpx.Client``; the caller owns and closes it.
    """
    cfg = config or HttpClientConfig()

    headers = {}
    if cfg.user_agent:
        headers["User-Agent"] = cfg.user_agent

    client = httpx.Client(
        transport=transport,
        timeout=httpx.Timeout(cfg.timeout_s),
        follow_redirects=cfg.follow_redirects,
        verify=cfg.verify_tls,
        headers=headers,
    )
    logger.debug(
        "HTTPX client created (timeout=%ss, follow_redirects=%s, custom_transport=%s)",
        cfg.timeout_s,
        cfg.follow_redirects,
        transport is not None,
    )
    return client
