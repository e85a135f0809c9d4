"""HTTP client construction for SdsHarvest."""

from .client import build_http_client

__all__ = ["build_http_client"]
