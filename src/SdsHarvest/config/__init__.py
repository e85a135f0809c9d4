"""Configuration models and loaders for SdsHarvest."""

from .loader import export_config_schema, load_config, validate_config_file
from .models import (
    DEFAULT_BASE_URL,
    DEFAULT_LISTING_URL,
    DownloadPolicy,
    HttpClientConfig,
    LoggingConfig,
    SdsHarvestConfig,
    SourceConfig,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_LISTING_URL",
    "DownloadPolicy",
    "HttpClientConfig",
    "LoggingConfig",
    "SdsHarvestConfig",
    "SourceConfig",
    "export_config_schema",
    "load_config",
    "validate_config_file",
]
