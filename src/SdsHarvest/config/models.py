"""
Pydantic v2 Configuration Models for SdsHarvest

Provides strict, typed configuration for each stage of a run:
- HTTP client settings (timeout, TLS, redirects, User-Agent)
- Record source (snapshot path, endpoint templates, strictness)
- Download policy (output directory, permissions, accepted media type)
- Logging (level, optional JSON-lines sidecar)
- Top-level SdsHarvestConfig as single source of truth

All models use extra="forbid" for strict validation. Environment variables
and CLI overrides follow: file < env < CLI precedence.
"""

from __future__ import annotations

from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BASE_URL = (
    "https://zehsonesdsext-tjd0i1flxa.dispatcher.sa1.hana.ondemand.com/v1/SDS//DocContentSet"
)
DEFAULT_LISTING_URL = (
    "https://zehsonesdsext-tjd0i1flxa.dispatcher.sa1.hana.ondemand.com/v1/SDS/DocHeaderSet"
)

# ============================================================================
# Section Models
# ============================================================================


class HttpClientConfig(BaseModel):
    """Configuration for HTTP client behavior."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    timeout_s: float = Field(default=30.0, description="Client-wide timeout in seconds")
    user_agent: Optional[str] = Field(
        default=None, description="User-Agent header (None = client default)"
    )
    follow_redirects: bool = Field(default=True, description="Follow 3xx responses")
    verify_tls: bool = Field(default=True, description="Verify TLS certificates")

    @field_validator("timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout_s must be > 0")
        return v


class SourceConfig(BaseModel):
    """Where records come from and how they become URLs."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    snapshot_path: str = Field(default="main.json", description="Local JSON snapshot")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="DocContentSet endpoint")
    listing_url: str = Field(
        default=DEFAULT_LISTING_URL, description="Remote listing fetched by fetch-snapshot"
    )
    strict: bool = Field(
        default=False,
        description="Abort the run when the snapshot is unreadable instead of using zero records",
    )

    @field_validator("base_url", "listing_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v


class DownloadPolicy(BaseModel):
    """Configuration for download destination and validation."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    output_dir: str = Field(default="PDFs", description="Directory for downloaded files")
    dir_mode: int = Field(default=0o755, description="Permissions for a created output_dir")
    required_content_type: str = Field(
        default="application/pdf",
        description="Token the Content-Type header must contain",
    )

    @field_validator("dir_mode")
    @classmethod
    def validate_dir_mode(cls, v: int) -> int:
        if not 0 <= v <= 0o7777:
            raise ValueError("dir_mode must be a permission mask between 0 and 0o7777")
        return v

    @field_validator("required_content_type")
    @classmethod
    def validate_content_type(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("required_content_type must not be empty")
        return v.strip().lower()


class LoggingConfig(BaseModel):
    """Configuration for console and sidecar logging."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    level: str = Field(default="INFO", description="Log level name")
    json_log_path: Optional[str] = Field(
        default=None, description="Optional JSON-lines log file"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


# ============================================================================
# Top-Level Configuration
# ============================================================================


class SdsHarvestConfig(BaseModel):
    """
    Single source of truth for SdsHarvest configuration.

    Loaded from file (YAML/JSON), overlaid with environment variables,
    and finally overridden by CLI arguments. Precedence: file < env < CLI.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid", validate_assignment=True)

    http: HttpClientConfig = Field(
        default_factory=HttpClientConfig, description="HTTP client configuration"
    )
    source: SourceConfig = Field(default_factory=SourceConfig, description="Record source")
    download: DownloadPolicy = Field(
        default_factory=DownloadPolicy, description="Download policy"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    def config_hash(self) -> str:
        """
        Compute deterministic SHA256 hash of config for reproducibility.

        Returns:
            Hex-encoded SHA256 hash of normalized config JSON.
        """
        import hashlib
        import json

        normalized = json.dumps(self.model_dump(mode="json"), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(normalized.encode()).hexdigest()
