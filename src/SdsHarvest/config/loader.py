"""
Configuration Loading with File/Env/CLI Precedence

Implements three-level config composition:
1. **File level** (YAML/JSON): base configuration
2. **Environment level**: SDSH_* prefixed variables override file
3. **CLI level**: programmatic overrides win

Environment variables use double-underscore notation:
  SDSH_HTTP__TIMEOUT_S=10  →  http.timeout_s=10
  SDSH_DOWNLOAD__OUTPUT_DIR=out  →  download.output_dir="out"

JSON values are automatically parsed; strings are type-coerced when possible.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .models import SdsHarvestConfig

_LOGGER = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX = "SDSH_"

# ============================================================================
# Helpers
# ============================================================================


def _read_file(path: str) -> dict[str, Any]:
    """
    Read YAML or JSON config file.

    Args:
        path: File path (suffix determines format: .yaml/.yml or .json)

    Returns:
        Parsed config dictionary

    Raises:
        ValueError: If file cannot be read or parsed
    """
    p = Path(path)
    if not p.exists():
        raise ValueError(f"Config file not found: {path}")

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ValueError(f"Cannot read config file {path}: {e}") from e

    suffix = p.suffix.lower()
    if suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
    elif suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Use .yaml or .json")

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level")
    return data


def _assign_nested(data: dict[str, Any], dotted_key: str, value: Any) -> None:
    """
    Assign value to nested dict using dot notation.

    Example:
        _assign_nested(data, "http.timeout_s", 10)
        → data["http"]["timeout_s"] = 10
    """
    keys = dotted_key.split(".")
    current = data

    for key in keys[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]

    current[keys[-1]] = value


def _coerce_env_value(value: str) -> Any:
    """
    Attempt to coerce environment variable string to appropriate type.

    Tries JSON parsing first (handles lists, dicts, bools, numbers).
    Falls back to the raw string if JSON fails.
    """
    try:
        return json.loads(value)
    except (json.JSONDecodeError, ValueError):
        pass

    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    return value


def _merge_env_overrides(
    data: dict[str, Any], env_prefix: str = DEFAULT_ENV_PREFIX
) -> dict[str, Any]:
    """
    Overlay environment variables onto config dict.

    Looks for ``env_prefix`` variables and maps double-underscore
    notation to nested dicts.
    """
    for env_key, env_value in os.environ.items():
        if not env_key.startswith(env_prefix):
            continue

        relative_key = env_key[len(env_prefix) :].lower()
        # SDSH_CONFIG names the config file itself
        if relative_key == "config":
            continue
        dotted_key = relative_key.replace("__", ".")
        coerced_value = _coerce_env_value(env_value)

        _assign_nested(data, dotted_key, coerced_value)
        _LOGGER.debug("Environment override: %s → %s = %r", env_key, dotted_key, coerced_value)

    return data


def _merge_cli_overrides(
    data: dict[str, Any], cli_overrides: Mapping[str, Any] | None
) -> dict[str, Any]:
    """
    Recursively merge CLI overrides into base config dict.

    ``None`` values are ignored so unset CLI options never mask file or env
    settings.
    """
    if not cli_overrides:
        return data

    for key, value in cli_overrides.items():
        if value is None:
            continue
        if isinstance(value, Mapping) and isinstance(data.get(key), dict):
            data[key] = _merge_cli_overrides(data[key], value)
        elif isinstance(value, Mapping):
            data[key] = _merge_cli_overrides({}, value)
        else:
            data[key] = value
        _LOGGER.debug("CLI override: %s = %r", key, value)

    return data


# ============================================================================
# Public API
# ============================================================================


def load_config(
    path: str | None = None,
    env_prefix: str = DEFAULT_ENV_PREFIX,
    cli_overrides: Mapping[str, Any] | None = None,
) -> SdsHarvestConfig:
    """
    Load SdsHarvestConfig from file, environment, and CLI with proper precedence.

    **Precedence:** file < environment < CLI

    Args:
        path: Path to YAML/JSON config file (optional)
        env_prefix: Environment variable prefix (default: SDSH_)
        cli_overrides: CLI overrides dict (optional)

    Returns:
        Validated SdsHarvestConfig instance

    Raises:
        ValueError: If config is invalid or file cannot be read
    """
    data: dict[str, Any] = {}

    if path:
        try:
            data = _read_file(path)
            _LOGGER.info("Loaded config from %s", path)
        except ValueError as e:
            _LOGGER.error("Failed to load config: %s", e)
            raise

    data = _merge_env_overrides(data, env_prefix)
    data = _merge_cli_overrides(data, cli_overrides)

    try:
        config = SdsHarvestConfig.model_validate(data)
    except ValueError as e:
        _LOGGER.error("Configuration validation failed: %s", e)
        raise
    _LOGGER.debug("Configuration validated. Config hash: %s...", config.config_hash()[:8])
    return config


def validate_config_file(path: str) -> bool:
    """
    Validate a config file, ignoring environment overrides.

    Raises:
        ValueError: If invalid
    """
    data = _read_file(path)
    SdsHarvestConfig.model_validate(data)
    return True


def export_config_schema() -> dict[str, Any]:
    """Export JSON Schema for SdsHarvestConfig."""
    return SdsHarvestConfig.model_json_schema()
