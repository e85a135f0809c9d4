"""Typer-based CLI for SdsHarvest with Pydantic v2 configuration."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from SdsHarvest.api.exceptions import SnapshotError
from SdsHarvest.config import SdsHarvestConfig, load_config, validate_config_file
from SdsHarvest.logging_utils import setup_logging
from SdsHarvest.net.client import build_http_client
from SdsHarvest.runner import run_pipeline
from SdsHarvest.snapshot import fetch_snapshot

console = Console()
app = typer.Typer(help="SdsHarvest: download safety data sheet PDFs from a local snapshot")

# ============================================================================
# Setup
# ============================================================================


def _load(config: Optional[str], overrides: dict[str, Any]) -> SdsHarvestConfig:
    try:
        return load_config(path=config, cli_overrides=overrides)
    except ValueError as e:
        console.print(f"[red]✗ Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


def _setup_logging(cfg: SdsHarvestConfig, verbose: bool) -> None:
    json_path = cfg.logging.json_log_path
    setup_logging(
        level="DEBUG" if verbose else cfg.logging.level,
        json_log_path=Path(json_path) if json_path else None,
    )


# ============================================================================
# Commands
# ============================================================================


@app.command()
def run(
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
        envvar="SDSH_CONFIG",
    ),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help="Snapshot JSON path"),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", "-o", help="PDF directory"),
    strict: Optional[bool] = typer.Option(
        None, "--strict/--lenient", help="Abort when the snapshot is unreadable"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose"),
) -> None:
    """Download every PDF referenced by the snapshot."""
    cfg = _load(
        config,
        {
            "source": {"snapshot_path": snapshot, "strict": strict},
            "download": {"output_dir": output_dir},
        },
    )
    _setup_logging(cfg, verbose)

    try:
        summary = run_pipeline(cfg)
    except SnapshotError as e:
        console.print(f"[red]✗ Snapshot error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    console.print(
        Panel(
            f"Records: {summary.record_count}\n"
            f"Unique URLs: {summary.url_count}\n"
            f"[green]Downloaded: {summary.success_count}[/green]\n"
            f"Skipped: {summary.skip_count}\n"
            f"[red]Failed: {summary.error_count}[/red]",
            title="Execution Summary",
        )
    )


@app.command("fetch-snapshot")
def fetch_snapshot_command(
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to config file", envvar="SDSH_CONFIG"
    ),
    url: Optional[str] = typer.Option(None, "--url", help="Listing endpoint"),
    dest: Optional[str] = typer.Option(None, "--dest", help="Snapshot destination"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose"),
) -> None:
    """Save the remote document listing as the local snapshot."""
    cfg = _load(config, {"source": {"listing_url": url, "snapshot_path": dest}})
    _setup_logging(cfg, verbose)

    target = Path(cfg.source.snapshot_path)
    try:
        with build_http_client(cfg.http) as client:
            written = fetch_snapshot(client, cfg.source.listing_url, target)
    except (httpx.HTTPError, OSError) as e:
        console.print(f"[red]✗ Failed to fetch snapshot: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Saved {written} bytes to {target}[/green]")


@app.command("print-config")
def print_config(
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to config file", envvar="SDSH_CONFIG"
    ),
) -> None:
    """Print the effective configuration as JSON."""
    cfg = _load(config, {})
    typer.echo(json.dumps(cfg.model_dump(mode="json"), indent=2, sort_keys=True))


@app.command("validate-config")
def validate_config(path: str = typer.Argument(..., help="Config file to validate")) -> None:
    """Validate a YAML/JSON config file."""
    try:
        validate_config_file(path)
    except ValueError as e:
        console.print(f"[red]✗ Invalid: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✓ {path} is valid[/green]")


def main() -> None:
    """Console-script entry point."""
    logging.captureWarnings(True)
    app()
