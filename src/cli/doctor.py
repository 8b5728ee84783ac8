"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from adapters.ots_client import OTSClient
from core.config import (
    DEFAULT_CONFIG_PATH,
    AppSettings,
    load_service_config,
    load_settings,
    write_service_config,
)
from core.domain.errors import ConfigurationError, ReachabilityError
from core.domain.models import RemoteServiceConfig

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_service(service: RemoteServiceConfig, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with OTSClient(service, settings) as client:
            body = await client.check_status()
        return True, body or "reachable"
    except ReachabilityError as exc:
        return False, str(exc)


@app.command()
def run(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Path to config file."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        _console.print(str(exc), markup=False)
        raise typer.Exit(code=2) from exc

    table = Table(title="OTSGEN Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Settings
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row(
        "Concurrency",
        "OK",
        "unbounded" if settings.max_concurrency is None else f"max {settings.max_concurrency}",
    )
    table.add_row("Failure policy", "OK", "fail-fast" if settings.fail_fast else "keep-going")

    # Config
    service: RemoteServiceConfig | None = None
    try:
        service = load_service_config(config)
        table.add_row("Config file", "OK", str(config))
        table.add_row("Endpoint", "OK", service.endpoint)
    except ConfigurationError as exc:
        table.add_row("Config file", "FAIL", str(exc))

    # Connectivity
    ok_http = False
    if service is not None:
        ok_http, detail_http = asyncio.run(_check_service(service, settings))
        table.add_row("OTS status", "OK" if ok_http else "FAIL", detail_http)
    else:
        table.add_row("OTS status", "SKIPPED", "No valid config")

    _console.print(table)

    if service is None:
        _console.print(
            "\n[yellow]Note:[/yellow] Run `otsgen doctor init-config` to create a config file."
        )
    if not ok_http:
        raise typer.Exit(code=2)


@app.command(name="init-config")
def init_config(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Where to write the config file."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    """Interactive setup of the OTS service config file."""

    if config.exists() and not force:
        raise typer.BadParameter(f"{config} already exists (use --force to overwrite)")

    endpoint = typer.prompt("OTS endpoint", default="https://ots.example.com").strip()
    username = typer.prompt("Username").strip()
    api_key = typer.prompt("API key", hide_input=True, confirmation_prompt=False).strip()
    secret_ttl = typer.prompt("Secret TTL (seconds)", default=3600, type=int)
    password_length = typer.prompt("Password length", default=16, type=int)

    try:
        service = RemoteServiceConfig(
            endpoint=endpoint,
            username=username,
            api_key=api_key,
            secret_ttl=secret_ttl,
            password_length=password_length,
        )
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    path = write_service_config(config, service)
    _console.print(f"[green]Saved OTS config to:[/green] {path}")
