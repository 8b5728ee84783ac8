"""CLI principal (Typer).

Comandos:
- `otsgen generate`: genera N passwords y los registra como secretos OTS.
- `otsgen doctor ...`: diagnósticos y creación del fichero de configuración.

La CLI resuelve todo lo que ocurre *antes* del batch (settings, fichero de
configuración, límite de passwords, health check) y delega el batch en
`BulkDispatcher`.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.ots_client import OTSClient
from cli import doctor
from cli.ui_components import build_failures_table, format_elapsed, print_banner, print_result_line
from core.config import DEFAULT_CONFIG_PATH, AppSettings, load_service_config, load_settings
from core.domain.errors import BatchAbortedError, ConfigurationError, ReachabilityError
from core.domain.models import RemoteServiceConfig, RunOutcome, SubmissionResult
from core.services.bulk_dispatcher import BulkDispatcher
from core.services.password_generator import PasswordGenerator

EXIT_FAILURE = 2

app = typer.Typer(
    no_args_is_help=True,
    help="Bulk-generate random passwords and share them as one-time secrets.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, show_path=False)],
    )


def _print_success(result: SubmissionResult) -> None:
    # Failures are reported once, after the batch or in the abort message.
    if result.ok:
        print_result_line(_console, result)


async def _run_generation(
    *,
    settings: AppSettings,
    service: RemoteServiceConfig,
    count: int,
) -> RunOutcome:
    async with OTSClient(service, settings) as client:
        status_body = await client.check_status()
        _console.print(f"OTS service reachable. Healthcheck response: {status_body}", markup=False)

        dispatcher = BulkDispatcher(
            submitter=client,
            generator=PasswordGenerator(),
            password_length=service.password_length,
            max_concurrency=settings.max_concurrency,
            fail_fast=settings.fail_fast,
        )
        _console.print("Starting secret generation ...")
        return await dispatcher.run_batch(count, on_result=_print_success)


@app.command()
def generate(
    config: Path = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config",
        "-c",
        help="Path to config file.",
    ),
    passwords: int = typer.Option(
        1,
        "--passwords",
        "-n",
        min=0,
        help="Number of passwords you wish to generate.",
    ),
    fail_fast: Optional[bool] = typer.Option(
        None,
        "--fail-fast/--keep-going",
        help="Abort the whole batch on the first failed submission (default from OTSGEN_FAIL_FAST).",
    ),
    max_concurrency: Optional[int] = typer.Option(
        None,
        "--max-concurrency",
        min=1,
        help="Cap simultaneous submissions (default: one task per password).",
    ),
    banner: bool = typer.Option(False, "--banner", help="Show the banner before running."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
) -> None:
    """Generate passwords and print their one-time retrieval URLs."""

    overrides: dict[str, object] = {}
    if fail_fast is not None:
        overrides["fail_fast"] = fail_fast
    if max_concurrency is not None:
        overrides["max_concurrency"] = max_concurrency
    try:
        settings = load_settings(**overrides)
    except ConfigurationError as exc:
        _console.print(str(exc), markup=False)
        raise typer.Exit(code=EXIT_FAILURE) from exc

    configure_logging("DEBUG" if verbose else settings.log_level)
    if banner:
        print_banner(_console)

    try:
        service = load_service_config(config)
    except ConfigurationError as exc:
        _console.print(str(exc), markup=False)
        raise typer.Exit(code=EXIT_FAILURE) from exc
    _console.print("Configuration successfully loaded.")

    if passwords > settings.max_passwords:
        _console.print(
            f"You can not generate more than {settings.max_passwords} passwords. "
            "Please specify lower number."
        )
        raise typer.Exit(code=EXIT_FAILURE)

    try:
        outcome = asyncio.run(_run_generation(settings=settings, service=service, count=passwords))
    except ReachabilityError as exc:
        logger.debug("health check failed: %s", exc)
        _console.print(f"Could not connect to OTS service. {exc}", markup=False)
        raise typer.Exit(code=EXIT_FAILURE) from exc
    except BatchAbortedError as exc:
        _console.print(
            f"Error occurred during secret generation. Batch aborted after "
            f"{len(exc.outcome.results)} of {exc.outcome.requested} results.",
        )
        print_result_line(_console, exc.failure)
        raise typer.Exit(code=EXIT_FAILURE) from exc

    _console.print(format_elapsed(outcome))
    if outcome.failed:
        _console.print(
            f"{len(outcome.failed)} of {outcome.requested} submissions failed.",
            style="red",
        )
        _console.print(build_failures_table(outcome))
        raise typer.Exit(code=EXIT_FAILURE)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
