"""Componentes de UI para CLI (Rich)."""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import RunOutcome, SubmissionResult


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (solo en modo interactivo)."""

    title = Text("OTSGEN", style="bold cyan")
    subtitle = Text("Bulk one-time secrets • random passwords", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def print_result_line(console: Console, result: SubmissionResult) -> None:
    # Passwords and server-issued keys may contain markup or :emoji: codes.
    style = None if result.ok else "red"
    console.print(result.line(), markup=False, emoji=False, highlight=False, soft_wrap=True, style=style)


def build_failures_table(outcome: RunOutcome) -> Table:
    """Tabla con los envíos fallidos de un batch."""

    table = Table(title="Failed submissions")
    table.add_column("Kind", style="red", no_wrap=True)
    table.add_column("HTTP", style="yellow")
    table.add_column("Details", style="dim")
    for result in outcome.failed:
        table.add_row(
            result.failure.label() if result.failure else "Unknown error",
            str(result.status_code) if result.status_code is not None else "-",
            Text(result.detail or ""),
        )
    return table


def format_elapsed(outcome: RunOutcome) -> str:
    return f"Finished. {outcome.elapsed_seconds:.2f}s elapsed"
