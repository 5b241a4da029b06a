"""Console output helpers shared by CLI commands."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

import typer
from rich.console import Console

from vhm_common import SyncResult, SyncStatus

from vhm.errors import VhmError

console = Console()
err_console = Console(stderr=True)


@contextmanager
def handle_errors() -> Generator[None, None, None]:
    """Turn VhmError into a red message and the error's exit code."""
    try:
        yield
    except VhmError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(exc.exit_code) from exc


def print_result(result: SyncResult) -> None:
    """Print a sync/site result; exits non-zero when it failed."""
    if result.status is SyncStatus.OK:
        console.print(f"[green]{result.message}[/green]")
    elif result.status is SyncStatus.WARNING:
        console.print(f"[yellow]{result.message}[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]warning:[/yellow] {warning}")
    else:
        err_console.print(f"[red]{result.message}[/red]")
        if result.error and result.error != result.message:
            err_console.print(f"  {result.error}")
    if result.output:
        console.print(result.output.rstrip(), markup=False, highlight=False)
    if result.failed:
        raise typer.Exit(1)
