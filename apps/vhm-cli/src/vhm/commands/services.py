"""Local development server discovery."""

from __future__ import annotations

from typing import List, Optional

import typer
from rich.table import Table

from vhm.commands._output import console
from vhm.services import ports as port_scanner


def services(
    port: Optional[List[int]] = typer.Option(None, "--port", "-p", help="Port to probe (repeatable)"),
    host: str = typer.Option("127.0.0.1", help="Host to probe"),
) -> None:
    """List local development servers that could back a proxy site."""
    found = port_scanner.scan_ports(port or None, host=host)
    if not found:
        console.print("No active development servers found.")
        return

    table = Table(title="Active services")
    table.add_column("Port", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("URL", style="green")
    for svc in found:
        table.add_row(str(svc.port), svc.name, svc.url)
    console.print(table)
    console.print("Create a proxy site with: vhm site create --domain <domain> --proxy <url>")
