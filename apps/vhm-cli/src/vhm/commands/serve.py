"""Run the REST API."""

from __future__ import annotations

from typing import Optional

import typer


def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default from VHM_HOST)"),
    port: Optional[int] = typer.Option(None, help="Bind port (default from VHM_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
) -> None:
    """Serve the VHM REST API with uvicorn."""
    from vhm_api.main import run

    run(host=host, port=port, reload=reload)
