"""Root Typer application for the VHM CLI."""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from vhm.commands import apache, serve, services, site

app = typer.Typer(
    name="vhm",
    help="Apache VHost Manager: keep Apache virtual hosts in step with declarative site records.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show diagnostic logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


app.add_typer(site.app, name="site", help="Create, update and delete site records.")
app.add_typer(apache.app, name="apache", help="Apache configtest and reload.")
app.command(name="services")(services.services)
app.command(name="serve")(serve.serve)

if __name__ == "__main__":
    app()
