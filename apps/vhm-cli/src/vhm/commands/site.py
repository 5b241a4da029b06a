"""Site record management commands."""

from __future__ import annotations

from typing import Any, Optional

import typer
from rich.syntax import Syntax
from rich.table import Table

from vhm_common import ProxySite

from vhm.audit import audit, record_result
from vhm.commands._output import console, handle_errors, print_result
from vhm.config import get_config
from vhm.services.site_service import SiteService

app = typer.Typer(no_args_is_help=True)


def _service() -> SiteService:
    return SiteService.from_config(get_config())


def _payload(
    domain: str,
    root: Optional[str],
    proxy: Optional[str],
    port: int,
    alias: Optional[str],
    ssl: bool,
) -> dict[str, Any]:
    doc: dict[str, Any] = {
        "domain": domain,
        "port": port,
        "serverAlias": alias,
        "enableSSL": ssl,
    }
    if proxy:
        doc["kind"] = "proxy"
        doc["proxyTarget"] = proxy
        if root:
            doc["documentRoot"] = root
    else:
        doc["kind"] = "static"
        doc["documentRoot"] = root or ""
    return doc


@app.command()
def create(
    domain: str = typer.Option(..., help="Domain name (e.g., example.com)"),
    root: Optional[str] = typer.Option(None, "--root", help="Document root for a static site"),
    proxy: Optional[str] = typer.Option(None, "--proxy", help="Upstream URL for a proxy site"),
    port: int = typer.Option(80, help="Listening port for the plaintext vhost"),
    alias: Optional[str] = typer.Option(None, "--alias", help="Additional ServerAlias"),
    ssl: bool = typer.Option(False, "--ssl", help="Also emit a :443 TLS vhost"),
) -> None:
    """Create a site record and enable it in Apache."""
    svc = _service()
    payload = _payload(domain, root, proxy, port, alias, ssl)

    with handle_errors():
        with audit("site.create", target=domain, kind=payload["kind"], port=port) as event:
            result = svc.create(payload)
            record_result(event, result)
    print_result(result)


@app.command()
def update(
    old_domain: str = typer.Argument(help="Domain of the site to update"),
    domain: Optional[str] = typer.Option(None, help="New domain (defaults to the current one)"),
    root: Optional[str] = typer.Option(None, "--root", help="Document root for a static site"),
    proxy: Optional[str] = typer.Option(None, "--proxy", help="Upstream URL for a proxy site"),
    port: int = typer.Option(80, help="Listening port for the plaintext vhost"),
    alias: Optional[str] = typer.Option(None, "--alias", help="Additional ServerAlias"),
    ssl: bool = typer.Option(False, "--ssl", help="Also emit a :443 TLS vhost"),
) -> None:
    """Replace a site record (full record, not a patch); renames move the vhost."""
    svc = _service()
    new_domain = domain or old_domain
    payload = _payload(new_domain, root, proxy, port, alias, ssl)

    with handle_errors():
        with audit("site.update", target=old_domain, domain=new_domain, kind=payload["kind"]) as event:
            result = svc.update(old_domain, payload)
            record_result(event, result)
    print_result(result)


@app.command()
def delete(
    domain: str = typer.Argument(help="Domain of the site to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
) -> None:
    """Disable and delete a site's vhost, then remove its record."""
    svc = _service()

    if not yes:
        console.print(f"\n[bold red]About to delete:[/bold red] {domain}")
        console.print("  Apache vhost will be disabled and its config file removed.")
        if not typer.confirm("Continue?"):
            raise typer.Abort()

    with handle_errors():
        with audit("site.delete", target=domain) as event:
            result = svc.delete(domain)
            record_result(event, result)
    print_result(result)


@app.command()
def sync(
    domain: str = typer.Argument(help="Domain to re-apply to Apache"),
) -> None:
    """Re-write, re-enable and reload a stored site (retry after warnings)."""
    svc = _service()

    with handle_errors():
        with audit("site.sync", target=domain) as event:
            result = svc.sync_site(domain)
            record_result(event, result)
    print_result(result)


@app.command(name="list")
def list_sites() -> None:
    """List all site records."""
    sites = _service().list()
    if not sites:
        console.print("No sites configured.")
        return

    table = Table(title="Sites")
    table.add_column("Domain", style="cyan")
    table.add_column("Kind")
    table.add_column("Target")
    table.add_column("Port", justify="right")
    table.add_column("SSL", style="yellow")

    for site in sites:
        target = site.proxy_target if isinstance(site, ProxySite) else site.document_root
        table.add_row(site.domain, site.kind, target, str(site.port), "yes" if site.enable_ssl else "no")

    console.print(table)


@app.command()
def show(
    domain: str = typer.Argument(help="Domain name to show config for"),
) -> None:
    """Display the Apache vhost config a site renders to."""
    svc = _service()
    with handle_errors():
        site = svc.get(domain)
    console.print_json(data=site.to_document())
    console.print(Syntax(svc.sync.render(site), "apacheconf", theme="monokai"))


@app.command()
def status(
    domain: Optional[str] = typer.Argument(None, help="Only inspect this domain"),
) -> None:
    """Compare stored sites with the files Apache actually has."""
    svc = _service()
    with handle_errors():
        states = [svc.status(domain)] if domain else svc.status_all()

    if not states:
        console.print("No sites configured.")
        return

    table = Table(title="Apache sync status")
    table.add_column("Domain", style="cyan")
    table.add_column("Available")
    table.add_column("Enabled")
    table.add_column("Current")
    table.add_column("Certificate")
    table.add_column("In sync")

    def flag(value: bool) -> str:
        return "[green]yes[/green]" if value else "[red]no[/red]"

    for state in states:
        table.add_row(
            state.domain,
            flag(state.available),
            flag(state.enabled),
            flag(state.current),
            state.ssl_certificate or "-",
            flag(state.in_sync),
        )

    console.print(table)
    if not all(state.in_sync for state in states):
        console.print("Run [bold]vhm site sync <domain>[/bold] to re-apply a site.")
