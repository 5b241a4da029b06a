"""Apache configtest and reload commands."""

from __future__ import annotations

import typer

from vhm.audit import audit, record_result
from vhm.commands._output import handle_errors, print_result
from vhm.config import get_config
from vhm.services.synchronizer import ApacheSynchronizer

app = typer.Typer(no_args_is_help=True)


@app.command()
def test() -> None:
    """Run Apache's configuration self-check (apachectl configtest)."""
    result = ApacheSynchronizer(get_config()).test()
    print_result(result)


@app.command()
def reload() -> None:
    """Reload Apache."""
    with handle_errors():
        with audit("apache.reload") as event:
            result = ApacheSynchronizer(get_config()).reload()
            record_result(event, result)
    print_result(result)
