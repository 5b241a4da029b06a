"""Apache control commands: a2ensite / a2dissite / reload / configtest.

Each wrapper runs one privileged command with a timeout and returns a
:class:`CommandOutcome`. Non-zero exits, timeouts and missing binaries are
reported in the outcome, never raised.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from vhm_common import CommandOutcome, VhmConfig

log = logging.getLogger(__name__)


def _run(step: str, cmd: Sequence[str], *, timeout: float) -> CommandOutcome:
    argv = list(cmd)
    log.debug("Running %s: %s", step, " ".join(argv))
    try:
        result = subprocess.run(
            argv,
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        log.warning("%s timed out after %ss: %s", step, timeout, " ".join(argv))
        return CommandOutcome(
            step=step,
            command=argv,
            stdout=_text(exc.stdout),
            stderr=_text(exc.stderr),
            timed_out=True,
            timeout=timeout,
        )
    except OSError as exc:
        log.warning("%s could not be started: %s", step, exc)
        return CommandOutcome(step=step, command=argv, stderr=str(exc), timeout=timeout)

    if result.returncode != 0:
        log.warning("%s exited with %s: %s", step, result.returncode, result.stderr.strip())
    return CommandOutcome(
        step=step,
        command=argv,
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
        timeout=timeout,
    )


def _text(value: object) -> str:
    # TimeoutExpired carries bytes even when text=True was requested.
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return value or ""  # type: ignore[return-value]


def enable_site(cfg: VhmConfig, conf_name: str) -> CommandOutcome:
    return _run("enable-site", [*cfg.enable_site_cmd, conf_name], timeout=cfg.command_timeout)


def disable_site(cfg: VhmConfig, conf_name: str) -> CommandOutcome:
    return _run("disable-site", [*cfg.disable_site_cmd, conf_name], timeout=cfg.command_timeout)


def reload_server(cfg: VhmConfig) -> CommandOutcome:
    return _run("reload-server", cfg.reload_cmd, timeout=cfg.command_timeout)


def configtest(cfg: VhmConfig) -> CommandOutcome:
    """Run ``apachectl configtest``; Apache prints ``Syntax OK`` on stderr."""
    return _run("test-config", cfg.configtest_cmd, timeout=cfg.command_timeout)
