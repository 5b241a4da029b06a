"""Jinja2-based Apache vhost config renderer."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from vhm_common import SSL_CERT_DIR, SSL_KEY_DIR, SSL_PORT, ProxySite, Site

from vhm.services.files import atomic_write

_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
_SCHEMES = ("https://", "http://")


def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=select_autoescape([]),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def strip_scheme(target: str) -> str:
    """Drop one leading ``http://`` or ``https://`` from a proxy target."""
    for scheme in _SCHEMES:
        if target.startswith(scheme):
            return target[len(scheme):]
    return target


def cert_paths(
    domain: str,
    *,
    ssl_cert_dir: Path = SSL_CERT_DIR,
    ssl_key_dir: Path = SSL_KEY_DIR,
) -> tuple[Path, Path]:
    """Certificate and key paths the :443 block references for ``domain``."""
    return Path(ssl_cert_dir) / f"{domain}.crt", Path(ssl_key_dir) / f"{domain}.key"


def _blocks(site: Site, ssl_cert_dir: Path, ssl_key_dir: Path) -> list[dict[str, Any]]:
    blocks: list[dict[str, Any]] = [
        {"port": site.port, "ssl": False, "ws_scheme": "ws", "log_prefix": ""},
    ]
    if site.enable_ssl:
        cert_file, key_file = cert_paths(site.domain, ssl_cert_dir=ssl_cert_dir, ssl_key_dir=ssl_key_dir)
        blocks.append(
            {
                "port": SSL_PORT,
                "ssl": True,
                "ws_scheme": "wss",
                "log_prefix": "ssl-",
                "cert_file": cert_file.as_posix(),
                "key_file": key_file.as_posix(),
            }
        )
    return blocks


def render_vhost(
    site: Site,
    *,
    ssl_cert_dir: Path = SSL_CERT_DIR,
    ssl_key_dir: Path = SSL_KEY_DIR,
) -> str:
    """Render the ``<VirtualHost>`` definition(s) for a site record.

    Emits the plaintext block on ``site.port`` and, when ``enable_ssl`` is set,
    a TLS block on 443. Pure: no filesystem access beyond loading the template.
    """
    upstream = ""
    if isinstance(site, ProxySite):
        upstream = strip_scheme(site.proxy_target).rstrip("/")
    template = _get_env().get_template("vhost.conf.j2")
    return template.render(
        site=site,
        upstream=upstream,
        blocks=_blocks(site, ssl_cert_dir, ssl_key_dir),
    )


def write_vhost(path: Path, content: str) -> None:
    """Write vhost config to disk, replacing any previous version atomically."""
    atomic_write(path, content)
