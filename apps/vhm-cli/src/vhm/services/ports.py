"""Detect locally running development servers by probing well-known ports."""

from __future__ import annotations

import socket
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from pydantic import BaseModel

# Common development server ports and what usually listens there.
DEV_PORTS: dict[int, str] = {
    3000: "Node.js / React",
    3001: "Node.js",
    4200: "Angular",
    5000: "Flask",
    5173: "Vite",
    5500: "Live Server",
    8000: "Django / FastAPI",
    8080: "HTTP alt",
    8081: "HTTP alt",
    8888: "Jupyter",
    9000: "PHP-FPM / SonarQube",
}

_LOOPBACK = {"127.0.0.1", "::1", "localhost"}


class ActiveService(BaseModel):
    port: int
    name: str
    url: str


def is_listening(port: int, host: str = "127.0.0.1", timeout: float = 0.2) -> bool:
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


def service_url(host: str, port: int) -> str:
    """URL for a proxy site targeting ``host:port``; loopback reads as localhost."""
    if host in _LOOPBACK:
        host = "localhost"
    elif ":" in host:
        host = f"[{host}]"
    return f"http://{host}:{port}"


def scan_ports(
    ports: Iterable[int] | None = None,
    host: str = "127.0.0.1",
    timeout: float = 0.2,
) -> list[ActiveService]:
    """Return the subset of ``ports`` accepting TCP connections on ``host``."""
    candidates = sorted(set(DEV_PORTS if ports is None else ports))
    if not candidates:
        return []
    with ThreadPoolExecutor(max_workers=min(16, len(candidates))) as pool:
        open_flags = list(pool.map(lambda p: is_listening(p, host, timeout), candidates))
    return [
        ActiveService(
            port=port,
            name=DEV_PORTS.get(port, f"Service on :{port}"),
            url=service_url(host, port),
        )
        for port, is_open in zip(candidates, open_flags)
        if is_open
    ]
