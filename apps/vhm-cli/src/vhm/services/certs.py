"""TLS certificate inspection for sites with ``enableSSL``."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from cryptography import x509

log = logging.getLogger(__name__)


def read_cert_expiry(cert_path: Path) -> datetime | None:
    """Read the expiry date from a PEM certificate on disk."""
    try:
        cert = x509.load_pem_x509_certificate(cert_path.read_bytes())
        return cert.not_valid_after_utc
    except (OSError, ValueError) as exc:
        log.warning("Failed to read cert %s: %s", cert_path, exc)
    return None


def cert_status(expiry: datetime | None, *, now: datetime | None = None) -> str:
    if expiry is None:
        return "unknown"
    now = now or datetime.now(timezone.utc)
    days = (expiry - now).days
    if days < 0:
        return "expired"
    if days <= 14:
        return "critical"
    if days <= 30:
        return "warning"
    return "valid"


def _present(path: Path) -> bool | None:
    try:
        return path.exists()
    except OSError:
        # /etc/ssl/private is usually not traversable by unprivileged users.
        return None


def check_cert(cert_path: Path, key_path: Path) -> tuple[str, datetime | None]:
    """Return ``(status, expiry)``; status is ``missing`` when either file is absent."""
    if _present(cert_path) is False or _present(key_path) is False:
        return "missing", None
    expiry = read_cert_expiry(cert_path)
    return cert_status(expiry), expiry
