"""File-backed site record store: one ``<domain>.json`` document per site.

Each domain is an independent file written with an atomic rename, so
operations on different domains never contend. Concurrent writes to the
*same* domain are last-write-wins.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from vhm_common import Site, parse_site
from vhm_common.models.site import is_hostname

from vhm.errors import PersistenceError, SiteNotFoundError
from vhm.services.files import atomic_write

log = logging.getLogger(__name__)


class SiteStore:
    """Keyed durable storage for site records."""

    def __init__(self, sites_dir: Path):
        self.sites_dir = Path(sites_dir)

    def _path(self, domain: str) -> Path:
        return self.sites_dir / f"{domain}.json"

    def _load(self, path: Path) -> Site:
        try:
            return parse_site(json.loads(path.read_text()))
        except FileNotFoundError:
            raise
        except (OSError, ValueError, ValidationError) as exc:
            raise PersistenceError(f"Cannot read site record {path}: {exc}") from exc

    def list(self) -> list[Site]:
        """Return all stored sites sorted by domain, skipping unreadable files."""
        if not self.sites_dir.is_dir():
            return []
        sites: list[Site] = []
        for path in sorted(self.sites_dir.glob("*.json")):
            try:
                sites.append(self._load(path))
            except FileNotFoundError:
                # Removed between glob and read.
                continue
            except PersistenceError as exc:
                log.warning("Skipping %s: %s", path.name, exc)
        return sites

    def exists(self, domain: str) -> bool:
        return is_hostname(domain) and self._path(domain).is_file()

    def get(self, domain: str) -> Site:
        try:
            return self._load(self._path(domain))
        except FileNotFoundError:
            raise SiteNotFoundError(domain) from None

    def put(self, site: Site) -> None:
        """Create or overwrite the record keyed by ``site.domain``."""
        content = json.dumps(site.to_document(), indent=2) + "\n"
        try:
            atomic_write(self._path(site.domain), content, mode=0o600)
        except OSError as exc:
            raise PersistenceError(f"Cannot write site record for {site.domain}: {exc}") from exc
        log.debug("Stored site record %s", site.domain)

    def remove(self, domain: str) -> None:
        path = self._path(domain)
        try:
            path.unlink()
        except FileNotFoundError:
            raise SiteNotFoundError(domain) from None
        except OSError as exc:
            raise PersistenceError(f"Cannot remove site record for {domain}: {exc}") from exc
        log.debug("Removed site record %s", domain)
