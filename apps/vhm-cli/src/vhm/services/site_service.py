"""Site service: store mutations combined with Apache synchronisation.

Ordering for create/update is render+write config, then persist the record,
then enable+reload. A config that cannot be written never reaches the store;
a record that was stored stays authoritative even if Apache could not be
enabled or reloaded (the result then carries warnings).
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Union

from pydantic import ValidationError
from pydantic.alias_generators import to_snake

from vhm_common import (
    ArtifactStatus,
    ProxySite,
    Site,
    SiteOperationResult,
    StaticSite,
    SyncResult,
    VhmConfig,
    parse_site,
)
from vhm_common.models.site import VARIANT_FIELDS, other_kind

from vhm.errors import PersistenceError, SiteConflictError, SiteNotFoundError, SiteValidationError
from vhm.services.site_store import SiteStore
from vhm.services.synchronizer import ApacheSynchronizer

log = logging.getLogger(__name__)

SiteInput = Union[StaticSite, ProxySite, Mapping[str, Any]]


def build_site(payload: SiteInput) -> Site:
    """Validate a record or raw document, raising :class:`SiteValidationError`."""
    if isinstance(payload, (StaticSite, ProxySite)):
        return payload
    doc = dict(payload)
    kind = doc.get("kind")
    if isinstance(kind, str) and kind in VARIANT_FIELDS:
        foreign = VARIANT_FIELDS[other_kind(kind)]
        for key in (foreign, to_snake(foreign)):
            value = doc.pop(key, None)
            if isinstance(value, str):
                value = value.strip()
            if value:
                raise SiteValidationError(foreign, f"not allowed for {kind} sites")
    try:
        return parse_site(doc)
    except ValidationError as exc:
        raise SiteValidationError.from_pydantic(exc) from exc


class SiteService:
    """Create/update/delete sites and keep Apache in step."""

    def __init__(self, store: SiteStore, synchronizer: ApacheSynchronizer):
        self.store = store
        self.sync = synchronizer

    @classmethod
    def from_config(cls, config: VhmConfig) -> SiteService:
        return cls(SiteStore(config.sites_dir), ApacheSynchronizer(config))

    # -- queries ------------------------------------------------------------

    def list(self) -> list[Site]:
        return self.store.list()

    def get(self, domain: str) -> Site:
        return self.store.get(domain)

    def status(self, domain: str) -> ArtifactStatus:
        return self.sync.inspect(self.store.get(domain))

    def status_all(self) -> list[ArtifactStatus]:
        return [self.sync.inspect(site) for site in self.store.list()]

    # -- mutations ----------------------------------------------------------

    def create(self, payload: SiteInput) -> SiteOperationResult:
        site = build_site(payload)
        if self.store.exists(site.domain):
            raise SiteConflictError(site.domain)

        staged = self.sync.stage(site)
        if staged.failed:
            return SiteOperationResult.from_sync(staged, message=f"Site {site.domain} not created")
        self._commit(site)

        result = staged.merge(self.sync.activate(site.domain))
        log.info("Created site %s (%s)", site.domain, result.status.value)
        return SiteOperationResult.from_sync(result, site, _message(result, f"Site {site.domain} created"))

    def update(self, old_domain: str, payload: SiteInput) -> SiteOperationResult:
        site = build_site(payload)
        previous = self.store.get(old_domain)
        if site.domain == old_domain:
            staged = self.sync.stage(site)
            if staged.failed:
                return SiteOperationResult.from_sync(staged, message=f"Site {old_domain} not updated")
            self._commit(site, previous)
            result = staged.merge(self.sync.activate(site.domain))
        else:
            result = self._rename(old_domain, site)
            if result.failed:
                return SiteOperationResult.from_sync(result, message=f"Site {old_domain} not updated")
        log.info("Updated site %s -> %s (%s)", old_domain, site.domain, result.status.value)
        return SiteOperationResult.from_sync(result, site, _message(result, f"Site {site.domain} updated"))

    def delete(self, domain: str) -> SiteOperationResult:
        # Presence only: a corrupt record must still be deletable.
        if not self.store.exists(domain):
            raise SiteNotFoundError(domain)
        # Apache first; the record is removed even if Apache could not be updated.
        result = self.sync.remove(domain)
        self.store.remove(domain)
        log.info("Deleted site %s (%s)", domain, result.status.value)
        return SiteOperationResult.from_sync(result, message=_message(result, f"Site {domain} deleted"))

    def sync_site(self, domain: str) -> SiteOperationResult:
        """Re-apply a stored record to Apache (the retry path after warnings)."""
        site = self.store.get(domain)
        result = self.sync.apply(site)
        return SiteOperationResult.from_sync(result, site, _message(result, f"Site {domain} synchronised"))

    # -- internals ----------------------------------------------------------

    def _commit(self, site: Site, previous: Site | None = None) -> None:
        try:
            self.store.put(site)
        except PersistenceError:
            # The staged config belongs to a record that never got stored.
            if previous is not None:
                self.sync.stage(previous)
            else:
                self.sync.discard(site.domain)
            raise

    def _rename(self, old_domain: str, site: Site) -> SyncResult:
        if self.store.exists(site.domain):
            raise SiteConflictError(site.domain)
        collision = self.sync.check_collision(site.domain)
        if collision is not None:
            return collision

        result = self.sync.stage(site)
        if result.failed:
            return result
        self._commit(site)
        try:
            self.store.remove(old_domain)
        except PersistenceError:
            # Undo so the old site stays the only stored and active record.
            self.store.remove(site.domain)
            self.sync.discard(site.domain)
            raise

        # The old vhost is disabled and deleted before the new one is enabled,
        # so two configs with conflicting ServerNames are never active together.
        result.merge(self.sync.deactivate(old_domain))
        result.merge(self.sync.activate(site.domain))
        return result


def _message(result: SyncResult, done: str) -> str:
    if result.warnings:
        return f"{done}. Apache update requires manual action."
    return f"{done}."
