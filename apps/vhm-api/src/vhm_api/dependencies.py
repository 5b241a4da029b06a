"""FastAPI dependencies wiring the core services."""

from __future__ import annotations

from vhm.config import get_config
from vhm.services.site_service import SiteService
from vhm.services.synchronizer import ApacheSynchronizer


def get_service() -> SiteService:
    return SiteService.from_config(get_config())


def get_synchronizer() -> ApacheSynchronizer:
    return ApacheSynchronizer(get_config())
