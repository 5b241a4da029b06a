"""Site record endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from vhm.audit import audit, record_result
from vhm.services.site_service import SiteService
from vhm_api.dependencies import get_service
from vhm_api.responses import result_response

router = APIRouter(tags=["sites"])

log = logging.getLogger(__name__)


@router.get("/sites")
def list_sites(svc: SiteService = Depends(get_service)):
    """List all site records."""
    return [site.to_document() for site in svc.list()]


@router.get("/sites/{domain}")
def get_site(domain: str, svc: SiteService = Depends(get_service)):
    return svc.get(domain).to_document()


@router.post("/sites")
def create_site(
    payload: dict[str, Any] = Body(...),
    svc: SiteService = Depends(get_service),
) -> JSONResponse:
    """Create a site, write its vhost and enable it.

    Apache command failures still return 200 with ``status: "warning"``.
    """
    with audit("site.create", target=str(payload.get("domain", "")), source="api") as event:
        result = svc.create(payload)
        record_result(event, result)
    if result.warnings:
        log.warning("Site %s created with warnings: %s", payload.get("domain"), result.warnings)
    return result_response(result)


@router.put("/sites/{domain}")
def update_site(
    domain: str,
    payload: dict[str, Any] = Body(...),
    svc: SiteService = Depends(get_service),
) -> JSONResponse:
    """Replace a site record; a changed ``domain`` moves the vhost."""
    with audit("site.update", target=domain, domain=payload.get("domain"), source="api") as event:
        result = svc.update(domain, payload)
        record_result(event, result)
    return result_response(result)


@router.delete("/sites/{domain}")
def delete_site(domain: str, svc: SiteService = Depends(get_service)) -> JSONResponse:
    with audit("site.delete", target=domain, source="api") as event:
        result = svc.delete(domain)
        record_result(event, result)
    return result_response(result)


@router.post("/sites/{domain}/sync")
def sync_site(domain: str, svc: SiteService = Depends(get_service)) -> JSONResponse:
    """Re-apply a stored site to Apache."""
    with audit("site.sync", target=domain, source="api") as event:
        result = svc.sync_site(domain)
        record_result(event, result)
    return result_response(result)


@router.get("/sites/{domain}/status")
def site_status(domain: str, svc: SiteService = Depends(get_service)):
    """Report whether the Apache artifacts match the stored record."""
    return svc.status(domain).model_dump(mode="json")
