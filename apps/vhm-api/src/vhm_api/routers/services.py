"""Local development server discovery."""

from __future__ import annotations

from fastapi import APIRouter, Query

from vhm.services import ports

router = APIRouter(prefix="/services", tags=["services"])


@router.get("/active")
def active_services(host: str = Query(default="127.0.0.1")):
    """List listening dev servers, e.g. to pre-fill a proxy site's target."""
    return [svc.model_dump() for svc in ports.scan_ports(host=host)]
