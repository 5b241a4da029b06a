"""Apache configtest / reload endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from vhm.audit import audit, record_result
from vhm.services.synchronizer import ApacheSynchronizer
from vhm_api.dependencies import get_synchronizer
from vhm_api.responses import result_response

router = APIRouter(prefix="/apache", tags=["apache"])


@router.get("/test")
def test_config(sync: ApacheSynchronizer = Depends(get_synchronizer)) -> JSONResponse:
    """Run ``apachectl configtest`` and return its output verbatim."""
    return result_response(sync.test())


@router.post("/reload")
def reload_apache(sync: ApacheSynchronizer = Depends(get_synchronizer)) -> JSONResponse:
    with audit("apache.reload", source="api") as event:
        result = sync.reload()
        record_result(event, result)
    return result_response(result)
