"""FastAPI application entry point."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vhm.errors import VhmError
from vhm_api.config import settings
from vhm_api.responses import vhm_error_handler
from vhm_api.routers import apache, services, sites

app = FastAPI(
    title="VHM API",
    description="Apache VHost Manager: site records projected onto Apache virtual hosts",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(VhmError, vhm_error_handler)

app.include_router(sites.router, prefix="/api")
app.include_router(apache.router, prefix="/api")
app.include_router(services.router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}


def run(host: Optional[str] = None, port: Optional[int] = None, reload: bool = False) -> None:
    import uvicorn

    uvicorn.run(
        "vhm_api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )
