"""
Service information endpoints.

``/info/`` reports the name and version; ``/info/health`` probes the
store and answers 503 when it cannot be reached.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from scholaria_api.app.core.config import settings
from scholaria_api.app.core.db import Database
from scholaria_api.app.api.deps import get_database

router = APIRouter()


@router.get("/")
async def get_info() -> Dict[str, Any]:
    """Return the project name and API version."""
    return {"name": settings.project_name, "version": settings.api_version}


@router.get("/health")
async def health(database: Database = Depends(get_database)) -> JSONResponse:
    """Readiness probe backed by a trivial store query."""
    if database.health_check():
        return JSONResponse({"status": "ok"})
    return JSONResponse({"status": "unavailable"}, status_code=503)
