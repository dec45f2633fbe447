"""
Finding endpoints for API v1.

Findings are papers; their ``publication_date`` is validated as an ISO
date on create and update.
"""

from scholaria_api.app.schemas.finding import FindingCreate, FindingUpdate
from scholaria_api.app.services.finding_service import FindingService

from .crud import build_crud_router

router = build_crud_router(FindingService, FindingCreate, FindingUpdate)
