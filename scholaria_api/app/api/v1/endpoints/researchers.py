"""
Researcher endpoints for API v1.

Create, fetch, search, update and delete researchers.  Deleting a
researcher also removes their id from the subjects and findings they
list.
"""

from scholaria_api.app.schemas.researcher import ResearcherCreate, ResearcherUpdate
from scholaria_api.app.services.researcher_service import ResearcherService

from .crud import build_crud_router

router = build_crud_router(ResearcherService, ResearcherCreate, ResearcherUpdate)
