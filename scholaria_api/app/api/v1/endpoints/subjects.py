"""Subject endpoints for API v1."""

from scholaria_api.app.schemas.subject import SubjectCreate, SubjectUpdate
from scholaria_api.app.services.subject_service import SubjectService

from .crud import build_crud_router

router = build_crud_router(SubjectService, SubjectCreate, SubjectUpdate)
