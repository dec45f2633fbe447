"""
Top-level router for version 1 of the API.

Aggregates the per entity routers under their plural prefixes.  When a
new entity type is introduced, include its router here.
"""

from fastapi import APIRouter

from .endpoints import findings, info, researchers, subjects

router = APIRouter()

router.include_router(researchers.router, prefix="/researchers", tags=["researchers"])
router.include_router(subjects.router, prefix="/subjects", tags=["subjects"])
router.include_router(findings.router, prefix="/findings", tags=["findings"])
router.include_router(info.router, prefix="/info", tags=["info"])
