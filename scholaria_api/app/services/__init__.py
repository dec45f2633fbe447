"""
Service layer.

Each service encapsulates the business logic for one entity type and
is the only thing the API handlers call.  Services receive the shared
``Database`` handle on construction.
"""

from .entity_service import EntityService
from .finding_service import FindingService
from .researcher_service import ResearcherService
from .subject_service import SubjectService

__all__ = ["EntityService", "FindingService", "ResearcherService", "SubjectService"]
