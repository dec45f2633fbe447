"""
Business logic for findings (papers).

``publication_date`` is stored as the ISO date string it was given.
"""

from ..core.store import FINDING
from .entity_service import EntityService


class FindingService(EntityService):
    """Service for finding records."""

    entity_type = FINDING
    default_fields = ("title", "abstract", "publication_date", "created_at", "updated_at")
