"""Business logic for subjects (fields of research)."""

from ..core.store import SUBJECT
from .entity_service import EntityService


class SubjectService(EntityService):
    """Service for subject records."""

    entity_type = SUBJECT
    default_fields = ("name", "field_of_study", "created_at", "updated_at")
