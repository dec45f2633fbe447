"""
Business logic for researchers.

A researcher links to the subjects they work on and the findings they
authored.  Deleting a researcher removes their id from exactly those
subjects and findings.
"""

from ..core.store import RESEARCHER
from .entity_service import EntityService


class ResearcherService(EntityService):
    """Service for researcher records."""

    entity_type = RESEARCHER
    default_fields = ("first_name", "last_name", "institution", "orcid_id", "created_at", "updated_at")
