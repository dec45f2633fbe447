"""
Error hierarchy for the Scholaria API.

Every error raised by the core derives from ``ScholariaError`` and
carries a machine readable ``code`` and the HTTP status the API layer
should answer with.  ``to_response`` produces the JSON body rendered by
the global exception handler in ``main``.

``NotFound`` never reaches API clients through the services: they
translate it into an empty object.  It is still part of the hierarchy
because the store raises it from its point operations.
"""

from typing import Any, Dict, Optional


class ScholariaError(Exception):
    """Base exception for all Scholaria errors."""

    code = "scholaria_error"
    http_status = 500

    def __init__(self, message: str, code: Optional[str] = None, http_status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status

    def to_response(self) -> Dict[str, Any]:
        """Convert to the REST error envelope."""
        return {"error": {"code": self.code, "message": self.message}}


class StoreError(ScholariaError):
    """The record store rejected or failed an operation."""

    code = "store_error"
    http_status = 500


class StoreUnavailable(StoreError):
    """The store cannot be reached (not connected, IO failure)."""

    code = "store_unavailable"
    http_status = 503


class DuplicateError(StoreError):
    """An insert collided with an existing identifier."""

    code = "duplicate"
    http_status = 409


class NotFound(ScholariaError):
    """No record matched a point lookup, update or delete."""

    code = "not_found"
    http_status = 404


class PartialCascadeFailure(ScholariaError):
    """A reference pull failed after the primary delete succeeded.

    The deleted record is gone; some neighbours may still list its id.
    ``failed_step`` names the entity type whose pull failed so callers
    can reconcile.
    """

    code = "partial_cascade_failure"
    http_status = 500

    def __init__(self, entity: str, record_id: str, failed_step: str, reason: str = ""):
        message = (
            f"{entity} {record_id} was deleted but removing its references "
            f"from {failed_step} failed"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.entity = entity
        self.record_id = record_id
        self.failed_step = failed_step

    def to_response(self) -> Dict[str, Any]:
        body = super().to_response()
        body["error"]["context"] = {
            "entity": self.entity,
            "id": self.record_id,
            "failed_step": self.failed_step,
        }
        return body
