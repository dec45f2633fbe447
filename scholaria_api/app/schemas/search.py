"""
Pydantic models for search requests and responses.

``SearchOptions`` is the canonical, already bounded form of a search
request produced by ``core.search_options.normalize_search_options``.
It is echoed back to clients next to the result list so they can see
which defaults were applied.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class SearchOptions(BaseModel):
    """Normalized search specification."""

    filter: Dict[str, Any] = Field(default_factory=dict, example={"institution": "Universal Exports"})
    fields: str = Field("", example="first_name,last_name,created_at")
    page: int = Field(1, ge=1, example=1)
    limit: int = Field(..., ge=1, example=20)
    sort: str = Field(..., example="-updated_at")

    @property
    def skip(self) -> int:
        """Number of records to skip for ``page``; never negative."""
        return max(0, self.limit * (self.page - 1))

    @property
    def projection(self) -> List[str]:
        """``fields`` as a list; empty means every field."""
        return [name for name in self.fields.split(",") if name]


class SearchResponse(BaseModel):
    """Search result envelope: the options used and the matching records."""

    options: SearchOptions
    result: List[Dict[str, Any]]
