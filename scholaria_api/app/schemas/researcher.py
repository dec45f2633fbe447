"""
Pydantic models for researcher payloads.

``ResearcherCreate`` requires the same non-empty identity fields as
``ResearcherUpdate`` accepts optionally.  Reference sets are lists of
subject and finding ids.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ResearcherCreate(BaseModel):
    """Schema for creating a researcher."""

    first_name: str = Field(..., min_length=1, example="James")
    last_name: str = Field(..., min_length=1, example="Bond")
    institution: str = Field(..., min_length=1, example="Universal Exports")
    orcid_id: str = Field(..., min_length=1, example="0000-0002-1825-0097")
    subjects: List[str] = Field(default_factory=list)
    findings: List[str] = Field(default_factory=list)


class ResearcherUpdate(BaseModel):
    """Schema for updating a researcher.

    All fields are optional; only provided fields will be updated.
    """

    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    institution: Optional[str] = Field(None, min_length=1)
    orcid_id: Optional[str] = Field(None, min_length=1)
    subjects: Optional[List[str]] = None
    findings: Optional[List[str]] = None

    @field_validator("first_name", "last_name", "institution", "orcid_id")
    @classmethod
    def reject_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("may be omitted but not null")
        return value
