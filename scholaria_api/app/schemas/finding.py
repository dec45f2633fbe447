"""
Pydantic models for finding payloads.

A finding is a published paper: title, abstract and the date it was
published, linked to its authors and the subjects it covers.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class FindingCreate(BaseModel):
    """Schema for creating a finding."""

    title: str = Field(..., min_length=1, example="Lead exposure in grazing cattle")
    abstract: str = Field(..., min_length=1, example="We measured blood lead levels in ...")
    publication_date: Optional[date] = Field(None, example="2017-02-13")
    researchers: List[str] = Field(default_factory=list)
    subjects: List[str] = Field(default_factory=list)


class FindingUpdate(BaseModel):
    """Schema for updating a finding.

    All fields are optional; only provided fields will be updated.
    """

    title: Optional[str] = Field(None, min_length=1)
    abstract: Optional[str] = Field(None, min_length=1)
    publication_date: Optional[date] = None
    researchers: Optional[List[str]] = None
    subjects: Optional[List[str]] = None

    @field_validator("title", "abstract")
    @classmethod
    def reject_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("may be omitted but not null")
        return value
