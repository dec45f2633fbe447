"""Pydantic models for subject payloads."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class SubjectCreate(BaseModel):
    """Schema for creating a subject."""

    name: str = Field(..., min_length=1, example="Toxicology")
    field_of_study: str = Field(..., min_length=1, example="Animal Science")
    researchers: List[str] = Field(default_factory=list)
    findings: List[str] = Field(default_factory=list)


class SubjectUpdate(BaseModel):
    """Schema for updating a subject; only provided fields are written."""

    name: Optional[str] = Field(None, min_length=1)
    field_of_study: Optional[str] = Field(None, min_length=1)
    researchers: Optional[List[str]] = None
    findings: Optional[List[str]] = None

    @field_validator("name", "field_of_study")
    @classmethod
    def reject_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("may be omitted but not null")
        return value
