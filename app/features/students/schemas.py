"""
Pydantic schemas for students.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from app.features.offices.catalog import STUDENT_LEVELS


class StudentCreate(BaseModel):
    """Schema for registering a student with the offices service."""
    matric_number: str = Field(..., min_length=1, max_length=30)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    level: Optional[str] = None
    
    @field_validator("matric_number", "first_name", "last_name")
    @classmethod
    def strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v
    
    @field_validator("level")
    @classmethod
    def known_level(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in STUDENT_LEVELS:
            raise ValueError(f"level must be one of {', '.join(STUDENT_LEVELS)}")
        return v


class StudentPostResponse(BaseModel):
    title: str
    academic_session: str
    
    model_config = ConfigDict(from_attributes=True)


class StudentResponse(BaseModel):
    """Schema for student responses."""
    id: str
    matric_number: str
    first_name: str
    last_name: str
    level: Optional[str] = None
    is_executive: bool
    is_senator: bool
    posts: List[StudentPostResponse] = []
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)
