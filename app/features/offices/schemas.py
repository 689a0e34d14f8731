"""
Pydantic schemas for roles and assignments.
"""
import re
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from app.features.offices.catalog import RoleCategory
from app.features.offices.errors import ValidationError


ACADEMIC_SESSION_PATTERN = re.compile(r"^\d{4}/(\d{2}|\d{4})$")


def validate_academic_session(value: str) -> str:
    value = value.strip()
    if not ACADEMIC_SESSION_PATTERN.match(value):
        raise ValueError("Academic session must look like 2024/25 or 2024/2025")
    return value


# ============================================================================
# Role Schemas
# ============================================================================

class RolePermission(BaseModel):
    """A named permission attached to a role."""
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)


class RolePermissionsUpdate(BaseModel):
    """Schema for replacing the permissions of a role."""
    permissions: List[RolePermission] = []


class AssignmentRecordResponse(BaseModel):
    """Schema for one entry of a role's assignment history."""
    id: int
    student_id: str
    matric_number: str
    full_name: str
    academic_session: str
    assigned_at: datetime
    handover_at: Optional[datetime] = None
    is_active: bool
    
    model_config = ConfigDict(from_attributes=True)


class RoleResponse(BaseModel):
    """Schema for role response."""
    id: str
    category: RoleCategory
    office: str
    level: str
    permissions: List[RolePermission] = []
    restrictions: List[RoleCategory] = []
    current_assignment_id: Optional[str] = None
    current_academic_session: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class RoleWithHistory(RoleResponse):
    """Schema for role with its full assignment history."""
    assignment_history: List[AssignmentRecordResponse] = []
    
    model_config = ConfigDict(from_attributes=True)


class CatalogReportResponse(BaseModel):
    created: int
    existing: int


# ============================================================================
# Assignment Schemas
# ============================================================================

class AssignStudentToRole(BaseModel):
    """Schema for assigning a student to a role."""
    student: str = Field(..., min_length=1, description="Student ID or matric number")
    academic_session: str = Field(..., description="Academic session, e.g. 2024/25")
    
    @field_validator("student")
    @classmethod
    def strip_student(cls, v: str) -> str:
        return v.strip()
    
    @field_validator("academic_session")
    @classmethod
    def session_format(cls, v: str) -> str:
        return validate_academic_session(v)


class StudentRoleResponse(BaseModel):
    """An active role held by a student."""
    role: RoleResponse
    assignment: AssignmentRecordResponse


def parse_academic_session(value: str) -> str:
    """Validate a session passed as a query parameter."""
    try:
        return validate_academic_session(value)
    except ValueError as e:
        raise ValidationError(str(e))
