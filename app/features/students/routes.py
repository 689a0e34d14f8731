"""
Student routes.
"""
from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.security import Principal, get_current_principal, get_current_admin
from app.features.offices import ledger
from app.features.offices.schemas import (
    AssignmentRecordResponse,
    RoleResponse,
    StudentRoleResponse,
    parse_academic_session,
)
from app.features.students import directory
from app.features.students.models import Student
from app.features.students.schemas import StudentCreate, StudentResponse
from app.utils import get_logger


log = get_logger(__name__)
router = APIRouter(tags=["students"])


@router.post("/", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    student_data: StudentCreate,
    admin: Annotated[Principal, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Register a student (admin only)."""
    if await directory.find_by_matric(db, student_data.matric_number) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Student with this matric number already exists"
        )
    
    student = Student(**student_data.model_dump(), posts=[])
    db.add(student)
    await db.commit()
    log.info(f"Registered student {student.matric_number}")
    return student


@router.get("/{student_ref}", response_model=StudentResponse)
async def get_student(
    student_ref: str,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Get a student by ID or matric number, with posts and office flags."""
    return await directory.resolve(db, student_ref)


@router.get("/{student_ref}/roles", response_model=List[StudentRoleResponse])
async def get_student_roles(
    student_ref: str,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db)],
    academic_session: Optional[str] = None,
):
    """Roles the student currently holds, optionally for one session."""
    if academic_session is not None:
        academic_session = parse_academic_session(academic_session)
    student = await directory.resolve(db, student_ref)
    held = await ledger.active_records_for_student(db, student.id, academic_session)
    return [
        StudentRoleResponse(
            role=RoleResponse.model_validate(role),
            assignment=AssignmentRecordResponse.model_validate(record),
        )
        for role, record in held
    ]
