"""
Assignment ledger: the append-only history of who held which role.

Records are never deleted. Ending a tenure sets `is_active` to False and
stamps `handover_at`; the role's current_* columns always mirror its single
active record, or are both null.
"""
from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.base import utcnow
from app.features.offices.catalog import RoleCategory
from app.features.offices.errors import NoActiveAssignmentError
from app.features.offices.models import Role, AssignmentRecord
from app.features.students.models import Student


def active_records(role: Role) -> List[AssignmentRecord]:
    return [record for record in role.assignment_history if record.is_active]


def active_record(role: Role, academic_session: Optional[str] = None) -> Optional[AssignmentRecord]:
    for record in active_records(role):
        if academic_session is None or record.academic_session == academic_session:
            return record
    return None


def history(role: Role, academic_session: Optional[str] = None) -> List[AssignmentRecord]:
    if academic_session is None:
        return list(role.assignment_history)
    return [r for r in role.assignment_history if r.academic_session == academic_session]


def record_assignment(
    role: Role,
    student: Student,
    academic_session: str,
    when: Optional[datetime] = None,
) -> List[AssignmentRecord]:
    """
    Hand the role over to `student` for `academic_session`.
    
    A role has a single active holder, so every active record is ended first.
    
    Returns:
        The records that were deactivated (the displaced holders)
    """
    now = when or utcnow()
    displaced = active_records(role)
    for record in displaced:
        record.deactivate(now)
    
    role.assignment_history.append(AssignmentRecord(
        student_id=student.id,
        matric_number=student.matric_number,
        full_name=student.full_name,
        academic_session=academic_session,
        assigned_at=now,
        is_active=True,
    ))
    role.current_assignment_id = student.id
    role.current_academic_session = academic_session
    role.touch()
    return displaced


def record_removal(
    role: Role,
    student_id: str,
    academic_session: str,
    when: Optional[datetime] = None,
) -> List[AssignmentRecord]:
    """
    End the student's tenure of the role for the session.
    
    Returns:
        The deactivated records (normally exactly one)
    
    Raises:
        NoActiveAssignmentError: if the student does not hold the role for that session
    """
    now = when or utcnow()
    ended = [
        record for record in active_records(role)
        if record.student_id == student_id and record.academic_session == academic_session
    ]
    if not ended:
        raise NoActiveAssignmentError(role.id, student_id, academic_session)
    
    for record in ended:
        record.deactivate(now)
    
    if role.current_assignment_id == student_id and role.current_academic_session == academic_session:
        role.current_assignment_id = None
        role.current_academic_session = None
    role.touch()
    return ended


async def holds_active_role(
    db: AsyncSession,
    category: RoleCategory,
    student_id: str,
    academic_session: Optional[str] = None,
) -> bool:
    """Whether the student has an active record in any role of the category."""
    stmt = (
        select(AssignmentRecord.id)
        .join(Role, Role.id == AssignmentRecord.role_id)
        .where(
            Role.category == category,
            AssignmentRecord.student_id == student_id,
            AssignmentRecord.is_active.is_(True),
        )
    )
    if academic_session is not None:
        stmt = stmt.where(AssignmentRecord.academic_session == academic_session)
    result = await db.execute(stmt.limit(1))
    return result.first() is not None


async def active_records_for_student(
    db: AsyncSession,
    student_id: str,
    academic_session: Optional[str] = None,
) -> List[Tuple[Role, AssignmentRecord]]:
    stmt = (
        select(Role, AssignmentRecord)
        .join(AssignmentRecord, AssignmentRecord.role_id == Role.id)
        .where(
            AssignmentRecord.student_id == student_id,
            AssignmentRecord.is_active.is_(True),
        )
        .order_by(AssignmentRecord.id)
    )
    if academic_session is not None:
        stmt = stmt.where(AssignmentRecord.academic_session == academic_session)
    result = await db.execute(stmt)
    return [(role, record) for role, record in result.all()]
