"""
Assignment coordinator: keeps Role and Student consistent.

Each operation runs in the caller's session and commits the role ledger, the
student's denormalized posts/flags and the audit entry in one transaction.
Role and Student rows are versioned, so a request working from a stale copy
fails with ConcurrentModificationError instead of overwriting a concurrent
assignment.
"""
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.features.audit.service import record_audit
from app.features.offices import ledger, registry, restrictions
from app.features.offices.catalog import RoleCategory, flag_for, post_title
from app.features.offices.errors import ConcurrentModificationError, DuplicateAssignmentError
from app.features.offices.models import Role, AssignmentRecord
from app.features.students import directory
from app.features.students.models import Student, StudentPost
from app.utils import get_logger


log = get_logger(__name__)


async def assign(
    db: AsyncSession,
    role_id: str,
    student_ref: str,
    academic_session: str,
    actor: Optional[str] = None,
) -> AssignmentRecord:
    """
    Assign a student (by ID or matric number) to a role for a session.
    
    Assigning to an occupied role hands it over: the previous holder's record
    is ended, their post entry stays as history, and their category flag is
    cleared only if they hold no other active role of that category.
    
    Raises:
        NotFoundError: role or student does not exist
        DuplicateAssignmentError: the student already holds the role for the session
        ConflictingRoleError: the student holds a role in a restricted category
        ConcurrentModificationError: the role or student changed underneath us
    """
    role = await registry.get_role(db, role_id)
    student = await directory.resolve(db, student_ref)
    
    current = ledger.active_record(role, academic_session)
    if current is not None and current.student_id == student.id:
        raise DuplicateAssignmentError(role.id, student.id, academic_session)
    
    await restrictions.check_conflict(db, role, student.id, academic_session)
    
    try:
        displaced = ledger.record_assignment(role, student, academic_session)
        record = role.assignment_history[-1]
        
        student.posts.append(StudentPost(title=post_title(role.category, role.office), academic_session=academic_session))
        flag = flag_for(role.category)
        if flag:
            setattr(student, flag, True)
        directory.save(db, student)
        await db.flush()
        
        for previous in displaced:
            if previous.student_id != student.id:
                await _refresh_flag(db, role.category, previous.student_id)
        
        record_audit(
            db,
            action="assign",
            resource_type="role",
            resource_id=role.id,
            actor=actor,
            details={
                "student_id": student.id,
                "matric_number": student.matric_number,
                "academic_session": academic_session,
                "displaced": [p.student_id for p in displaced],
            },
        )
        await db.commit()
    except StaleDataError:
        await db.rollback()
        log.warning(f"Concurrent modification while assigning role {role_id} to {student_ref}")
        raise ConcurrentModificationError()
    
    log.info(
        f"Assigned {student.matric_number} to {post_title(role.category, role.office)} "
        f"({role.level}) for {academic_session}"
    )
    return record


async def remove(
    db: AsyncSession,
    role_id: str,
    student_ref: str,
    academic_session: str,
    actor: Optional[str] = None,
) -> List[AssignmentRecord]:
    """
    End a student's tenure of a role for a session.
    
    The student may have been deleted since the assignment; the ledger is
    still updated from its snapshot.
    
    Raises:
        NotFoundError: role does not exist
        NoActiveAssignmentError: the student does not hold the role for the session
        ConcurrentModificationError: the role or student changed underneath us
    """
    role = await registry.get_role(db, role_id)
    student = await directory.find_by_id(db, student_ref)
    if student is None:
        student = await directory.find_by_matric(db, student_ref)
    student_id = student.id if student is not None else student_ref
    
    try:
        ended = ledger.record_removal(role, student_id, academic_session)
        
        if student is not None:
            title = post_title(role.category, role.office)
            for post in list(student.posts):
                if post.title == title and post.academic_session == academic_session:
                    student.posts.remove(post)
            directory.save(db, student)
        await db.flush()
        
        if student is not None:
            await _refresh_flag(db, role.category, student.id, student=student)
        
        record_audit(
            db,
            action="remove",
            resource_type="role",
            resource_id=role.id,
            actor=actor,
            details={"student_id": student_id, "academic_session": academic_session},
        )
        await db.commit()
    except StaleDataError:
        await db.rollback()
        log.warning(f"Concurrent modification while removing {student_ref} from role {role_id}")
        raise ConcurrentModificationError()
    
    log.info(
        f"Removed {student_id} from {post_title(role.category, role.office)} "
        f"({role.level}) for {academic_session}"
    )
    return ended


async def _refresh_flag(
    db: AsyncSession,
    category: RoleCategory,
    student_id: str,
    student: Optional[Student] = None,
) -> None:
    """Clear the student's category flag if the ledger shows no active role of that category."""
    flag = flag_for(category)
    if flag is None:
        return
    if student is None:
        student = await directory.find_by_id(db, student_id)
    if student is None or not getattr(student, flag):
        return
    if await ledger.holds_active_role(db, category, student_id):
        return
    setattr(student, flag, False)
    directory.save(db, student)
    await db.flush()
