"""
Category restrictions between roles.

A role lists the categories its holder may not also hold in the same
academic session (Executive and Senate exclude each other by default).
Categories that are not listed are never checked, so a student may combine
ClassRep offices with each other or with Executive/Senate.
"""
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.offices.catalog import RoleCategory
from app.features.offices.errors import ConflictingRoleError
from app.features.offices.models import Role, AssignmentRecord
from app.utils import get_logger


log = get_logger(__name__)


async def find_conflict(
    db: AsyncSession,
    role: Role,
    student_id: str,
    academic_session: str,
) -> Optional[RoleCategory]:
    """
    Return the first restricted category in which the student holds an active
    role for the session, or None.
    """
    for restricted in role.restrictions:
        category = RoleCategory(restricted)
        stmt = (
            select(AssignmentRecord.id)
            .join(Role, Role.id == AssignmentRecord.role_id)
            .where(
                Role.category == category,
                AssignmentRecord.student_id == student_id,
                AssignmentRecord.academic_session == academic_session,
                AssignmentRecord.is_active.is_(True),
            )
            .limit(1)
        )
        result = await db.execute(stmt)
        if result.first() is not None:
            return category
    return None


async def check_conflict(
    db: AsyncSession,
    role: Role,
    student_id: str,
    academic_session: str,
) -> None:
    """
    Raises:
        ConflictingRoleError: with the blocking category, if the assignment is not allowed
    """
    blocking = await find_conflict(db, role, student_id, academic_session)
    if blocking is not None:
        log.warning(
            f"Student {student_id} blocked from role {role.id} in {academic_session}: "
            f"holds an active {blocking.value} role"
        )
        raise ConflictingRoleError(blocking.value, role_id=role.id)
