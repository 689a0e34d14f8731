"""
Student lookup and persistence used by the assignment coordinator.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.offices.errors import NotFoundError
from app.features.students.models import Student


async def find_by_id(db: AsyncSession, student_id: str) -> Student | None:
    result = await db.execute(select(Student).where(Student.id == student_id))
    return result.scalar_one_or_none()


async def find_by_matric(db: AsyncSession, matric_number: str) -> Student | None:
    result = await db.execute(
        select(Student).where(Student.matric_number == matric_number.strip())
    )
    return result.scalar_one_or_none()


async def resolve(db: AsyncSession, student_ref: str) -> Student:
    """
    Find a student by ULID or matric number.
    
    Raises:
        NotFoundError: if neither lookup matches
    """
    student = await find_by_id(db, student_ref)
    if student is None:
        student = await find_by_matric(db, student_ref)
    if student is None:
        raise NotFoundError("student", student_ref)
    return student


def save(db: AsyncSession, student: Student) -> None:
    """Stage the student in the caller's transaction and bump its version."""
    student.touch()
    db.add(student)
