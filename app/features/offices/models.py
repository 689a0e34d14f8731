"""
Role and AssignmentRecord models.

A Role is one office of the catalog (category, office, level). Its assignment
history is an append-only ledger of AssignmentRecord rows; at most one record
per role is active, and the role's current_* columns mirror it.
"""
from datetime import datetime
from typing import Dict, List
from sqlalchemy import (
    String,
    Integer,
    Boolean,
    ForeignKey,
    JSON,
    DateTime,
    UniqueConstraint,
    Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from app.core.database.base import Base, TimestampMixin, generate_ulid, utcnow
from app.features.offices.catalog import RoleCategory


class Role(Base, TimestampMixin):
    """
    An office that a single student holds per academic session.
    
    `restrictions` lists categories whose active holders may not take this
    role in the same session. It is copied from the catalog defaults when the
    role is created and can be edited per role afterwards.
    """
    __tablename__ = "roles"
    __table_args__ = (
        UniqueConstraint("category", "office", "level", name="uq_roles_category_office_level"),
    )
    
    # Primary key using ULID
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    
    # Identity
    category: Mapped[RoleCategory] = mapped_column(SQLEnum(RoleCategory), nullable=False, index=True)
    office: Mapped[str] = mapped_column(String(100), nullable=False)
    level: Mapped[str] = mapped_column(String(3), nullable=False, index=True)
    
    # Ordered list of {"name": ..., "description": ...}
    permissions: Mapped[List[Dict[str, str]]] = mapped_column(JSON, default=list, nullable=False)
    restrictions: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    
    # Weak reference: no foreign key so removing a student never rewrites the ledger
    current_assignment_id: Mapped[str | None] = mapped_column(String(26), nullable=True, index=True)
    current_academic_session: Mapped[str | None] = mapped_column(String(9), nullable=True)
    
    # Optimistic concurrency counter
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    
    assignment_history: Mapped[list["AssignmentRecord"]] = relationship(
        "AssignmentRecord",
        order_by="AssignmentRecord.id",
        cascade="all, delete-orphan",
        lazy="selectin"
    )
    
    __mapper_args__ = {"version_id_col": version}
    
    @property
    def is_vacant(self) -> bool:
        return self.current_assignment_id is None
    
    def __repr__(self) -> str:
        return f"<Role(id={self.id}, category={self.category.value}, office={self.office!r}, level={self.level})>"


class AssignmentRecord(Base):
    """
    One tenure of a student in a role.
    
    The student's matric number and name are snapshotted when the record is
    created and never follow later changes to the student.
    """
    __tablename__ = "role_assignments"
    
    # Integer key keeps insertion order for the history
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    
    role_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    # Snapshot
    student_id: Mapped[str] = mapped_column(String(26), nullable=False, index=True)
    matric_number: Mapped[str] = mapped_column(String(30), nullable=False)
    full_name: Mapped[str] = mapped_column(String(201), nullable=False)
    academic_session: Mapped[str] = mapped_column(String(9), nullable=False, index=True)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    
    # Tenure state
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    handover_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    
    @validates("student_id", "matric_number", "full_name", "academic_session", "assigned_at")
    def _freeze_snapshot(self, key, value):
        current = self.__dict__.get(key)
        if current is not None and current != value:
            raise ValueError(f"AssignmentRecord.{key} cannot be changed once recorded")
        return value
    
    def deactivate(self, when: datetime | None = None) -> None:
        """End the tenure. The handover time is only ever set once."""
        if not self.is_active:
            return
        self.is_active = False
        self.handover_at = when or utcnow()
    
    def __repr__(self) -> str:
        return (
            f"<AssignmentRecord(role_id={self.role_id}, student_id={self.student_id}, "
            f"academic_session={self.academic_session!r}, is_active={self.is_active})>"
        )
