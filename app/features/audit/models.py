"""
Audit log of changes to offices and assignments.
"""
from typing import Any, Dict
from sqlalchemy import String, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base, TimestampMixin, generate_ulid


class AuditLog(Base, TimestampMixin):
    """
    Tracks who did what to which role, and when.
    """
    __tablename__ = "audit_logs"
    
    # Primary key using ULID
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    
    # Actor (token subject), null for startup seeding and scripts
    actor: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    
    # Action details
    action: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    resource_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    resource_id: Mapped[str | None] = mapped_column(String(26), nullable=True, index=True)
    details: Mapped[Dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    
    def __repr__(self) -> str:
        return f"<AuditLog(id={self.id}, actor={self.actor}, action={self.action}, resource={self.resource_type})>"
