"""
Audit logging helpers.
"""
from typing import Any, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.audit.models import AuditLog
from app.utils import get_logger


log = get_logger(__name__)


def record_audit(
    db: AsyncSession,
    action: str,
    resource_type: str,
    resource_id: Optional[str] = None,
    actor: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """
    Stage an audit log entry in the caller's transaction.
    
    The entry is committed (or rolled back) together with the change it
    describes, so the trail never mentions an operation that did not happen.
    
    Args:
        db: Database session
        action: Action performed (e.g., "assign", "remove", "seed")
        resource_type: Type of resource (e.g., "role", "student")
        resource_id: ID of the resource
        actor: Subject of the token that performed the action
        details: Additional details
    """
    audit_log = AuditLog(
        actor=actor,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        details=details,
    )
    db.add(audit_log)
    log.info(f"Audit: actor={actor} action={action} resource={resource_type}:{resource_id}")
    return audit_log
