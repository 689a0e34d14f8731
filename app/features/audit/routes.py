"""
Audit trail API routes.
"""
from typing import Annotated, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.security import Principal, get_current_admin
from app.features.audit.models import AuditLog
from app.features.audit.schemas import AuditLogListResponse, AuditLogResponse


router = APIRouter()


@router.get("/", response_model=AuditLogListResponse)
async def list_audit_logs(
    db: Annotated[AsyncSession, Depends(get_db)],
    admin: Annotated[Principal, Depends(get_current_admin)],
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    action: Optional[str] = None,
    resource_id: Optional[str] = None,
):
    """List audit log entries, newest first (admin only)."""
    stmt = select(AuditLog)
    count_stmt = select(func.count()).select_from(AuditLog)
    
    if action:
        stmt = stmt.where(AuditLog.action == action)
        count_stmt = count_stmt.where(AuditLog.action == action)
    if resource_id:
        stmt = stmt.where(AuditLog.resource_id == resource_id)
        count_stmt = count_stmt.where(AuditLog.resource_id == resource_id)
    
    total = (await db.execute(count_stmt)).scalar_one()
    stmt = (
        stmt.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(stmt)
    
    return AuditLogListResponse(
        items=[AuditLogResponse.model_validate(entry) for entry in result.scalars().all()],
        total=total,
        page=page,
        page_size=page_size,
        pages=(total + page_size - 1) // page_size,
    )
