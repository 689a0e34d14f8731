"""
Role and assignment API routes.
"""
from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import config
from app.core.database.engine import get_db
from app.core.rate_limit import limiter
from app.core.security import Principal, get_current_principal, get_current_admin
from app.features.offices import coordinator, ledger, registry
from app.features.offices.catalog import RoleCategory, LEVELS
from app.features.offices.schemas import (
    AssignStudentToRole,
    AssignmentRecordResponse,
    CatalogReportResponse,
    RolePermissionsUpdate,
    RoleResponse,
    RoleWithHistory,
    parse_academic_session,
)
from app.features.offices.errors import ValidationError


router = APIRouter()


# ============================================================================
# Role Routes
# ============================================================================

@router.get("/", response_model=List[RoleResponse])
async def list_roles(
    db: Annotated[AsyncSession, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    category: Optional[RoleCategory] = None,
    level: Optional[str] = None,
    vacant: bool = False,
):
    """List catalog roles with optional filtering."""
    if level is not None and level not in LEVELS:
        raise ValidationError(f"Unknown level {level!r}")
    return await registry.list_roles(db, category=category, level=level, vacant_only=vacant)


@router.get("/lookup", response_model=RoleResponse)
async def lookup_role(
    db: Annotated[AsyncSession, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    category: str,
    office: str,
    level: Optional[str] = None,
):
    """Find a role by category, office and level."""
    return await registry.resolve(db, category, office, level)


@router.post("/catalog", response_model=CatalogReportResponse)
async def ensure_catalog(
    db: Annotated[AsyncSession, Depends(get_db)],
    admin: Annotated[Principal, Depends(get_current_admin)],
):
    """Create any missing catalog offices (admin only). Safe to repeat."""
    report = await registry.ensure_catalog(db, actor=admin.subject)
    return CatalogReportResponse(created=report.created, existing=report.existing)


@router.get("/{role_id}", response_model=RoleWithHistory)
async def get_role(
    role_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
):
    """Get a role with its assignment history."""
    return await registry.get_role(db, role_id)


@router.get("/{role_id}/history", response_model=List[AssignmentRecordResponse])
async def get_role_history(
    role_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    academic_session: Optional[str] = None,
):
    """Assignment history of a role, oldest first, optionally for one session."""
    if academic_session is not None:
        academic_session = parse_academic_session(academic_session)
    role = await registry.get_role(db, role_id)
    return ledger.history(role, academic_session)


@router.put("/{role_id}/permissions", response_model=RoleResponse)
async def update_role_permissions(
    role_id: str,
    update: RolePermissionsUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    admin: Annotated[Principal, Depends(get_current_admin)],
):
    """Replace the permissions of a role (admin only)."""
    role = await registry.get_role(db, role_id)
    return await registry.set_permissions(
        db, role, [p.model_dump() for p in update.permissions], actor=admin.subject
    )


# ============================================================================
# Assignment Routes
# ============================================================================

@router.post("/{role_id}/assignments", response_model=AssignmentRecordResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(config.ASSIGNMENT_RATE_LIMIT)
async def assign_student(
    request: Request,
    role_id: str,
    assignment: AssignStudentToRole,
    db: Annotated[AsyncSession, Depends(get_db)],
    admin: Annotated[Principal, Depends(get_current_admin)],
):
    """Assign a student to a role for an academic session (admin only)."""
    return await coordinator.assign(
        db, role_id, assignment.student, assignment.academic_session, actor=admin.subject
    )


@router.delete("/{role_id}/assignments/{student_id}", response_model=List[AssignmentRecordResponse])
@limiter.limit(config.ASSIGNMENT_RATE_LIMIT)
async def remove_student(
    request: Request,
    role_id: str,
    student_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    admin: Annotated[Principal, Depends(get_current_admin)],
    academic_session: str = Query(..., description="Academic session, e.g. 2024/25"),
):
    """Remove a student from a role for an academic session (admin only)."""
    return await coordinator.remove(
        db, role_id, student_id, parse_academic_session(academic_session), actor=admin.subject
    )
