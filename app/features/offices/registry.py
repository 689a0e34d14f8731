"""
Role registry: seeding and lookup of the office catalog.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.features.audit.service import record_audit
from app.features.offices.catalog import RoleCategory, iter_catalog, validate_entry
from app.features.offices.errors import ConcurrentModificationError, NotFoundError
from app.features.offices.models import Role
from app.utils import get_logger


log = get_logger(__name__)


@dataclass
class CatalogReport:
    created: int = 0
    existing: int = 0


async def ensure_catalog(db: AsyncSession, actor: Optional[str] = None, _retry: bool = True) -> CatalogReport:
    """
    Create every catalog office that does not exist yet.
    
    Safe to run on every startup: offices are matched on
    (category, office, level) and never duplicated. If another process seeds
    at the same time, the unique constraint rejects our batch and we re-read.
    """
    report = CatalogReport()
    result = await db.execute(select(Role.category, Role.office, Role.level))
    existing = {(category, office, level) for category, office, level in result.all()}
    
    for entry in iter_catalog():
        if (entry.category, entry.office, entry.level) in existing:
            log.debug(f"Role '{entry.category.value} - {entry.office}' ({entry.level}) already exists, skipping")
            report.existing += 1
            continue
        
        db.add(Role(
            category=entry.category,
            office=entry.office,
            level=entry.level,
            permissions=[],
            restrictions=entry.restrictions,
            assignment_history=[],
        ))
        report.created += 1
        log.info(f"Created role: {entry.category.value} - {entry.office} ({entry.level})")
    
    if report.created:
        record_audit(db, action="seed", resource_type="role_catalog", actor=actor, details={"created": report.created})
    
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        if not _retry:
            raise
        log.warning("Role catalog was seeded concurrently, re-reading")
        return await ensure_catalog(db, actor=actor, _retry=False)
    
    log.info(f"Role catalog ready: {report.created} created, {report.existing} already present")
    return report


async def list_roles(
    db: AsyncSession,
    category: Optional[RoleCategory] = None,
    level: Optional[str] = None,
    vacant_only: bool = False,
) -> List[Role]:
    stmt = select(Role)
    if category:
        stmt = stmt.where(Role.category == category)
    if level:
        stmt = stmt.where(Role.level == level)
    if vacant_only:
        stmt = stmt.where(Role.current_assignment_id.is_(None))
    
    stmt = stmt.order_by(Role.category, Role.level, Role.office)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_role(db: AsyncSession, role_id: str) -> Role:
    """
    Get a role by ID.
    
    Raises:
        NotFoundError: if no role has this ID
    """
    result = await db.execute(select(Role).where(Role.id == role_id))
    role = result.scalar_one_or_none()
    if role is None:
        raise NotFoundError("role", role_id)
    return role


async def resolve(db: AsyncSession, category: str, office: str, level: Optional[str] = None) -> Role:
    """
    Find a role by its catalog identity.
    
    Raises:
        ValidationError: if the combination is not part of the catalog
        NotFoundError: if the catalog office has not been seeded
    """
    entry = validate_entry(category, office, level)
    result = await db.execute(
        select(Role).where(
            Role.category == entry.category,
            Role.office == entry.office,
            Role.level == entry.level,
        )
    )
    role = result.scalar_one_or_none()
    if role is None:
        raise NotFoundError("role", f"{entry.category.value} - {entry.office} ({entry.level})")
    return role


async def set_permissions(
    db: AsyncSession,
    role: Role,
    permissions: List[Dict[str, str]],
    actor: Optional[str] = None,
) -> Role:
    """Replace the ordered permission list of a role."""
    role.permissions = [
        {"name": p["name"].strip(), "description": p["description"].strip()} for p in permissions
    ]
    role.touch()
    record_audit(
        db,
        action="set_permissions",
        resource_type="role",
        resource_id=role.id,
        actor=actor,
        details={"permissions": [p["name"] for p in role.permissions]},
    )
    try:
        await db.commit()
    except StaleDataError:
        await db.rollback()
        raise ConcurrentModificationError()
    log.info(f"Updated permissions of role {role.id}: {len(role.permissions)} entries")
    return role
