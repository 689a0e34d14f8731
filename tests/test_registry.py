"""
Role registry: catalog seeding and lookups.
"""
import pytest
from sqlalchemy import func, select

from app.features.audit.models import AuditLog
from app.features.offices import registry
from app.features.offices.catalog import RoleCategory
from app.features.offices.errors import NotFoundError, ValidationError
from app.features.offices.models import Role

pytestmark = pytest.mark.anyio


async def _role_count(db) -> int:
    return (await db.execute(select(func.count()).select_from(Role))).scalar_one()


async def test_ensure_catalog_creates_every_office(db):
    report = await registry.ensure_catalog(db)

    assert report.created == 44
    assert report.existing == 0
    assert await _role_count(db) == 44


async def test_ensure_catalog_is_idempotent(session_factory):
    async with session_factory() as db:
        await registry.ensure_catalog(db)
    async with session_factory() as db:
        report = await registry.ensure_catalog(db)
        assert report.created == 0
        assert report.existing == 44
        assert await _role_count(db) == 44

        duplicates = await db.execute(
            select(Role.category, Role.office, Role.level)
            .group_by(Role.category, Role.office, Role.level)
            .having(func.count() > 1)
        )
        assert duplicates.all() == []


async def test_ensure_catalog_only_fills_gaps(db, seeded):
    role = await registry.resolve(db, "Executive", "Treasurer")
    await db.delete(role)
    await db.commit()

    report = await registry.ensure_catalog(db)

    assert report.created == 1
    assert (await registry.resolve(db, "Executive", "Treasurer")).office == "Treasurer"


async def test_seeding_is_audited_once(session_factory):
    async with session_factory() as db:
        await registry.ensure_catalog(db)
        await registry.ensure_catalog(db)
        result = await db.execute(select(AuditLog).where(AuditLog.action == "seed"))
        entries = result.scalars().all()
    assert len(entries) == 1
    assert entries[0].details == {"created": 44}


async def test_concurrent_seeding_is_retried_without_duplicates(session_factory, monkeypatch):
    async with session_factory() as db:
        read_catalog = db.execute
        raced = []

        async def execute_then_seed_elsewhere(*args, **kwargs):
            result = await read_catalog(*args, **kwargs)
            if not raced:
                raced.append(True)
                async with session_factory() as other:
                    other.add(Role(
                        category=RoleCategory.EXECUTIVE,
                        office="President",
                        level="All",
                        permissions=[],
                        restrictions=["Senate"],
                        assignment_history=[],
                    ))
                    await other.commit()
            return result

        monkeypatch.setattr(db, "execute", execute_then_seed_elsewhere)
        report = await registry.ensure_catalog(db)
        monkeypatch.undo()

        assert report.created == 43
        assert report.existing == 1
        assert await _role_count(db) == 44
        duplicates = await db.execute(
            select(Role.category, Role.office, Role.level)
            .group_by(Role.category, Role.office, Role.level)
            .having(func.count() > 1)
        )
        assert duplicates.all() == []
        seeds = (await db.execute(select(AuditLog).where(AuditLog.action == "seed"))).scalars().all()
        assert [entry.details for entry in seeds] == [{"created": 43}]


async def test_new_roles_get_default_restrictions_and_no_permissions(db, seeded):
    president = await registry.resolve(db, "Executive", "President")
    clerk = await registry.resolve(db, "Senate", "Clerk", "All")
    rep = await registry.resolve(db, "ClassRep", "Class Representative", "100")

    assert president.restrictions == ["Senate"]
    assert clerk.restrictions == ["Executive"]
    assert rep.restrictions == []
    assert president.permissions == []
    assert president.is_vacant


async def test_resolve_validates_before_lookup(db, seeded):
    with pytest.raises(ValidationError):
        await registry.resolve(db, "Executive", "Chancellor")


async def test_resolve_reports_unseeded_office(db):
    with pytest.raises(NotFoundError):
        await registry.resolve(db, "Executive", "President")


async def test_get_role_unknown_id(db, seeded):
    with pytest.raises(NotFoundError):
        await registry.get_role(db, "01UNKNOWNROLE0000000000000")


async def test_list_roles_filters(db, seeded):
    senate_100 = await registry.list_roles(db, category=RoleCategory.SENATE, level="100")
    assert sorted(r.office for r in senate_100) == ["100L Senator 1", "100L Senator 2", "100L Senator 3"]

    class_reps = await registry.list_roles(db, category=RoleCategory.CLASS_REP)
    assert len(class_reps) == 15

    assert len(await registry.list_roles(db, vacant_only=True)) == 44


async def test_set_permissions_replaces_list_in_order(db, seeded):
    role = await registry.resolve(db, "Executive", "Treasurer")
    version = role.version

    await registry.set_permissions(db, role, [
        {"name": "finance:approve", "description": "Approve expenses"},
        {"name": "finance:read", "description": " View accounts "},
    ])

    reloaded = await registry.get_role(db, role.id)
    assert [p["name"] for p in reloaded.permissions] == ["finance:approve", "finance:read"]
    assert reloaded.permissions[1]["description"] == "View accounts"
    assert reloaded.version == version + 1
