"""
Pytest configuration for the offices service.

Every test gets its own SQLite database file so ledger state never leaks
between tests. Environment defaults are set before any app module is
imported because app.core.config reads them at import time.
"""
import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["RATE_LIMIT_ENABLED"] = "0"
os.environ["SEED_ROLES_ON_STARTUP"] = "0"

import httpx  # noqa: E402
import jwt  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport  # noqa: E402

from app.core import config  # noqa: E402
from app.core.database.engine import build_engine, build_session_factory, create_tables, get_db  # noqa: E402
from app.features.offices.registry import ensure_catalog  # noqa: E402
from app.features.students.models import Student  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'offices.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seeded(session_factory):
    """Database with the full office catalog."""
    async with session_factory() as session:
        await ensure_catalog(session)


@pytest.fixture
def make_student(session_factory):
    """Factory persisting a student in its own session and returning its ID."""
    counter = {"n": 0}

    async def _make(first_name: str = "Ada", last_name: str = "Obi", matric_number: str | None = None, level: str = "300") -> str:
        counter["n"] += 1
        async with session_factory() as session:
            student = Student(
                matric_number=matric_number or f"CSC/2021/{counter['n']:03d}",
                first_name=first_name,
                last_name=last_name,
                level=level,
                posts=[],
            )
            session.add(student)
            await session.commit()
            return student.id

    return _make


def make_token(subject: str = "admin-1", roles=("admin",), **claims) -> str:
    payload = {"sub": subject, "roles": list(roles), **claims}
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def member_headers():
    return {"Authorization": f"Bearer {make_token(subject='member-1', roles=('student',))}"}


@pytest.fixture
async def client(session_factory):
    from app.main import app

    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
