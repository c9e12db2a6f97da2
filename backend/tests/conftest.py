"""
Shared test fixtures — in-memory SQLite async database + FastAPI test client.

Strategy:
1. Set DATABASE_URL to SQLite before anything under auditready loads
2. Build a test engine on a single shared connection (StaticPool)
3. Override the get_session dependency so every router uses it
"""
import os
from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# ── 1. Environment ──
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DEBUG"] = "false"

# ── 2. Test engine (SQLite in-memory) ──
TEST_ENGINE = create_async_engine(
    "sqlite+aiosqlite://",
    echo=False,
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)

TestSession = async_sessionmaker(
    TEST_ENGINE,
    class_=AsyncSession,
    expire_on_commit=False,
)

# ── 3. Now import the app ──
from auditready.database import get_session  # noqa: E402
from auditready.main import app as fastapi_app  # noqa: E402
from auditready.models import Base  # noqa: E402


async def _test_get_session() -> AsyncGenerator[AsyncSession, None]:
    async with TestSession() as session:
        yield session


fastapi_app.dependency_overrides[get_session] = _test_get_session


# ── Fixtures ──

@pytest_asyncio.fixture(autouse=True)
async def setup_database():
    """Create all tables before each test, drop after."""
    async with TEST_ENGINE.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with TEST_ENGINE.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSession() as session:
        yield session


# ── Seed data helpers ──

@pytest_asyncio.fixture
async def seed_standards(db: AsyncSession):
    """Two standards: ISO 27001 (4 requirements) and GDPR (2 requirements)."""
    from auditready.models import Requirement, RequirementHistory, Standard

    iso = Standard(name="ISO/IEC 27001", version="2022", type="framework", category="Security")
    gdpr = Standard(name="GDPR", version="2016/679", type="regulation", category="Privacy")
    db.add_all([iso, gdpr])
    await db.flush()

    rows = [
        (iso.id, "A.5", "A.5.1", "Policies", "fulfilled"),
        (iso.id, "A.5", "A.5.15", "Access control", "fulfilled"),
        (iso.id, "A.8", "A.8.13", "Backup", "partially-fulfilled"),
        (iso.id, "A.8", "A.8.15", "Logging", "not-fulfilled"),
        (gdpr.id, "Chapter II", "Art. 5", "Principles", "fulfilled"),
        (gdpr.id, "Chapter IV", "Art. 37", "DPO", "not-applicable"),
    ]
    req_ids = []
    for std_id, section, code, name, status in rows:
        r = Requirement(standard_id=std_id, section=section, code=code, name=name, status=status)
        db.add(r)
        await db.flush()
        db.add(RequirementHistory(requirement_id=r.id, status=status, comment="Initial status"))
        req_ids.append(r.id)

    await db.commit()
    return {"iso": iso.id, "gdpr": gdpr.id, "requirements": req_ids}
