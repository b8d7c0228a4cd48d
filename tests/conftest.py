"""Shared test fixtures — async DB, client, auth helpers, factories.

Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import os

# Set test settings before any other import touches pydantic-settings
os.environ.setdefault("JWT_SECRET", "test-secret-for-ci-do-not-use-in-production")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import uuid
from datetime import date, datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from hr_backend.auth.schemas import Caller
from hr_backend.common.constants import UserRole
from hr_backend.config import settings
from hr_backend.database import Base, get_db
from hr_backend.main import create_app

# Import ALL model modules so every table is registered on Base.metadata
import hr_backend.auth.models  # noqa: F401
import hr_backend.core_hr.models  # noqa: F401
import hr_backend.absence.models  # noqa: F401
import hr_backend.feedback.models  # noqa: F401

# ── SQLite compat: compile PG-specific types ────────────────────────

from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.ext.compiler import compiles


@compiles(PG_UUID, "sqlite")
def _uuid_sqlite(element, compiler, **kw):
    return "CHAR(36)"


# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enforce ON DELETE CASCADE / SET NULL the way PostgreSQL does
@event.listens_for(engine.sync_engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Start every test with empty limiter storage and limiting switched off."""
    from hr_backend.common.rate_limit import limiter

    limiter.reset()
    limiter.enabled = False
    yield
    limiter.enabled = True


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance with DB dependency overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Model factories ─────────────────────────────────────────────────

def _make_employee(
    *,
    first_name: str = "Test",
    last_name: str = "User",
    email: Optional[str] = None,
    position: str = "Engineer",
    department: str = "Engineering",
    manager_id: Optional[uuid.UUID] = None,
) -> dict:
    return dict(
        id=uuid.uuid4(),
        first_name=first_name,
        last_name=last_name,
        email=email or f"{first_name.lower()}.{uuid.uuid4().hex[:6]}@acme.io",
        position=position,
        department=department,
        hire_date=date(2024, 1, 15),
        salary=50000.0,
        manager_id=manager_id,
    )


async def _seed_employee(db: AsyncSession, **kwargs):
    """Insert an employee (no teams) and return the ORM object."""
    from hr_backend.core_hr.models import Employee

    emp = Employee(**_make_employee(**kwargs))
    db.add(emp)
    await db.flush()
    return emp


async def _seed_team(db: AsyncSession, name: str = "Platform", *, manager=None, members=()):
    from hr_backend.core_hr.models import Team

    team = Team(id=uuid.uuid4(), name=name, manager=manager, members=list(members))
    db.add(team)
    await db.flush()
    return team


async def _seed_user(
    db: AsyncSession,
    username: str,
    role: UserRole = UserRole.employee,
    *,
    employee_id: Optional[uuid.UUID] = None,
    password: str = "correct-horse-battery",
):
    from hr_backend.auth.service import create_user

    return await create_user(
        db, username=username, password=password, role=role, employee_id=employee_id,
    )


def _caller(role: UserRole, employee_id: Optional[uuid.UUID] = None, username: str = "tester") -> Caller:
    return Caller(username=username, role=role, employee_id=employee_id)


# ── Auth helpers ────────────────────────────────────────────────────

def create_access_token(
    username: str,
    role: UserRole = UserRole.employee,
    expired: bool = False,
    token_type: str = "access",
) -> str:
    """Generate a JWT access token for testing."""
    if expired:
        exp = datetime.now(timezone.utc) - timedelta(hours=1)
    else:
        exp = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRY_HOURS)
    payload = {
        "sub": username,
        "role": role.value,
        "type": token_type,
        "exp": exp,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def _auth_headers(username: str, role: UserRole = UserRole.employee) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(username, role)}"}


async def _login_as(
    db: AsyncSession,
    username: str,
    role: UserRole,
    *,
    employee=None,
) -> dict[str, str]:
    """Persist a user (optionally linked to ``employee``) and return its bearer headers."""
    await _seed_user(db, username, role, employee_id=employee.id if employee else None)
    return _auth_headers(username, role)


@pytest.fixture
async def hr_headers(db) -> dict[str, str]:
    """HR account without an employee profile, committed for API use."""
    headers = await _login_as(db, "hr.admin", UserRole.hr)
    await db.commit()
    return headers
