"""
Shared pytest fixtures for the grievance portal test suite.

Every test gets a fresh in-memory SQLite database. ``db`` is a session for
service level tests, ``client`` an httpx AsyncClient talking to the app
in-process with the app's session dependency pointed at the same database.
"""
import os

os.environ.setdefault("DATABASE_URI", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_FILE", "")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from grievance_portal.core.config import settings
from grievance_portal.crud.user import create_user
from grievance_portal.db.init_db import init_db
from grievance_portal.db.session import get_db
from grievance_portal.models import UserRole
from grievance_portal.services import grievances
from main import app


@pytest.fixture(autouse=True)
def lifecycle_settings(monkeypatch):
    """Demo identities on, strict transitions; tests flip these as needed."""
    monkeypatch.setattr(settings, "ALLOW_DEFAULT_IDENTITIES", True)
    monkeypatch.setattr(settings, "PERMISSIVE_STATUS_TRANSITIONS", False)
    return settings


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def grievance_payload():
    """A valid grievance body without the submitter's contact fields."""
    return {
        "title": "No water supply for a week",
        "category": "Water Supply",
        "description": (
            "The hand pump near the primary school has been dry for seven days "
            "and families are walking two kilometres for drinking water."
        ),
        "villageName": "Rampur",
        "evidenceFiles": ["https://files.example.org/pump-1.jpg"],
    }


@pytest_asyncio.fixture
async def citizen(db):
    user = await create_user(
        db,
        {
            "username": "asha.devi",
            "password": "s3cret-pass",
            "full_name": "Asha Devi",
            "mobile_number": "+911234567890",
            "village_name": "Rampur",
            "role": UserRole.CITIZEN,
        },
    )
    await db.commit()
    return user


@pytest_asyncio.fixture
async def officer(db):
    user = await create_user(
        db,
        {
            "username": "ravi.officer",
            "password": "s3cret-pass",
            "full_name": "Ravi Kumar",
            "mobile_number": "+919812345678",
            "role": UserRole.OFFICIAL,
        },
    )
    await db.commit()
    return user


@pytest_asyncio.fixture
async def make_grievance(db, citizen, grievance_payload):
    """Create grievances through the lifecycle service."""

    async def _make(**overrides):
        return await grievances.create(db, {**grievance_payload, **overrides}, owner=citizen)

    return _make
