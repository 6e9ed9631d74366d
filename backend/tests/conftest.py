"""
Fleet Management API — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:   AsyncMock session (no database)
    ├── db_session:        real AsyncSession on an in-memory SQLite database,
    │                      schema created and roles seeded
    ├── fleet_data:        db_session plus taxis 7 and 8 with sample positions
    ├── password_hasher:   argon2 hasher with minimal cost parameters
    ├── auth_service:      AuthService using the fast hasher
    ├── mock_email_service
    └── test_client:       HTTPX AsyncClient against the FastAPI app, with the
                           session, auth and email dependencies overridden
"""

import os
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

# Must be set before any fleet_api import: settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["MAIL_HOST"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from argon2 import PasswordHasher
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fleet_api.database import Base
from fleet_api.models import Role, RoleName, Taxi, Trajectory
from fleet_api.services.auth_service import AuthService
from fleet_api.services.email_service import EmailService
from fleet_api.services.token_service import TokenIssuer

TEST_SECRET = "test-secret-key-not-for-production"


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.return_value.scalar.return_value = True
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_session():
    """In-memory SQLite database with every table created and both roles seeded."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        session.add_all([Role(role_name=RoleName.ADMIN), Role(role_name=RoleName.USER)])
        await session.commit()
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def fleet_data(db_session):
    """
    Taxi 7 (plate "ABC-7007") and taxi 8 (plate "XYZ-8008").

    Taxi 7 recorded two samples on 01-03-2024 and one on 02-03-2024;
    taxi 8 recorded one sample on 01-03-2024 and one on 03-03-2024.
    """
    taxi_7 = Taxi(id=7, plate="ABC-7007")
    taxi_8 = Taxi(id=8, plate="XYZ-8008")
    db_session.add_all([
        Trajectory(id=1, taxi=taxi_7, date=datetime(2024, 3, 1, 8, 0), latitude=39.90, longitude=116.40),
        Trajectory(id=2, taxi=taxi_7, date=datetime(2024, 3, 1, 9, 30), latitude=39.91, longitude=116.41),
        Trajectory(id=3, taxi=taxi_7, date=datetime(2024, 3, 2, 10, 0), latitude=39.92, longitude=116.42),
        Trajectory(id=4, taxi=taxi_8, date=datetime(2024, 3, 1, 23, 59), latitude=40.00, longitude=116.50),
        Trajectory(id=5, taxi=taxi_8, date=datetime(2024, 3, 3, 7, 15), latitude=40.01, longitude=116.51),
    ])
    await db_session.commit()
    return db_session


@pytest.fixture
def password_hasher():
    """argon2 with minimal cost so hashing does not dominate test time."""
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def token_issuer():
    return TokenIssuer(secret_key=TEST_SECRET, issuer="fleet-management-api")


@pytest.fixture
def auth_service(token_issuer, password_hasher):
    return AuthService(token_issuer=token_issuer, password_hasher=password_hasher)


@pytest.fixture
def mock_email_service():
    service = MagicMock(spec=EmailService)
    service.send_plain_text = AsyncMock()
    service.send_with_static_attachment = AsyncMock()
    service.send_with_excel_attachment = AsyncMock()
    return service


@pytest_asyncio.fixture
async def test_client(fleet_data, auth_service, token_issuer, mock_email_service):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from fleet_api.database import get_db_session
    from fleet_api.dependencies import get_auth_service, get_email_service, get_token_issuer
    from fleet_api.main import app

    async def override_db_session():
        yield fleet_data

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_token_issuer] = lambda: token_issuer
    app.dependency_overrides[get_email_service] = lambda: mock_email_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
