import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Tests never touch a configured database; each test gets its own in-memory store
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("LOG_FORMAT", "console")

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import metadata  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    # StaticPool keeps the single in-memory connection alive for the whole test
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


def _days_from_now(days: int) -> str:
    return (datetime.now(UTC) + timedelta(days=days)).isoformat()


@pytest.fixture
def days_from_now():
    """ISO timestamp a number of days from now (negative for the past)."""
    return _days_from_now


@pytest.fixture
def sample_provider_data() -> dict:
    """Sample provider data for testing."""
    return {
        "name": "Dr. Sarah Johnson",
        "specialty": "Cardiology",
        "email": "sarah.johnson@healthcare.com",
        "phone": "+1-555-0101",
        "availableHours": {"start": "09:00", "end": "17:00"},
        "availableDays": ["Monday", "Tuesday", "Wednesday"],
    }


@pytest.fixture
def sample_appointment_data() -> dict:
    """Sample appointment data for testing."""
    return {
        "patientName": "John Doe",
        "patientEmail": "john.doe@email.com",
        "patientPhone": "+1 (555) 100-1001",
        "providerName": "Dr. Sarah Johnson",
        "providerSpecialty": "Cardiology",
        "appointmentDate": _days_from_now(3),
        "appointmentTime": "10:00",
        "reason": "Routine heart checkup and ECG",
        "notes": "Patient has history of hypertension",
    }


@pytest_asyncio.fixture
async def created_provider(client: AsyncClient, sample_provider_data: dict) -> dict:
    """Create a provider through the API."""
    response = await client.post("/api/providers", json=sample_provider_data)
    assert response.status_code == 201
    return response.json()["data"]


@pytest_asyncio.fixture
async def created_appointment(client: AsyncClient, sample_appointment_data: dict) -> dict:
    """Create an appointment through the API."""
    response = await client.post("/api/appointments", json=sample_appointment_data)
    assert response.status_code == 201
    return response.json()["data"]
